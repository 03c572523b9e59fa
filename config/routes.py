"""HTTP routes for the optional collaborators, read from a JSON file.

``registry`` maps a collaborator target (``feedback.generate_feedback``,
``personas.opening``) to a route id in ``llm_routes``. Targets left out of the
file stay unbound.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional

from pydantic import BaseModel, Field, model_validator


class LlmRoute(BaseModel):
    name: str
    base_url: str
    endpoint: str
    model: str
    timeout_s: float = Field(ge=0.1)
    max_retries: int = Field(default=2, ge=0)
    api_key_env: str | None = None
    response_format: str | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)
    sequential: bool = False
    enforce_json: bool = True


class AppConfig(BaseModel):
    llm_routes: Dict[str, LlmRoute] = Field(default_factory=dict)
    registry: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _targets_name_known_routes(self) -> "AppConfig":
        unknown = sorted(f"{target} -> {route_id}" for target, route_id in self.registry.items() if route_id not in self.llm_routes)
        if unknown:
            raise ValueError(f"Registry points at undefined routes: {', '.join(unknown)}")
        return self

    def route_for(self, target: str) -> Optional[LlmRoute]:
        route_id = self.registry.get(target)
        return self.llm_routes[route_id] if route_id is not None else None

    def routes_for(self, targets: Iterable[str]) -> Dict[str, LlmRoute]:
        """Routes for whichever of ``targets`` the file configures, in the given order."""
        found: Dict[str, LlmRoute] = {}
        for target in targets:
            route = self.route_for(target)
            if route is not None:
                found[target] = route
        return found


def load_config(path: Path) -> AppConfig:
    """Parse the collaborator route file; raises ``pydantic.ValidationError`` on a bad file."""

    return AppConfig.model_validate_json(Path(path).read_text(encoding="utf-8"))
