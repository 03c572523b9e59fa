"""Optional model-written opening line layered over the static persona greeting."""
from __future__ import annotations

import logging
from textwrap import dedent
from typing import Any, Callable, Dict, Protocol

from pydantic import BaseModel

from config.registry import OPENING_KEY, bind_model, get_model
from config.routes import LlmRoute
from llm_gateway import call

logger = logging.getLogger(__name__)


class OpeningGenerator(Protocol):
    def opening(self, config: Any, greeting: str) -> str: ...


class OpeningLine(BaseModel):  # Gateway reply shape
    text: str


class StaticOpeningGenerator:
    """Default: speak the persona greeting unchanged."""

    def opening(self, config: Any, greeting: str) -> str:
        return greeting


class RegistryOpeningGenerator:
    """Ask the model bound to ``OPENING_KEY`` for an opening line.

    Any missing binding, failure, or blank reply falls back to the static greeting.
    """

    def __init__(self, key: str = OPENING_KEY, max_chars: int = 600) -> None:
        self.key = key
        self.max_chars = max_chars

    def opening(self, config: Any, greeting: str) -> str:
        try:
            llm = get_model(self.key)
        except KeyError:
            return greeting

        try:
            raw = llm(inputs=_opening_inputs(config, greeting))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Opening generator failed, using static greeting: %s", exc)
            return greeting

        text = raw.get("text") if isinstance(raw, dict) else raw
        if isinstance(text, str) and text.strip():
            return text.strip()[: self.max_chars]
        return greeting


def _opening_inputs(config: Any, greeting: str) -> Dict[str, str]:
    return {
        "job_role": getattr(config, "job_role", ""),
        "persona": getattr(config, "persona", ""),
        "language": getattr(config, "language", ""),
        "cv_summary": getattr(config, "cv_summary", "") or "",
        "greeting": greeting,
    }


def build_opening_prompt(inputs: Dict[str, str]) -> str:
    return dedent(
        f"""
        You are a {inputs['persona']} interviewer opening a mock interview for the role of {inputs['job_role']}.
        Speak in {inputs['language']}. Candidate background: {inputs['cv_summary'] or 'Not provided'}.
        Rewrite this greeting as one or two natural spoken sentences and end by inviting the candidate to begin:
        {inputs['greeting']}
        """
    ).strip()


def gateway_opening_model(route: LlmRoute, *, client: Any = None) -> Callable[..., Dict[str, Any]]:
    def _model(*, inputs: Dict[str, str], **_: Any) -> Dict[str, Any]:
        return call(build_opening_prompt(inputs), OpeningLine, cfg=route, client=client).model_dump()

    return _model


def bind_gateway_opening(route: LlmRoute, *, client: Any = None, key: str = OPENING_KEY) -> None:
    bind_model(key, gateway_opening_model(route, client=client))


__all__ = [
    "OpeningGenerator",
    "OpeningLine",
    "RegistryOpeningGenerator",
    "StaticOpeningGenerator",
    "bind_gateway_opening",
    "build_opening_prompt",
    "gateway_opening_model",
]
