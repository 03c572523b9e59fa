from __future__ import annotations  # FastAPI server exposing the mock interview engine

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.resume_routes import router as resume_router
from api.routes import router as session_router
from config import LlmRoute, load_config, settings
from feedback import FEEDBACK_TARGET, bind_gateway_feedback
from personas import bind_gateway_opening

logger = logging.getLogger(__name__)

OPENING_TARGET = "personas.opening"

_BINDERS: Tuple[Tuple[str, Callable[[LlmRoute], None]], ...] = (
    (FEEDBACK_TARGET, bind_gateway_feedback),
    (OPENING_TARGET, bind_gateway_opening),
)


def configure_collaborators(path: Optional[Path] = None) -> List[str]:
    """Bind the optional feedback/opening collaborators named in the LLM config file.

    Targets missing from the file stay unbound; the engine then runs on its
    rule-based scoring and static greetings alone.
    """

    source = path or settings.LLM_CONFIG_PATH
    if not source:
        return []
    binders = dict(_BINDERS)
    bound: List[str] = []
    for target, route in load_config(Path(source)).routes_for(binders).items():
        binders[target](route)
        bound.append(target)
        logger.info("Bound %s to route %s (%s)", target, route.name, route.model)
    return bound


def create_app() -> FastAPI:
    application = FastAPI(title="Mock Interview API")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(session_router)
    application.include_router(resume_router)
    configure_collaborators()
    return application


app = create_app()
