from __future__ import annotations  # Re-export personas public API

from .library import (  # noqa: F401
    DEFAULT_LANGUAGE,
    DEFAULT_PERSONA,
    PersonaConfig,
    challenge_phrase,
    default_personas,
    find_persona,
    format_question_naturally,
    get_persona,
    greeting,
    load_personas,
    sample_thinking_delay,
    should_challenge,
    thinking_delay,
    transition_phrase,
)
from .opening import (  # noqa: F401
    OpeningGenerator,
    OpeningLine,
    RegistryOpeningGenerator,
    StaticOpeningGenerator,
    bind_gateway_opening,
)

__all__ = [
    "DEFAULT_LANGUAGE",
    "DEFAULT_PERSONA",
    "OpeningGenerator",
    "OpeningLine",
    "PersonaConfig",
    "RegistryOpeningGenerator",
    "StaticOpeningGenerator",
    "bind_gateway_opening",
    "challenge_phrase",
    "default_personas",
    "find_persona",
    "format_question_naturally",
    "get_persona",
    "greeting",
    "load_personas",
    "sample_thinking_delay",
    "should_challenge",
    "thinking_delay",
    "transition_phrase",
]
