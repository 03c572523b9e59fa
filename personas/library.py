"""Persona phrase library: greetings, transitions, challenges and pacing."""
from __future__ import annotations

import random
import time
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, Literal, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

from config.randomness import resolve_rng
from config.settings import settings
from question_bank import InterviewQuestion

QuestionStyle = Literal["encouraging", "neutral", "challenging"]

DEFAULT_PERSONA = "recruiter"
DEFAULT_LANGUAGE = "English"
DEFAULT_PERSONAS_PATH = Path(__file__).resolve().parent / "data" / "personas.yaml"
GENERIC_GREETING = (
    "Hello! Thank you for your time today. I'm looking forward to discussing your "
    "qualifications for the {job_role} position. Let's get started, shall we?"
)

PhrasePool = Dict[str, Tuple[str, ...]]


class PersonaConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    level_label: str = "Standard"
    pressure_level: int = Field(default=5, ge=1, le=10)
    question_style: QuestionStyle = "neutral"
    follow_up_depth: Literal["shallow", "medium", "deep"] = "medium"
    praise_frequency: Literal["frequent", "occasional", "rare"] = "occasional"
    interruption_allowed: bool = False
    greetings: Dict[str, str] = Field(default_factory=dict)
    transitions: PhrasePool = Field(default_factory=dict)
    challenges: PhrasePool = Field(default_factory=dict)
    question_prefixes: PhrasePool = Field(default_factory=dict)


def load_personas(path: Optional[Path] = None) -> Dict[str, PersonaConfig]:
    source = Path(path) if path is not None else DEFAULT_PERSONAS_PATH
    with open(source, "r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    return {
        persona_id: PersonaConfig(id=persona_id, **entry)
        for persona_id, entry in (raw.get("personas") or {}).items()
    }


@lru_cache(maxsize=1)
def default_personas() -> Dict[str, PersonaConfig]:
    return load_personas()


def find_persona(persona_id: str, personas: Optional[Dict[str, PersonaConfig]] = None) -> Optional[PersonaConfig]:
    table = personas if personas is not None else default_personas()
    return table.get((persona_id or "").strip().lower())


def get_persona(persona_id: str, personas: Optional[Dict[str, PersonaConfig]] = None) -> PersonaConfig:
    """Resolve a persona id, falling back to the recruiter persona."""

    table = personas if personas is not None else default_personas()
    return find_persona(persona_id, table) or table[DEFAULT_PERSONA]


def greeting(
    job_role: str,
    persona: str = DEFAULT_PERSONA,
    language: str = DEFAULT_LANGUAGE,
    personas: Optional[Dict[str, PersonaConfig]] = None,
) -> str:
    """Opening line for the persona and language.

    Resolution order: persona in ``language``, persona in English, recruiter in
    English, then a built-in generic greeting.
    """

    table = personas if personas is not None else default_personas()
    known = find_persona(persona, table)
    template = None
    if known is not None:
        template = known.greetings.get(language) or known.greetings.get(DEFAULT_LANGUAGE)
    if not template and DEFAULT_PERSONA in table:
        template = table[DEFAULT_PERSONA].greetings.get(DEFAULT_LANGUAGE)
    return (template or GENERIC_GREETING).replace("{job_role}", job_role or "this")


def _pool(pools: PhrasePool, language: str) -> Tuple[str, ...]:
    return pools.get(language) or pools.get(DEFAULT_LANGUAGE) or ()


def _pick(
    attr: str,
    persona: str,
    language: str,
    rng: Optional[random.Random],
    personas: Optional[Dict[str, PersonaConfig]],
) -> str:
    table = personas if personas is not None else default_personas()
    phrases = _pool(getattr(get_persona(persona, table), attr), language)
    if not phrases and DEFAULT_PERSONA in table:
        phrases = _pool(getattr(table[DEFAULT_PERSONA], attr), DEFAULT_LANGUAGE)
    if not phrases:
        return ""
    return resolve_rng(rng).choice(phrases)


def transition_phrase(
    persona: str,
    language: str = DEFAULT_LANGUAGE,
    rng: Optional[random.Random] = None,
    personas: Optional[Dict[str, PersonaConfig]] = None,
) -> str:
    return _pick("transitions", persona, language, rng, personas)


def challenge_phrase(
    persona: str,
    language: str = DEFAULT_LANGUAGE,
    rng: Optional[random.Random] = None,
    personas: Optional[Dict[str, PersonaConfig]] = None,
) -> str:
    return _pick("challenges", persona, language, rng, personas)


def format_question_naturally(
    question: Union[InterviewQuestion, str],
    persona: str,
    rng: Optional[random.Random] = None,
    language: str = DEFAULT_LANGUAGE,
    personas: Optional[Dict[str, PersonaConfig]] = None,
) -> str:
    """Prefix the literal question text with a persona connective (possibly empty)."""

    text = question.question if isinstance(question, InterviewQuestion) else str(question)
    return _pick("question_prefixes", persona, language, rng, personas) + text


def sample_thinking_delay(rng: Optional[random.Random] = None) -> float:
    """Seconds to pause before the interviewer speaks again.

    Uniform in ``[THINK_DELAY_MIN_S, THINK_DELAY_MAX_S]`` for every persona.
    """

    low = settings.THINK_DELAY_MIN_S
    spread = max(0.0, settings.THINK_DELAY_MAX_S - low)
    return low + resolve_rng(rng).random() * spread


def thinking_delay(
    rng: Optional[random.Random] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> float:
    seconds = sample_thinking_delay(rng)
    sleep(seconds)
    return seconds


def should_challenge(persona: PersonaConfig, answer_quality: float, rng: Optional[random.Random] = None) -> bool:
    """Higher-pressure personas, and weaker answers (quality < 3), challenge more often."""

    threshold = 10 - persona.pressure_level
    quality_factor = 2 if answer_quality < 3 else 0
    return resolve_rng(rng).random() * 10 + quality_factor > threshold


__all__ = [
    "DEFAULT_LANGUAGE",
    "DEFAULT_PERSONA",
    "PersonaConfig",
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
