"""Immutable interview session values and pure progression helpers."""
from __future__ import annotations

import logging
import random
import time
import uuid
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.settings import settings
from personas import greeting
from question_bank import (
    InterviewQuestion,
    QuestionCatalog,
    detect_level,
    detect_role_type,
    get_questions_for_interview,
)

logger = logging.getLogger(__name__)


class InterviewConfig(BaseModel):
    job_role: str
    language: str = Field(default_factory=lambda: settings.LANGUAGE_DEFAULT)
    persona: str = Field(default_factory=lambda: settings.PERSONA_DEFAULT)
    cv_summary: str = ""
    question_count: int = Field(default_factory=lambda: settings.QUESTION_COUNT)

    @field_validator("question_count")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        return max(1, value)


class InterviewSession(BaseModel):
    """One interview's questions and answers.

    Frozen: every progression helper returns a new session.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    questions: Tuple[InterviewQuestion, ...]
    current_index: int = 0
    answers: Tuple[str, ...] = ()
    job_role: str
    persona: str
    language: str
    cv_summary: str = ""
    started_at: float = Field(default_factory=time.time)


def generate_interview_questions(
    config: InterviewConfig,
    *,
    rng: Optional[random.Random] = None,
    catalog: Optional[QuestionCatalog] = None,
) -> list[InterviewQuestion]:
    role_type = detect_role_type(config.job_role, catalog)
    level = detect_level(config.job_role, catalog)
    return get_questions_for_interview(role_type, level, config.question_count, rng=rng, catalog=catalog)


def create_session(
    config: InterviewConfig,
    *,
    rng: Optional[random.Random] = None,
    catalog: Optional[QuestionCatalog] = None,
) -> InterviewSession:
    questions = generate_interview_questions(config, rng=rng, catalog=catalog)
    return InterviewSession(
        questions=tuple(questions),
        job_role=config.job_role,
        persona=config.persona,
        language=config.language,
        cv_summary=config.cv_summary or "",
    )


def opening_greeting(config: InterviewConfig) -> str:
    return greeting(config.job_role, config.persona, config.language)


def get_current_question(session: InterviewSession) -> Optional[InterviewQuestion]:
    """The question awaiting an answer, or ``None`` once every question is consumed."""
    if session.current_index >= len(session.questions):
        return None
    return session.questions[session.current_index]


def is_interview_complete(session: InterviewSession) -> bool:
    return session.current_index >= len(session.questions)


def record_answer(session: InterviewSession, answer: str) -> InterviewSession:
    """Return a new session with ``answer`` appended and the index advanced.

    A finished session has nothing left to answer and is returned unchanged.
    """

    if is_interview_complete(session):
        logger.warning("Answer ignored for completed session %s", session.session_id)
        return session
    return session.model_copy(
        update={
            "answers": session.answers + (answer or "",),
            "current_index": session.current_index + 1,
        }
    )


def skip_question(session: InterviewSession) -> InterviewSession:
    return record_answer(session, settings.SKIP_MARKER)


def is_substantive(answer: str) -> bool:
    text = (answer or "").strip()
    return bool(text) and text != settings.SKIP_MARKER


def answered_count(session: InterviewSession) -> int:
    """Number of answers that are neither blank nor the skip marker."""
    return sum(1 for answer in session.answers if is_substantive(answer))


__all__ = [
    "InterviewConfig",
    "InterviewSession",
    "answered_count",
    "create_session",
    "generate_interview_questions",
    "get_current_question",
    "is_interview_complete",
    "is_substantive",
    "opening_greeting",
    "record_answer",
    "skip_question",
]
