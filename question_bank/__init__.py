from __future__ import annotations  # Re-export question_bank public API

from .catalog import (  # noqa: F401
    GENERAL_BUCKET,
    LEVEL_ORDER,
    InterviewQuestion,
    QuestionBank,
    QuestionCatalog,
    default_catalog,
    detect_level,
    detect_role_type,
    eligible_questions,
    get_questions_for_interview,
    load_catalog,
)

__all__ = [
    "GENERAL_BUCKET",
    "LEVEL_ORDER",
    "InterviewQuestion",
    "QuestionBank",
    "QuestionCatalog",
    "default_catalog",
    "detect_level",
    "detect_role_type",
    "eligible_questions",
    "get_questions_for_interview",
    "load_catalog",
]
