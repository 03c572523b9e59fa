from __future__ import annotations  # Re-export interview_session public API

from .session import (  # noqa: F401
    InterviewConfig,
    InterviewSession,
    answered_count,
    create_session,
    generate_interview_questions,
    get_current_question,
    is_interview_complete,
    is_substantive,
    opening_greeting,
    record_answer,
    skip_question,
)
from .state_machine import (  # noqa: F401
    STATE_LABELS,
    VALID_TRANSITIONS,
    InterviewState,
    InterviewStateMachine,
    can_transition,
    state_label,
)

__all__ = [
    "InterviewConfig",
    "InterviewSession",
    "InterviewState",
    "InterviewStateMachine",
    "STATE_LABELS",
    "VALID_TRANSITIONS",
    "answered_count",
    "can_transition",
    "create_session",
    "generate_interview_questions",
    "get_current_question",
    "is_interview_complete",
    "is_substantive",
    "opening_greeting",
    "record_answer",
    "skip_question",
    "state_label",
]
