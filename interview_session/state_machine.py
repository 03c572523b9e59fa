"""Interview lifecycle state machine with an explicit transition table."""
from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Union

from observability import log_event

logger = logging.getLogger(__name__)


class InterviewState(str, Enum):
    IDLE = "IDLE"
    SETUP = "SETUP"
    INITIALIZING = "INITIALIZING"
    ASK_QUESTION = "ASK_QUESTION"
    LISTENING = "LISTENING"
    PROCESSING = "PROCESSING"
    ASK_FOLLOW_UP = "ASK_FOLLOW_UP"
    GENERATING_FEEDBACK = "GENERATING_FEEDBACK"
    PAUSED = "PAUSED"
    COMPLETE = "COMPLETE"


S = InterviewState

# ASK_QUESTION never jumps to feedback. ASK_FOLLOW_UP may end the interview directly.
VALID_TRANSITIONS: Mapping[InterviewState, FrozenSet[InterviewState]] = MappingProxyType(
    {
        S.IDLE: frozenset({S.SETUP}),
        S.SETUP: frozenset({S.INITIALIZING, S.IDLE}),
        S.INITIALIZING: frozenset({S.ASK_QUESTION, S.SETUP, S.IDLE}),
        S.ASK_QUESTION: frozenset({S.LISTENING, S.PAUSED, S.IDLE}),
        S.LISTENING: frozenset({S.PROCESSING, S.GENERATING_FEEDBACK, S.PAUSED, S.IDLE}),
        S.PROCESSING: frozenset({S.ASK_FOLLOW_UP, S.GENERATING_FEEDBACK, S.IDLE}),
        S.ASK_FOLLOW_UP: frozenset({S.LISTENING, S.GENERATING_FEEDBACK, S.PAUSED, S.IDLE}),
        S.PAUSED: frozenset({S.ASK_QUESTION, S.LISTENING, S.ASK_FOLLOW_UP, S.IDLE}),
        S.GENERATING_FEEDBACK: frozenset({S.COMPLETE, S.IDLE}),
        S.COMPLETE: frozenset({S.IDLE, S.SETUP}),
    }
)

STATE_LABELS: Mapping[InterviewState, str] = MappingProxyType(
    {
        S.IDLE: "Ready to Start",
        S.SETUP: "Setting Up",
        S.INITIALIZING: "Preparing...",
        S.ASK_QUESTION: "Interviewer Speaking",
        S.LISTENING: "Listening...",
        S.PROCESSING: "Interviewer is thinking...",
        S.ASK_FOLLOW_UP: "Interviewer Speaking",
        S.GENERATING_FEEDBACK: "Analyzing Performance...",
        S.PAUSED: "Interview Paused",
        S.COMPLETE: "Interview Complete",
    }
)


def _coerce(state: Union[InterviewState, str]) -> InterviewState | None:
    if isinstance(state, InterviewState):
        return state
    try:
        return InterviewState(str(state).upper())
    except ValueError:
        return None


def can_transition(current: Union[InterviewState, str], target: Union[InterviewState, str]) -> bool:
    source, dest = _coerce(current), _coerce(target)
    if source is None or dest is None:
        return False
    return dest in VALID_TRANSITIONS[source]


def state_label(state: Union[InterviewState, str]) -> str:
    resolved = _coerce(state)
    return STATE_LABELS[resolved] if resolved is not None else str(state)


class InterviewStateMachine:
    """Holds the authoritative interview state.

    ``transition_to`` never raises: an illegal target is logged and rejected,
    leaving the state untouched, so callers must check the returned bool.
    """

    def __init__(self, session_id: str = "-") -> None:
        self.session_id = session_id
        self.state = InterviewState.IDLE
        self.history: List[InterviewState] = [InterviewState.IDLE]
        self.question_number = 0
        self.total_questions = 0

    def can_transition_to(self, target: Union[InterviewState, str]) -> bool:
        return can_transition(self.state, target)

    def transition_to(self, target: Union[InterviewState, str]) -> bool:
        dest = _coerce(target)
        if dest is None or not self.can_transition_to(dest):
            logger.warning("Invalid state transition: %s -> %s", self.state.value, getattr(dest, "value", target))
            return False
        previous = self.state
        self.state = dest
        self.history.append(dest)
        log_event("state_transition", self.session_id, from_state=previous.value, to_state=dest.value)
        return True

    def reset(self) -> None:
        self.state = InterviewState.IDLE
        self.history = [InterviewState.IDLE]
        self.question_number = 0
        self.total_questions = 0

    def set_question_count(self, current: int, total: int) -> None:
        self.question_number = current
        self.total_questions = total

    @property
    def is_ai_speaking(self) -> bool:
        return self.state in (InterviewState.ASK_QUESTION, InterviewState.ASK_FOLLOW_UP)

    @property
    def is_user_speaking(self) -> bool:
        return self.state is InterviewState.LISTENING

    @property
    def is_thinking(self) -> bool:
        return self.state is InterviewState.PROCESSING

    def context(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "label": state_label(self.state),
            "question_number": self.question_number,
            "total_questions": self.total_questions,
            "is_ai_speaking": self.is_ai_speaking,
            "is_user_speaking": self.is_user_speaking,
            "is_thinking": self.is_thinking,
        }


__all__ = [
    "InterviewState",
    "InterviewStateMachine",
    "STATE_LABELS",
    "VALID_TRANSITIONS",
    "can_transition",
    "state_label",
]
