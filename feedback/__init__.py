from __future__ import annotations  # Re-export feedback public API

from .aggregator import (  # noqa: F401
    FEEDBACK_TARGET,
    bind_gateway_feedback,
    build_report,
    ensure_enough_responses,
    gateway_feedback_model,
    generate_feedback,
)
from .errors import InsufficientResponsesError  # noqa: F401
from .models import InterviewFeedback, InterviewReport, parse_feedback  # noqa: F401
from .transcript import NO_ANSWER, build_feedback_prompt, build_transcript  # noqa: F401

__all__ = [
    "FEEDBACK_TARGET",
    "InsufficientResponsesError",
    "InterviewFeedback",
    "InterviewReport",
    "NO_ANSWER",
    "bind_gateway_feedback",
    "build_feedback_prompt",
    "build_report",
    "build_transcript",
    "ensure_enough_responses",
    "gateway_feedback_model",
    "generate_feedback",
    "parse_feedback",
]
