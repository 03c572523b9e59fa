"""Feedback generation and the final interview report.

The rule-based score is always computed locally. Generated feedback is an
optional extra from whatever callable is bound to ``FEEDBACK_KEY``; when none
is bound, or it fails, the report is built from the local score alone.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from config.registry import FEEDBACK_KEY, bind_model, get_model
from config.routes import LlmRoute
from config.settings import settings
from interview_evaluation import score_interview, scoring_config_for
from interview_session import InterviewSession, answered_count
from llm_gateway import call

from .errors import InsufficientResponsesError
from .models import InterviewFeedback, InterviewReport, parse_feedback
from .transcript import build_feedback_prompt, build_transcript

logger = logging.getLogger(__name__)

FEEDBACK_TARGET = "feedback.generate_feedback"


def ensure_enough_responses(session: InterviewSession) -> int:
    answered = answered_count(session)
    required = max(1, settings.MIN_ANSWERS_FOR_FEEDBACK)
    if answered < required:
        raise InsufficientResponsesError(answered, required)
    return answered


def generate_feedback(session: InterviewSession, *, key: str = FEEDBACK_KEY) -> Optional[InterviewFeedback]:
    """Ask the bound collaborator for feedback on ``session``.

    Raises ``InsufficientResponsesError`` before any call when the session has
    too few real answers. Returns ``None`` when nothing is bound or the reply
    cannot be used.
    """

    ensure_enough_responses(session)
    try:
        llm = get_model(key)
    except KeyError:
        logger.debug("No feedback model bound under %s", key)
        return None

    try:
        raw = llm(
            prompt=build_feedback_prompt(session),
            inputs={
                "job_role": session.job_role,
                "persona": session.persona,
                "language": session.language,
                "cv_summary": session.cv_summary,
                "transcript": build_transcript(session),
            },
        )
    except Exception as exc:  # noqa: BLE001
        logger.warning("Feedback collaborator failed for %s: %s", session.session_id, exc)
        return None

    try:
        return parse_feedback(raw)
    except ValueError as exc:
        logger.warning("Malformed feedback for %s: %s", session.session_id, exc)
        return None


def gateway_feedback_model(route: LlmRoute, *, client: Any = None) -> Callable[..., Dict[str, Any]]:
    def _model(*, prompt: str, **_: Any) -> Dict[str, Any]:
        result = call(prompt, InterviewFeedback, cfg=route, client=client)
        return result.model_dump(by_alias=True)

    return _model


def bind_gateway_feedback(route: LlmRoute, *, client: Any = None, key: str = FEEDBACK_KEY) -> None:
    bind_model(key, gateway_feedback_model(route, client=client))


def _merge(*groups: Iterable[str]) -> List[str]:
    merged: List[str] = []
    for group in groups:
        for item in group:
            text = item.strip()
            if text and text not in merged:
                merged.append(text)
    return merged


def build_report(session: InterviewSession, feedback: Optional[InterviewFeedback] = None) -> InterviewReport:
    score = score_interview(session.answers, scoring_config_for(session.job_role, session.cv_summary))
    combined = score.percentage
    if feedback is not None:
        combined = round((score.percentage + feedback.score) / 2)

    return InterviewReport(
        session_id=session.session_id,
        job_role=session.job_role,
        persona=session.persona,
        language=session.language,
        score=score,
        feedback=feedback,
        combined_score=combined,
        strengths=tuple(_merge(score.strengths, feedback.strengths if feedback else ())),
        improvements=tuple(_merge(score.improvements, feedback.weaknesses if feedback else ())),
        suggestions=tuple(_merge(feedback.suggestions if feedback else ())),
        transcript=build_transcript(session),
        answered=answered_count(session),
        total_questions=len(session.questions),
    )


__all__ = [
    "FEEDBACK_TARGET",
    "bind_gateway_feedback",
    "build_report",
    "ensure_enough_responses",
    "gateway_feedback_model",
    "generate_feedback",
]
