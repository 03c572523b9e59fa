from __future__ import annotations

import json
import re
import time
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from interview_evaluation import InterviewScore
from llm_gateway import strip_code_fences

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class InterviewFeedback(BaseModel):  # Shape returned by the feedback collaborator
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    score: int = Field(ge=0, le=100)
    summary: str
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    ideal_response_tip: str = Field(default="", alias="idealResponseTip")

    @field_validator("score", mode="before")
    @classmethod
    def _bound_score(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return int(round(max(0, min(100, value))))
        return value


def parse_feedback(raw: Any) -> InterviewFeedback:
    """Validate a collaborator reply (model, dict, or JSON text with optional fences).

    Raises ``ValueError`` (including pydantic's ``ValidationError``) on malformed output.
    """

    if isinstance(raw, InterviewFeedback):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        text = strip_code_fences(raw)
        match = _JSON_OBJECT.search(text)
        if match is None:
            raise ValueError("Feedback reply contained no JSON object")
        raw = json.loads(match.group(0))
    if not isinstance(raw, dict):
        raise ValueError(f"Unsupported feedback payload: {type(raw).__name__}")
    return InterviewFeedback.model_validate(raw)


class InterviewReport(BaseModel):
    """Final report: the local rule-based score merged with optional model feedback."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    job_role: str
    persona: str
    language: str
    score: InterviewScore
    feedback: Optional[InterviewFeedback] = None
    combined_score: int = Field(ge=0, le=100)
    strengths: Tuple[str, ...] = ()
    improvements: Tuple[str, ...] = ()
    suggestions: Tuple[str, ...] = ()
    transcript: str = ""
    answered: int = 0
    total_questions: int = 0
    generated_at: float = Field(default_factory=time.time)


__all__ = ["InterviewFeedback", "InterviewReport", "parse_feedback"]
