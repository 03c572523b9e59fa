from __future__ import annotations  # Re-export interview_evaluation public API

from .scoring import (  # noqa: F401
    DIMENSION_MAX,
    INCOMPLETE_FEEDBACK,
    MAX_TOTAL,
    InterviewScore,
    ScoreDimension,
    ScoringConfig,
    extract_cv_keywords,
    extract_expected_skills,
    score_clarity,
    score_confidence,
    score_interview,
    score_relevance,
    score_role_alignment,
    score_structure,
    scoring_config_for,
)

__all__ = [
    "DIMENSION_MAX",
    "INCOMPLETE_FEEDBACK",
    "MAX_TOTAL",
    "InterviewScore",
    "ScoreDimension",
    "ScoringConfig",
    "extract_cv_keywords",
    "extract_expected_skills",
    "score_clarity",
    "score_confidence",
    "score_interview",
    "score_relevance",
    "score_role_alignment",
    "score_structure",
    "scoring_config_for",
]
