from __future__ import annotations  # Re-export resume_screening public API

from .ats import (  # noqa: F401
    COMMON_SKILLS,
    ATSBreakdown,
    ATSIssue,
    ATSScoreResult,
    calculate_ats_score,
    job_description_terms,
)

__all__ = [
    "ATSBreakdown",
    "ATSIssue",
    "ATSScoreResult",
    "COMMON_SKILLS",
    "calculate_ats_score",
    "job_description_terms",
]
