"""Rule-based ATS resume scorer.

Four sub-scores are computed independently from raw resume text:

* keywords (0-30): job-description overlap, or common skills without one
* impact (0-30): distinct action verbs and quantified results
* formatting (0-20): length and standard section headers
* completeness (0-20): contact, experience, education and skills sections

Issues are generated in that completeness-first order and truncated to five.
"""
from __future__ import annotations

import logging
import math
import re
from typing import List, Literal, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

Severity = Literal["critical", "warning", "info"]

KEYWORDS_MAX = 30
IMPACT_MAX = 30
FORMATTING_MAX = 20
COMPLETENESS_MAX = 20
MAX_ISSUES = 5
MAX_RECOMMENDATIONS = 5

JD_MIN_CHARS = 50
JD_MIN_WORD_LEN = 4
JD_MATCH_THRESHOLD = 0.3

COMMON_SKILLS = (
    "javascript", "typescript", "python", "java", "c++", "react", "angular", "vue",
    "node", "express", "django", "flask", "spring", "sql", "nosql", "mongodb",
    "postgresql", "mysql", "aws", "azure", "gcp", "docker", "kubernetes", "git",
    "agile", "scrum", "leadership", "communication", "problem-solving", "teamwork",
)
MIN_COMMON_SKILLS = 5

ACTION_VERBS = (
    "led", "managed", "developed", "created", "implemented", "designed", "built",
    "improved", "increased", "reduced", "achieved", "delivered", "launched",
    "optimized", "streamlined", "coordinated", "analyzed", "established",
    "generated", "negotiated", "resolved", "trained", "mentored", "automated",
    "architected", "spearheaded",
)
MIN_ACTION_VERBS = 3
ACTION_VERB_CAP = 10

QUANTITATIVE_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\d+(?:\.\d+)?\s?%",
        r"\d+ percent",
        r"\$[\d,]+",
        r"₹[\d,]+",
        r"\b\d+\+? (?:users|customers|clients|people|members|engineers|projects|applications|teams)\b",
        r"\b\d+x\b",
    )
)
MIN_QUANTITATIVE_HITS = 3

FORMATTING_BASELINE = 15
MIN_WORDS = 150
MAX_WORDS = 1000
SECTION_HEADERS = (
    "summary", "objective", "experience", "work experience", "employment",
    "education", "skills", "projects", "certifications", "contact",
)
_HEADER_LINE = re.compile(
    r"^\s*(?:" + "|".join(re.escape(h) for h in SECTION_HEADERS) + r")\b",
    re.IGNORECASE | re.MULTILINE,
)
MIN_HEADERS = 2
GARBAGE_MARKERS = ("$$$", "???")

COMPLETENESS_BASELINE = 5
SECTION_POINTS = 4
REQUIRED_SECTIONS = (
    ("Contact Info", ("email", "phone", "contact", "linkedin", "mobile", "@")),
    ("Experience", ("experience", "employment", "work history")),
    ("Education", ("education", "university", "degree", "college")),
    ("Skills", ("skills", "technologies", "competencies")),
)
NO_EMAIL_PENALTY = 3


class ATSIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    location: str
    description: str
    highlight: str
    suggestion: str
    severity: Severity


class ATSBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    keywords: int = Field(ge=0, le=KEYWORDS_MAX)
    impact: int = Field(ge=0, le=IMPACT_MAX)
    formatting: int = Field(ge=0, le=FORMATTING_MAX)
    completeness: int = Field(ge=0, le=COMPLETENESS_MAX)

    @property
    def total(self) -> int:
        return self.keywords + self.impact + self.formatting + self.completeness


class ATSScoreResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_score: int = Field(ge=0, le=100)
    breakdown: ATSBreakdown
    issues: Tuple[ATSIssue, ...] = ()
    recommendations: Tuple[str, ...] = ()


def _clamp(value: float, upper: int) -> int:
    return int(max(0, min(upper, value)))


def _excerpt(text: str, limit: int = 80) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= limit else flat[: limit - 3] + "..."


def _has_term(lower_text: str, term: str) -> bool:
    if not term[0].isalnum() or not term[-1].isalnum():
        return term in lower_text
    return re.search(r"(?<!\w)" + re.escape(term) + r"(?!\w)", lower_text) is not None


def _completeness(text: str, issues: List[ATSIssue]) -> int:
    lower = text.lower()
    score = COMPLETENESS_BASELINE
    missing = []
    for section, markers in REQUIRED_SECTIONS:
        if any(marker in lower for marker in markers):
            score += SECTION_POINTS
        else:
            missing.append(section)

    if missing:
        names = ", ".join(missing)
        issues.append(
            ATSIssue(
                title="Missing Sections",
                location="structure",
                description=f"Missing: {names}",
                highlight=_excerpt(text) or "(empty resume)",
                suggestion=f"Include {names} so ATS parsers can find them.",
                severity="critical" if len(missing) > 1 else "warning",
            )
        )

    if "@" not in text:
        score -= NO_EMAIL_PENALTY
        issues.append(
            ATSIssue(
                title="Missing Email",
                location="contact",
                description="No email address was found in the resume.",
                highlight=_excerpt(text, 40) or "(empty resume)",
                suggestion="Add a professional email address at the top of the resume.",
                severity="critical",
            )
        )
    return _clamp(score, COMPLETENESS_MAX)


def job_description_terms(job_description: str) -> List[str]:
    """Unique job-description words longer than three characters, in order of appearance."""
    seen: List[str] = []
    for word in re.split(r"\W+", job_description.lower()):
        if len(word) >= JD_MIN_WORD_LEN and word not in seen:
            seen.append(word)
    return seen


def _keywords(text: str, job_description: str, issues: List[ATSIssue], recommendations: List[str]) -> int:
    lower = text.lower()
    if len(job_description.strip()) > JD_MIN_CHARS:
        terms = job_description_terms(job_description)
        matched = [term for term in terms if term in lower]
        ratio = len(matched) / len(terms) if terms else 0.0
        if ratio < JD_MATCH_THRESHOLD:
            absent = [term for term in terms if term not in matched][:8]
            issues.append(
                ATSIssue(
                    title="Low Keyword Match",
                    location="keywords",
                    description=f"Only {round(ratio * 100)}% of job description keywords appear in the resume.",
                    highlight=", ".join(absent),
                    suggestion="Mirror the job description's terminology where it reflects your real experience.",
                    severity="critical",
                )
            )
            recommendations.append("Tailor the resume to this job description by adding its key terms.")
        return _clamp(math.floor(ratio * KEYWORDS_MAX), KEYWORDS_MAX)

    found = [skill for skill in COMMON_SKILLS if _has_term(lower, skill)]
    if len(found) < MIN_COMMON_SKILLS:
        recommendations.append(
            "Add more relevant technical and soft skills (e.g. Python, SQL, AWS, teamwork) to your resume."
        )
    return _clamp(10 + 2 * len(found), KEYWORDS_MAX)


def _impact(text: str, issues: List[ATSIssue]) -> int:
    lower = text.lower()
    score = 10
    verbs = [verb for verb in ACTION_VERBS if _has_term(lower, verb)]
    score += min(len(verbs), ACTION_VERB_CAP)
    if len(verbs) < MIN_ACTION_VERBS:
        issues.append(
            ATSIssue(
                title="Weak Action Verbs",
                location="experience",
                description=f"Only {len(verbs)} strong action verb(s) found.",
                highlight=", ".join(verbs) or _excerpt(text, 40),
                suggestion="Start bullet points with verbs such as Led, Built, Improved or Delivered.",
                severity="warning",
            )
        )

    hits = sum(len(pattern.findall(text)) for pattern in QUANTITATIVE_PATTERNS)
    if hits >= MIN_QUANTITATIVE_HITS:
        score += 10
    else:
        issues.append(
            ATSIssue(
                title="Missing Quantifiable Results",
                location="experience",
                description=f"Found {hits} measurable result(s); recruiters look for numbers.",
                highlight=_excerpt(text, 60),
                suggestion="Quantify achievements with percentages, amounts or counts (e.g. 'cut costs by 20%').",
                severity="critical",
            )
        )
    return _clamp(score, IMPACT_MAX)


def _formatting(text: str, issues: List[ATSIssue], recommendations: List[str]) -> int:
    score = FORMATTING_BASELINE
    words = len(text.split())
    if words < MIN_WORDS:
        score -= 5
        issues.append(
            ATSIssue(
                title="Resume Too Short",
                location="overall",
                description=f"The resume has {words} words; aim for at least {MIN_WORDS}.",
                highlight=_excerpt(text, 60),
                suggestion="Expand on your experience, projects and skills.",
                severity="warning",
            )
        )
    elif words > MAX_WORDS:
        score -= 2
        recommendations.append(f"Consider condensing the resume to under {MAX_WORDS} words.")

    if len(_HEADER_LINE.findall(text)) >= MIN_HEADERS:
        score += 5
    else:
        issues.append(
            ATSIssue(
                title="Missing Section Headers",
                location="formatting",
                description="Standard section headers were not found at the start of lines.",
                highlight=_excerpt(text, 40),
                suggestion="Use clear headers such as Experience, Education and Skills on their own lines.",
                severity="warning",
            )
        )

    garbage = [marker for marker in GARBAGE_MARKERS if marker in text]
    if garbage:
        score -= 3
        issues.append(
            ATSIssue(
                title="Unreadable Characters",
                location="formatting",
                description="Placeholder or garbled characters were found.",
                highlight=", ".join(garbage),
                suggestion="Remove placeholder symbols and re-export the resume as plain text.",
                severity="info",
            )
        )
    return _clamp(score, FORMATTING_MAX)


def calculate_ats_score(resume_text: str, job_description: str = "") -> ATSScoreResult:
    """Score ``resume_text`` (optionally against ``job_description``); never raises."""
    text = resume_text or ""
    issues: List[ATSIssue] = []
    recommendations: List[str] = []

    completeness = _completeness(text, issues)
    keywords = _keywords(text, job_description or "", issues, recommendations)
    impact = _impact(text, issues)
    formatting = _formatting(text, issues, recommendations)

    breakdown = ATSBreakdown(
        keywords=keywords,
        impact=impact,
        formatting=formatting,
        completeness=completeness,
    )
    overall = _clamp(breakdown.total, 100)
    logger.debug("ATS score %s (%s issues)", overall, len(issues))
    return ATSScoreResult(
        overall_score=overall,
        breakdown=breakdown,
        issues=tuple(issues[:MAX_ISSUES]),
        recommendations=tuple(_unique(recommendations)[:MAX_RECOMMENDATIONS]),
    )


def _unique(items: Sequence[str]) -> List[str]:
    out: List[str] = []
    for item in items:
        if item not in out:
            out.append(item)
    return out


__all__ = [
    "ATSBreakdown",
    "ATSIssue",
    "ATSScoreResult",
    "COMMON_SKILLS",
    "calculate_ats_score",
    "job_description_terms",
]
