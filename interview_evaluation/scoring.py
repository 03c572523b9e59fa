"""Rule-based interview answer scorer.

Five dimensions (Clarity, Relevance, Confidence, Structure, Role Alignment)
are scored on the combined answer text. Each starts from a baseline, is moved
by lexicon hits, then clamped to ``[0, 5]`` and rounded to one decimal. No
model is involved; the same answers always produce the same score.
"""
from __future__ import annotations

import re
from collections import Counter
from functools import lru_cache
from typing import Iterable, List, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from config.settings import settings

DIMENSION_MAX = 5.0
DIMENSION_COUNT = 5
MAX_TOTAL = DIMENSION_MAX * DIMENSION_COUNT
STRENGTH_THRESHOLD = 3.0
IMPROVEMENT_THRESHOLD = 4.0

FILLER_WORDS = (
    "um", "uh", "like", "you know", "basically", "actually", "literally",
    "sort of", "kind of", "i mean", "right", "so yeah", "i guess",
)
CONNECTORS = (
    "because", "therefore", "however", "for example", "specifically",
    "firstly", "secondly", "finally",
)
HEDGES = (
    "maybe", "perhaps", "i think", "i believe", "probably", "might",
    "could be", "not sure", "i guess",
)
ACTION_VERBS = (
    "led", "managed", "developed", "created", "implemented", "designed",
    "built", "improved", "increased", "reduced", "achieved", "delivered",
    "launched", "optimized", "streamlined", "coordinated", "analyzed",
    "established", "generated", "negotiated", "resolved", "trained",
)
OWNERSHIP = ("i led", "i managed", "i built", "i created", "my responsibility", "i was responsible")
WEAK_OPENERS = ("um", "so", "well")

STAR_GROUPS = (
    ("situation", "context", "background", "when i was", "at my previous"),
    ("task", "goal", "objective", "needed to", "had to", "was asked to"),
    ("action", "approach", "decided to", "implemented", "started by"),
    (
        "result", "outcome", "achieved", "led to", "resulted in", "impact",
        "increased", "reduced", "improved", "saved",
    ),
)
EXAMPLE_MARKERS = ("for example", "for instance", "specifically")
SEQUENCE_WORDS = ("first", "then", "next", "after that", "finally", "as a result")

QUANTITATIVE_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\d+\s?%",
        r"\d+ percent",
        r"\$[\d,]+",
        r"₹[\d,]+",
        r"\d+ (?:users|customers|clients|engineers|people|members|developers)",
        r"\d+ (?:days|weeks|months|years)",
        r"\d+x\b",
        r"\b(?:doubled|tripled|halved)\b",
    )
)

SENIOR_ROLE_MARKERS = ("senior", "lead", "manager", "principal")
SENIOR_INDICATORS = (
    "led a team", "managed", "mentored", "strategic", "architecture",
    "stakeholders", "cross-functional",
)
JUNIOR_INDICATORS = ("learned", "assisted", "helped", "supported", "participated")
GROWTH_STEMS = ("learn", "grow", "develop")
TECHNICAL_ROLE_MARKERS = ("developer", "engineer")
TECH_TERMS = ("api", "database", "algorithm", "performance", "testing", "deployment", "architecture")

CV_STOPWORDS = frozenset({"the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"})
CV_KEYWORD_LIMIT = 20
ROLE_SKILLS = (
    ("developer", ("javascript", "python", "java", "react", "node", "sql", "api", "git")),
    ("engineer", ("system", "design", "testing", "deployment", "architecture", "performance")),
    ("manager", ("leadership", "team", "stakeholder", "strategy", "planning", "budget")),
    ("analyst", ("data", "analysis", "excel", "sql", "reporting", "insights")),
    ("designer", ("design", "user", "ux", "ui", "figma", "prototype", "research")),
    ("product", ("roadmap", "user", "stakeholder", "metrics", "agile", "sprint")),
)

CLARITY_BANDS = (
    "Clear and well-structured responses",
    "Reasonably clear, could be more concise",
    "Some clarity issues, consider organizing thoughts better",
    "Responses need more structure and clarity",
)
RELEVANCE_BANDS = (
    "Highly relevant answers aligned with the role",
    "Mostly relevant, some tangential points",
    "Partially relevant, needs more role-specific examples",
    "Answers lack relevance to the target role",
)
CONFIDENCE_BANDS = (
    "Confident and assertive communication",
    "Generally confident with some hesitation",
    "Lacks conviction, use more direct language",
    "Needs to project more confidence",
)
STRUCTURE_BANDS = (
    "Well-structured with clear examples and results",
    "Good structure, could add more specific examples",
    "Basic structure, needs STAR method improvement",
    "Lacks structure, use Situation-Task-Action-Result format",
)
ROLE_ALIGNMENT_BANDS = (
    "Excellent alignment with role expectations",
    "Good fit, some areas could be stronger",
    "Partial alignment, emphasize role-relevant experience",
    "Needs to better demonstrate fit for this role level",
)

OVERALL_BANDS = (
    (80, "Excellent interview performance! You demonstrated strong communication skills and relevant experience."),
    (60, "Good performance with room for improvement. Focus on providing more specific examples."),
    (40, "Fair performance. Work on structuring your answers using the STAR method."),
    (0, "Needs significant improvement. Practice articulating your experience clearly."),
)
INCOMPLETE_STRENGTH = "Unable to assess - no responses provided"
INCOMPLETE_IMPROVEMENT = "Provide complete answers to interview questions"
INCOMPLETE_FEEDBACK = "Interview incomplete - please answer all questions."
DEFAULT_STRENGTH = "Completed the interview questions"


class ScoringConfig(BaseModel):  # Role context for relevance and alignment
    model_config = ConfigDict(frozen=True)

    job_role: str
    cv_keywords: Tuple[str, ...] = ()
    expected_skills: Tuple[str, ...] = ()


class ScoreDimension(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    score: float = Field(ge=0.0, le=DIMENSION_MAX)
    feedback: str


class InterviewScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_score: float = Field(ge=0.0, le=MAX_TOTAL)
    percentage: int = Field(ge=0, le=100)
    dimensions: Tuple[ScoreDimension, ...] = ()
    strengths: Tuple[str, ...] = ()
    improvements: Tuple[str, ...] = ()
    overall_feedback: str


@lru_cache(maxsize=512)
def _phrase_pattern(phrase: str, prefix: bool = False) -> re.Pattern[str]:
    tail = "" if prefix else r"(?!\w)"
    return re.compile(r"(?<!\w)" + re.escape(phrase.lower()) + tail)


def contains_phrase(text: str, phrase: str, *, prefix: bool = False) -> bool:
    """Case-insensitive match of ``phrase`` on word boundaries (``prefix`` allows a longer word)."""
    phrase = phrase.strip()
    if not phrase:
        return False
    return _phrase_pattern(phrase, prefix).search(text.lower()) is not None


def count_phrases(text: str, phrases: Iterable[str]) -> int:
    """Number of distinct phrases from ``phrases`` present in ``text``."""
    return sum(1 for phrase in phrases if contains_phrase(text, phrase))


def quantitative_hits(text: str) -> int:
    return sum(1 for pattern in QUANTITATIVE_PATTERNS if pattern.search(text))


def _finish(name: str, raw: float, bands: Sequence[str]) -> ScoreDimension:
    score = round(max(0.0, min(DIMENSION_MAX, raw)), 1)
    if score >= 4:
        feedback = bands[0]
    elif score >= 3:
        feedback = bands[1]
    elif score >= 2:
        feedback = bands[2]
    else:
        feedback = bands[3]
    return ScoreDimension(name=name, score=score, feedback=feedback)


def score_clarity(answer: str) -> ScoreDimension:
    score = 2.5
    sentences = [part for part in re.split(r"[.!?]+", answer) if part.strip()]
    average = len(answer) / max(len(sentences), 1)
    if 50 < average < 180:
        score += 1
    elif average > 200:
        score -= 0.5

    connectors = count_phrases(answer, CONNECTORS)
    if connectors >= 2:
        score += 0.5
    if connectors >= 4:
        score += 0.5

    fillers = count_phrases(answer, FILLER_WORDS)
    if fillers > 3:
        score -= 1
    if fillers > 6:
        score -= 0.5

    if len(answer) < 50:
        score -= 1
    return _finish("Clarity", score, CLARITY_BANDS)


def score_relevance(answer: str, config: ScoringConfig) -> ScoreDimension:
    score = 2.0
    score += min(count_phrases(answer, config.cv_keywords) * 0.3, 1.5)
    score += min(count_phrases(answer, config.expected_skills) * 0.4, 1.0)

    role_words = config.job_role.split()
    if role_words and contains_phrase(answer, role_words[0]):
        score += 0.5

    if len(answer) < 30:
        score -= 1
    return _finish("Relevance", score, RELEVANCE_BANDS)


def score_confidence(answer: str) -> ScoreDimension:
    score = 3.0
    score -= count_phrases(answer, HEDGES) * 0.4
    score += min(count_phrases(answer, ACTION_VERBS) * 0.3, 1.0)
    score += min(count_phrases(answer, OWNERSHIP) * 0.4, 1.0)

    words = answer.lower().split()
    opener = re.sub(r"\W+$", "", words[0]) if words else ""
    if opener not in WEAK_OPENERS:
        score += 0.3
    return _finish("Confidence", score, CONFIDENCE_BANDS)


def score_structure(answer: str) -> ScoreDimension:
    score = 2.0
    for group in STAR_GROUPS:
        if count_phrases(answer, group):
            score += 0.5

    if count_phrases(answer, EXAMPLE_MARKERS):
        score += 0.5

    hits = quantitative_hits(answer)
    if hits:
        score += 1
    if hits >= 2:
        score += 0.5

    if count_phrases(answer, SEQUENCE_WORDS) >= 2:
        score += 0.5
    return _finish("Structure", score, STRUCTURE_BANDS)


def is_senior_role(job_role: str) -> bool:
    role = job_role.lower()
    return any(marker in role for marker in SENIOR_ROLE_MARKERS)


def score_role_alignment(answer: str, config: ScoringConfig) -> ScoreDimension:
    score = 2.5
    role = config.job_role.lower()

    if is_senior_role(role):
        score += count_phrases(answer, SENIOR_INDICATORS) * 0.5
        score -= count_phrases(answer, JUNIOR_INDICATORS) * 0.3
    elif any(contains_phrase(answer, stem, prefix=True) for stem in GROWTH_STEMS):
        score += 0.5

    if any(marker in role for marker in TECHNICAL_ROLE_MARKERS):
        score += min(count_phrases(answer, TECH_TERMS) * 0.3, 1.0)
    return _finish("Role Alignment", score, ROLE_ALIGNMENT_BANDS)


def extract_cv_keywords(cv_text: str) -> List[str]:
    """Top frequent words (four letters or more, minus stopwords) from CV text."""
    if not cv_text:
        return []
    words = re.sub(r"[^a-z\s]", " ", cv_text.lower()).split()
    counts = Counter(word for word in words if len(word) >= 4 and word not in CV_STOPWORDS)
    return [word for word, _ in counts.most_common(CV_KEYWORD_LIMIT)]


def extract_expected_skills(job_role: str) -> List[str]:
    role = job_role.lower()
    skills: List[str] = []
    for marker, role_skills in ROLE_SKILLS:
        if marker in role:
            skills.extend(skill for skill in role_skills if skill not in skills)
    return skills


def scoring_config_for(job_role: str, cv_summary: str = "") -> ScoringConfig:
    return ScoringConfig(
        job_role=job_role,
        cv_keywords=tuple(extract_cv_keywords(cv_summary)),
        expected_skills=tuple(extract_expected_skills(job_role)),
    )


def _substantive(answers: Iterable[str]) -> List[str]:
    kept = []
    for answer in answers:
        text = (answer or "").strip()
        if text and text != settings.SKIP_MARKER:
            kept.append(text)
    return kept


def overall_feedback_for(percentage: int) -> str:
    for floor, message in OVERALL_BANDS:
        if percentage >= floor:
            return message
    return OVERALL_BANDS[-1][1]


def incomplete_score() -> InterviewScore:
    return InterviewScore(
        total_score=0.0,
        percentage=0,
        dimensions=(),
        strengths=(INCOMPLETE_STRENGTH,),
        improvements=(INCOMPLETE_IMPROVEMENT,),
        overall_feedback=INCOMPLETE_FEEDBACK,
    )


def score_interview(answers: Sequence[str], config: ScoringConfig) -> InterviewScore:
    """Score every recorded answer as one combined response.

    Blank answers and the skip marker are ignored; when nothing is left the
    fixed incomplete result is returned without running any dimension.
    """

    kept = _substantive(answers)
    if not kept:
        return incomplete_score()

    combined = " ".join(kept)
    dimensions = (
        score_clarity(combined),
        score_relevance(combined, config),
        score_confidence(combined),
        score_structure(combined),
        score_role_alignment(combined, config),
    )

    total = round(sum(d.score for d in dimensions), 1)
    percentage = round(100 * total / MAX_TOTAL)

    ranked = sorted(dimensions, key=lambda d: d.score, reverse=True)
    strengths = [d.feedback for d in ranked[:2] if d.score >= STRENGTH_THRESHOLD] or [DEFAULT_STRENGTH]
    lowest = ranked[-1]
    improvements = [lowest.feedback] if lowest.score < IMPROVEMENT_THRESHOLD else []

    return InterviewScore(
        total_score=total,
        percentage=percentage,
        dimensions=dimensions,
        strengths=tuple(strengths),
        improvements=tuple(improvements),
        overall_feedback=overall_feedback_for(percentage),
    )


__all__ = [
    "DIMENSION_MAX",
    "INCOMPLETE_FEEDBACK",
    "InterviewScore",
    "MAX_TOTAL",
    "ScoreDimension",
    "ScoringConfig",
    "contains_phrase",
    "count_phrases",
    "extract_cv_keywords",
    "extract_expected_skills",
    "incomplete_score",
    "is_senior_role",
    "overall_feedback_for",
    "quantitative_hits",
    "score_clarity",
    "score_confidence",
    "score_interview",
    "score_relevance",
    "score_role_alignment",
    "score_structure",
    "scoring_config_for",
]
