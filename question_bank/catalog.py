"""Static interview question catalog and job-title classification."""
from __future__ import annotations

import random
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field

from config.randomness import resolve_rng

Category = Literal["technical", "behavioral", "situational"]
Level = Literal["fresher", "mid", "senior"]

LEVEL_ORDER: Tuple[str, ...] = ("fresher", "mid", "senior")
GENERAL_BUCKET = "general"
DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "questions.yaml"


class InterviewQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    category: Category
    level: Level
    expected_topics: Tuple[str, ...] = ()
    follow_up: Tuple[str, ...] = ()


class QuestionBank(BaseModel):
    model_config = ConfigDict(frozen=True)

    role_type: str
    display_name: str
    questions: Tuple[InterviewQuestion, ...]


class RoleRule(BaseModel):
    """Keyword rule mapping a job title to a bucket.

    ``any_of`` matches when one keyword appears; ``all_of`` requires one keyword
    from every group. A rule with both must satisfy both.
    """

    model_config = ConfigDict(frozen=True)

    bucket: str
    any_of: Tuple[str, ...] = ()
    all_of: Tuple[Tuple[str, ...], ...] = ()

    def matches(self, title: str) -> bool:
        if not self.any_of and not self.all_of:
            return False
        if self.any_of and not any(word in title for word in self.any_of):
            return False
        return all(any(word in title for word in group) for group in self.all_of)


class QuestionCatalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: int = 1
    banks: Dict[str, QuestionBank]
    role_rules: Tuple[RoleRule, ...] = ()
    level_keywords: Dict[str, Tuple[str, ...]] = Field(default_factory=dict)

    @property
    def general(self) -> QuestionBank:
        return self.banks[GENERAL_BUCKET]

    def bank_for(self, role_type: str) -> QuestionBank:
        return self.banks.get((role_type or "").strip().lower(), self.general)


def load_catalog(path: Optional[Path] = None) -> QuestionCatalog:
    """Parse a catalog YAML file into an immutable ``QuestionCatalog``."""

    source = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    with open(source, "r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    banks = {
        role_type: QuestionBank(
            role_type=role_type,
            display_name=entry.get("display_name", role_type),
            questions=tuple(InterviewQuestion(**item) for item in entry.get("questions", [])),
        )
        for role_type, entry in (raw.get("banks") or {}).items()
    }
    banks.setdefault(GENERAL_BUCKET, QuestionBank(role_type=GENERAL_BUCKET, display_name="General", questions=()))
    return QuestionCatalog(
        version=int(raw.get("version", 1)),
        banks=banks,
        role_rules=tuple(RoleRule(**rule) for rule in raw.get("role_rules", [])),
        level_keywords={key: tuple(words) for key, words in (raw.get("level_keywords") or {}).items()},
    )


@lru_cache(maxsize=1)
def default_catalog() -> QuestionCatalog:
    return load_catalog()


def detect_role_type(job_title: str, catalog: Optional[QuestionCatalog] = None) -> str:
    """Map a free-text job title to a question bank bucket, ``general`` when nothing matches."""

    cat = catalog or default_catalog()
    title = (job_title or "").lower()
    for rule in cat.role_rules:
        if rule.bucket in cat.banks and rule.matches(title):
            return rule.bucket
    return GENERAL_BUCKET


def _has_word(title: str, word: str) -> bool:
    return re.search(r"(?<!\w)" + re.escape(word) + r"(?!\w)", title) is not None


def detect_level(job_title: str, catalog: Optional[QuestionCatalog] = None) -> Level:
    """Seniority from title keywords (whole words); senior keywords win over fresher ones, default ``mid``."""

    cat = catalog or default_catalog()
    title = (job_title or "").lower()
    if any(_has_word(title, word) for word in cat.level_keywords.get("senior", ())):
        return "senior"
    if any(_has_word(title, word) for word in cat.level_keywords.get("fresher", ())):
        return "fresher"
    return "mid"


def _level_rank(level: str) -> int:
    try:
        return LEVEL_ORDER.index(level)
    except ValueError:
        return LEVEL_ORDER.index("mid")


def eligible_questions(role_type: str, level: str, catalog: Optional[QuestionCatalog] = None) -> List[InterviewQuestion]:
    """Role-bank and general questions at or below ``level``, de-duplicated, in catalog order."""

    cat = catalog or default_catalog()
    max_rank = _level_rank(level)
    pool: List[InterviewQuestion] = []
    seen: set[str] = set()
    for bank in (cat.bank_for(role_type), cat.general):
        for question in bank.questions:
            if question.id in seen or _level_rank(question.level) > max_rank:
                continue
            seen.add(question.id)
            pool.append(question)
    return pool


def get_questions_for_interview(
    role_type: str,
    level: str,
    count: int = 5,
    *,
    rng: Optional[random.Random] = None,
    catalog: Optional[QuestionCatalog] = None,
) -> List[InterviewQuestion]:
    """Shuffle the eligible pool and return at most ``count`` questions."""

    if count <= 0:
        return []
    pool = eligible_questions(role_type, level, catalog)
    resolve_rng(rng).shuffle(pool)
    return pool[:count]


__all__ = [
    "Category",
    "GENERAL_BUCKET",
    "InterviewQuestion",
    "LEVEL_ORDER",
    "Level",
    "QuestionBank",
    "QuestionCatalog",
    "RoleRule",
    "default_catalog",
    "detect_level",
    "detect_role_type",
    "eligible_questions",
    "get_questions_for_interview",
    "load_catalog",
]
