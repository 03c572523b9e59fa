import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.registry import FEEDBACK_KEY, OPENING_KEY, unbind_model
from config.settings import settings


@pytest.fixture(autouse=True)
def instant_pacing(monkeypatch):
    monkeypatch.setattr(settings, "THINK_DELAY_MIN_S", 0.0)
    monkeypatch.setattr(settings, "THINK_DELAY_MAX_S", 0.0)
    monkeypatch.setattr(settings, "TRANSITION_PAUSE_S", 0.0)
    yield


@pytest.fixture(autouse=True)
def clean_registry():
    yield
    unbind_model(FEEDBACK_KEY)
    unbind_model(OPENING_KEY)


@pytest.fixture
def rng():
    return random.Random(7)


@pytest.fixture
def strong_answer():
    return (
        "I led a team of 5 engineers and increased deployment frequency by 40% using "
        "automated pipelines, for example reducing release time from 2 weeks to 2 days."
    )


@pytest.fixture
def fake_feedback():
    def _model(**_):
        return {
            "score": 70,
            "summary": "Clear answers with concrete numbers.",
            "strengths": ["Quantified impact"],
            "weaknesses": ["Short on context"],
            "suggestions": ["Open with the situation before the result"],
            "idealResponseTip": "Frame the pipeline story with STAR.",
        }

    return _model
