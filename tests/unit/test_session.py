import random

import pytest

from config.settings import settings
from interview_session import (
    InterviewConfig,
    answered_count,
    create_session,
    generate_interview_questions,
    get_current_question,
    is_interview_complete,
    opening_greeting,
    record_answer,
    skip_question,
)


@pytest.fixture
def session():
    config = InterviewConfig(job_role="Senior Software Engineer", persona="mentor", cv_summary="Python APIs")
    return create_session(config, rng=random.Random(3))


def test_config_defaults_follow_settings():
    config = InterviewConfig(job_role="Developer")
    assert config.persona == settings.PERSONA_DEFAULT
    assert config.language == settings.LANGUAGE_DEFAULT
    assert config.question_count == 5


def test_non_positive_question_count_is_raised_to_one():
    assert InterviewConfig(job_role="Developer", question_count=0).question_count == 1


def test_create_session_copies_config(session):
    assert len(session.questions) == 5
    assert session.current_index == 0
    assert session.answers == ()
    assert session.persona == "mentor"
    assert session.cv_summary == "Python APIs"
    assert session.session_id


def test_question_count_clamped_to_pool():
    config = InterviewConfig(job_role="Product Owner Intern", question_count=40)
    questions = generate_interview_questions(config, rng=random.Random(0))
    assert 0 < len(questions) < 40


def test_record_answer_is_pure(session):
    first = record_answer(session, "answer")
    second = record_answer(session, "answer")
    assert first == second
    assert first is not session
    assert session.current_index == 0 and session.answers == ()
    assert first.current_index == 1 and first.answers == ("answer",)


def test_record_empty_answer_never_fails(session):
    updated = record_answer(session, "")
    assert updated.answers == ("",)
    assert updated.current_index == 1


def test_session_is_frozen(session):
    with pytest.raises(Exception):
        session.current_index = 3


def test_walk_through_questions(session):
    current = session
    seen = []
    while not is_interview_complete(current):
        question = get_current_question(current)
        seen.append(question.id)
        current = record_answer(current, f"answer to {question.id}")
    assert seen == [q.id for q in session.questions]
    assert get_current_question(current) is None
    assert record_answer(current, "late") is current


def test_skip_records_marker_and_does_not_count(session):
    skipped = skip_question(session)
    assert skipped.answers == (settings.SKIP_MARKER,)
    answered = record_answer(record_answer(skipped, "   "), "real answer")
    assert answered_count(answered) == 1


def test_opening_greeting_uses_persona():
    config = InterviewConfig(job_role="Data Analyst", persona="stress")
    assert "Data Analyst" in opening_greeting(config)
