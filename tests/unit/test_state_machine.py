import itertools
import logging

import pytest

from interview_session import (
    VALID_TRANSITIONS,
    InterviewState,
    InterviewStateMachine,
    can_transition,
    state_label,
)

S = InterviewState

EXPECTED = {
    S.IDLE: {S.SETUP},
    S.SETUP: {S.INITIALIZING, S.IDLE},
    S.INITIALIZING: {S.ASK_QUESTION, S.SETUP, S.IDLE},
    S.ASK_QUESTION: {S.LISTENING, S.PAUSED, S.IDLE},
    S.LISTENING: {S.PROCESSING, S.GENERATING_FEEDBACK, S.PAUSED, S.IDLE},
    S.PROCESSING: {S.ASK_FOLLOW_UP, S.GENERATING_FEEDBACK, S.IDLE},
    S.ASK_FOLLOW_UP: {S.LISTENING, S.GENERATING_FEEDBACK, S.PAUSED, S.IDLE},
    S.PAUSED: {S.ASK_QUESTION, S.LISTENING, S.ASK_FOLLOW_UP, S.IDLE},
    S.GENERATING_FEEDBACK: {S.COMPLETE, S.IDLE},
    S.COMPLETE: {S.IDLE, S.SETUP},
}


def _machine_at(state: InterviewState) -> InterviewStateMachine:
    machine = InterviewStateMachine()
    machine.state = state
    machine.history = [state]
    return machine


def test_table_matches_documented_transitions():
    assert {k: set(v) for k, v in VALID_TRANSITIONS.items()} == EXPECTED


@pytest.mark.parametrize("source, target", list(itertools.product(list(S), list(S))))
def test_every_pair(source, target):
    machine = _machine_at(source)
    legal = target in EXPECTED[source]
    assert can_transition(source, target) is legal
    assert machine.transition_to(target) is legal
    assert machine.state is (target if legal else source)
    assert len(machine.history) == (2 if legal else 1)


def test_idle_reachable_from_every_other_state():
    for state in S:
        if state is not S.IDLE:
            assert can_transition(state, S.IDLE)


def test_first_question_cannot_jump_to_feedback():
    assert not can_transition(S.ASK_QUESTION, S.GENERATING_FEEDBACK)
    assert can_transition(S.ASK_FOLLOW_UP, S.GENERATING_FEEDBACK)


def test_rejected_transition_logs_warning(caplog):
    machine = _machine_at(S.LISTENING)
    with caplog.at_level(logging.WARNING, logger="interview_session.state_machine"):
        assert machine.transition_to(S.ASK_QUESTION) is False
    assert machine.state is S.LISTENING
    assert "LISTENING -> ASK_QUESTION" in caplog.text


def test_string_targets_are_accepted():
    machine = InterviewStateMachine()
    assert machine.transition_to("setup") is True
    assert machine.state is S.SETUP
    assert machine.transition_to("NOT_A_STATE") is False
    assert can_transition("IDLE", "bogus") is False


def test_happy_path_history_and_reset():
    machine = InterviewStateMachine()
    for target in (S.SETUP, S.INITIALIZING, S.ASK_QUESTION, S.LISTENING, S.PROCESSING, S.GENERATING_FEEDBACK, S.COMPLETE):
        assert machine.transition_to(target)
    assert machine.history[0] is S.IDLE
    assert machine.history[-1] is S.COMPLETE
    machine.set_question_count(3, 5)
    machine.reset()
    assert machine.state is S.IDLE
    assert machine.history == [S.IDLE]
    assert (machine.question_number, machine.total_questions) == (0, 0)


def test_derived_flags_and_context():
    machine = _machine_at(S.ASK_FOLLOW_UP)
    assert machine.is_ai_speaking and not machine.is_user_speaking and not machine.is_thinking
    machine.transition_to(S.LISTENING)
    assert machine.is_user_speaking
    machine.transition_to(S.PROCESSING)
    assert machine.is_thinking
    machine.set_question_count(2, 5)
    ctx = machine.context()
    assert ctx["state"] == "PROCESSING"
    assert ctx["label"] == state_label(S.PROCESSING)
    assert (ctx["question_number"], ctx["total_questions"]) == (2, 5)


def test_state_labels_cover_every_state():
    for state in S:
        assert state_label(state)
