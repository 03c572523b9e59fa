import random

import pytest

import services.conductor as conductor_mod
from config.registry import FEEDBACK_KEY, OPENING_KEY, bind_model
from config.settings import settings
from feedback import InsufficientResponsesError
from interview_session import InterviewConfig, InterviewState, opening_greeting
from personas import RegistryOpeningGenerator, get_persona
from services import IllegalTransitionError, InterviewConductor, active_interview

S = InterviewState


def _config(count=3, **overrides):
    return InterviewConfig(job_role="Software Engineer", question_count=count, **overrides)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def conductor(sleeps):
    return InterviewConductor(rng=random.Random(7), sleep=sleeps.append)


def test_full_interview_walkthrough(conductor, sleeps, strong_answer):
    config = _config()
    turn = conductor.start(config)
    assert turn.state is S.ASK_QUESTION
    assert turn.messages[0] == opening_greeting(config)
    assert turn.question.endswith(conductor.session.questions[0].question)
    assert (turn.question_number, turn.total_questions) == (1, 3)

    turn = conductor.submit_answer(strong_answer)
    assert turn.state is S.ASK_FOLLOW_UP
    assert len(turn.messages) == 2
    assert turn.question_number == 2
    assert sleeps and all(s == 0.0 for s in sleeps)

    conductor.submit_answer("I mentor junior developers every week.")
    turn = conductor.submit_answer("I write tests before refactoring.")
    assert turn.state is S.GENERATING_FEEDBACK
    assert turn.question is None
    assert turn.answered == 3

    report = conductor.finish()
    assert conductor.state is S.COMPLETE
    assert report.answered == 3
    assert report.total_questions == 3
    assert report.feedback is None
    assert report.combined_score == report.score.percentage
    assert conductor.finish() is report

    history = conductor.machine.history
    assert history[:4] == [S.IDLE, S.SETUP, S.INITIALIZING, S.ASK_QUESTION]
    assert history[-2:] == [S.GENERATING_FEEDBACK, S.COMPLETE]


def test_seeded_runs_ask_the_same_questions():
    first = InterviewConductor(rng=random.Random(11), sleep=lambda _: None)
    second = InterviewConductor(rng=random.Random(11), sleep=lambda _: None)
    first.start(_config(count=4))
    second.start(_config(count=4))
    assert [q.id for q in first.session.questions] == [q.id for q in second.session.questions]


@pytest.mark.parametrize("action", ["submit_answer", "skip", "pause", "resume", "finish", "begin_listening"])
def test_steps_before_start_are_illegal(conductor, action):
    args = ("hello",) if action == "submit_answer" else ()
    with pytest.raises(IllegalTransitionError):
        getattr(conductor, action)(*args)
    assert conductor.state is S.IDLE


def test_illegal_step_leaves_state_and_session_untouched(conductor):
    conductor.start(_config(count=1))
    conductor.submit_answer("Only answer")
    assert conductor.state is S.GENERATING_FEEDBACK
    before = conductor.session
    with pytest.raises(IllegalTransitionError) as err:
        conductor.submit_answer("late answer")
    assert err.value.current is S.GENERATING_FEEDBACK
    assert conductor.state is S.GENERATING_FEEDBACK
    assert conductor.session is before


def test_start_twice_is_illegal(conductor):
    conductor.start(_config())
    with pytest.raises(IllegalTransitionError):
        conductor.start(_config())
    assert conductor.state is S.ASK_QUESTION


def test_pause_and_resume_return_to_prior_state(conductor):
    conductor.start(_config())
    conductor.begin_listening()
    assert conductor.pause().state is S.PAUSED
    assert conductor.resume().state is S.LISTENING

    conductor.submit_answer("An answer")
    assert conductor.state is S.ASK_FOLLOW_UP
    conductor.pause()
    assert conductor.resume().state is S.ASK_FOLLOW_UP


def test_resume_without_pause_is_illegal(conductor):
    conductor.start(_config())
    with pytest.raises(IllegalTransitionError):
        conductor.resume()
    assert conductor.state is S.ASK_QUESTION


def test_skip_records_marker(conductor):
    conductor.start(_config(count=2))
    turn = conductor.skip()
    assert turn.state is S.ASK_FOLLOW_UP
    assert conductor.session.answers == (settings.SKIP_MARKER,)
    assert turn.answered == 0


def test_all_skipped_cannot_finish(conductor):
    conductor.start(_config(count=2))
    conductor.skip()
    conductor.skip()
    assert conductor.state is S.GENERATING_FEEDBACK
    with pytest.raises(InsufficientResponsesError):
        conductor.finish()
    assert conductor.state is S.GENERATING_FEEDBACK
    assert conductor.cancel().state is S.IDLE


def test_finish_early_from_asking_state(conductor, strong_answer):
    conductor.start(_config(count=3))
    conductor.submit_answer(strong_answer)
    report = conductor.finish()
    assert conductor.state is S.COMPLETE
    assert report.answered == 1
    assert report.total_questions == 3
    assert S.LISTENING in conductor.machine.history[-3:]


def test_finish_while_paused(conductor):
    conductor.start(_config(count=3))
    conductor.submit_answer("First answer with some detail.")
    conductor.pause()
    conductor.finish()
    assert conductor.state is S.COMPLETE


def test_finish_with_feedback_collaborator(conductor, strong_answer, fake_feedback):
    bind_model(FEEDBACK_KEY, fake_feedback)
    conductor.start(_config(count=1))
    conductor.submit_answer(strong_answer)
    report = conductor.finish()
    assert report.feedback is not None
    assert report.combined_score == round((report.score.percentage + 70) / 2)
    spans = [e["span"] for e in conductor.events]
    assert spans == ["initialize", "feedback", "report"]


def test_restart_after_complete(conductor):
    conductor.start(_config(count=1))
    conductor.submit_answer("Done")
    conductor.finish()
    first_id = conductor.session_id
    turn = conductor.start(_config(count=1))
    assert turn.state is S.ASK_QUESTION
    assert conductor.session_id != first_id
    assert conductor.report is None


def test_cancel_runs_release_hooks_and_discards(sleeps):
    released = []

    def _broken():
        raise RuntimeError("mic already closed")

    conductor = InterviewConductor(
        rng=random.Random(1),
        sleep=sleeps.append,
        release_hooks=[_broken, lambda: released.append("mic")],
    )
    conductor.start(_config())
    conductor.begin_listening()
    turn = conductor.cancel()
    assert turn.state is S.IDLE
    assert conductor.session is None
    assert conductor.machine.history == [S.IDLE]
    assert released == ["mic"]


def test_active_interview_cancels_on_error(sleeps):
    released = []
    conductor = InterviewConductor(rng=random.Random(2), sleep=sleeps.append, release_hooks=[lambda: released.append(1)])
    with pytest.raises(ValueError):
        with active_interview(conductor, _config()) as turn:
            assert turn.state is S.ASK_QUESTION
            raise ValueError("browser closed")
    assert conductor.state is S.IDLE
    assert released == [1]


def test_active_interview_keeps_completed_report(sleeps):
    conductor = InterviewConductor(rng=random.Random(2), sleep=sleeps.append)
    with active_interview(conductor, _config(count=1)):
        conductor.submit_answer("All done")
        conductor.finish()
    assert conductor.state is S.COMPLETE
    assert conductor.report is not None


def test_failed_start_returns_to_idle(sleeps):
    class _Failing:
        def opening(self, config, greeting):
            raise RuntimeError("speech engine offline")

    conductor = InterviewConductor(rng=random.Random(3), sleep=sleeps.append, opening=_Failing())
    with pytest.raises(RuntimeError):
        conductor.start(_config())
    assert conductor.state is S.IDLE
    assert conductor.session is None
    assert conductor.events[0]["outcome"] == "error"


def test_registry_opening_is_spoken_first(sleeps):
    bind_model(OPENING_KEY, lambda **_: {"text": "Welcome aboard, let's begin."})
    conductor = InterviewConductor(rng=random.Random(4), sleep=sleeps.append, opening=RegistryOpeningGenerator())
    turn = conductor.start(_config())
    assert turn.messages[0] == "Welcome aboard, let's begin."


def test_challenge_follow_up_merges_answers(conductor, monkeypatch):
    monkeypatch.setattr(settings, "CHALLENGE_FOLLOW_UPS", True)
    monkeypatch.setattr(conductor_mod, "should_challenge", lambda *a, **k: True)
    conductor.start(_config(count=2, persona="stress"))

    turn = conductor.submit_answer("I fixed it.")
    assert turn.challenge is True
    assert turn.state is S.ASK_FOLLOW_UP
    assert turn.messages[0] in get_persona("stress").challenges["English"]
    assert conductor.session.answers == ()

    turn = conductor.submit_answer("I profiled the query and added an index.")
    assert turn.challenge is False
    assert conductor.session.answers == ("I fixed it. I profiled the query and added an index.",)


def test_pending_challenge_answer_is_kept_on_finish(conductor, monkeypatch):
    monkeypatch.setattr(settings, "CHALLENGE_FOLLOW_UPS", True)
    monkeypatch.setattr(conductor_mod, "should_challenge", lambda *a, **k: True)
    conductor.start(_config(count=2, persona="stress"))
    conductor.submit_answer("I fixed it.")
    report = conductor.finish()
    assert report.answered == 1
    assert conductor.session.answers == ("I fixed it.",)


def test_challenges_disabled_by_default(conductor):
    conductor.start(_config(count=2, persona="stress"))
    turn = conductor.submit_answer("I fixed it.")
    assert turn.challenge is False
    assert conductor.session.answers == ("I fixed it.",)


def test_thinking_pauses_span_configured_range(monkeypatch):
    monkeypatch.setattr(settings, "THINK_DELAY_MIN_S", 1.5)
    monkeypatch.setattr(settings, "THINK_DELAY_MAX_S", 3.0)
    slept = []
    for seed in range(20):
        conductor = InterviewConductor(rng=random.Random(seed), sleep=slept.append)
        conductor.start(_config(count=3, persona="stress"))
        conductor.submit_answer("First answer.")
        conductor.submit_answer("Second answer.")
    assert len(slept) == 40
    assert all(1.5 <= s <= 3.0 for s in slept)
    assert max(slept) > 2.5
    assert min(slept) < 2.0
