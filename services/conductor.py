"""Turn-based interview orchestration.

``InterviewConductor`` owns one state machine and one session value. Each
public step moves the machine through legal transitions only; a step the
current state does not allow raises ``IllegalTransitionError`` and leaves
both the state and the session untouched.
"""
from __future__ import annotations

import logging
import random
import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from pydantic import BaseModel, Field

from config.randomness import resolve_rng
from config.settings import settings
from feedback import InterviewReport, build_report, ensure_enough_responses, generate_feedback
from interview_evaluation import DIMENSION_MAX, score_interview, scoring_config_for
from interview_session import (
    InterviewConfig,
    InterviewSession,
    InterviewState,
    InterviewStateMachine,
    answered_count,
    create_session,
    get_current_question,
    is_interview_complete,
    is_substantive,
    opening_greeting,
    record_answer,
    state_label,
)
from observability import log_event, span
from personas import (
    OpeningGenerator,
    PersonaConfig,
    StaticOpeningGenerator,
    challenge_phrase,
    format_question_naturally,
    get_persona,
    should_challenge,
    thinking_delay,
    transition_phrase,
)
from question_bank import QuestionCatalog

logger = logging.getLogger(__name__)

S = InterviewState
ASKING = (S.ASK_QUESTION, S.ASK_FOLLOW_UP)
PAUSABLE = (S.ASK_QUESTION, S.LISTENING, S.ASK_FOLLOW_UP)


class IllegalTransitionError(RuntimeError):
    """A conductor step was attempted from a state that does not allow it."""

    def __init__(self, current: InterviewState, target: Optional[InterviewState], action: str) -> None:
        self.current = current
        self.target = target
        self.action = action
        goal = f" -> {target.value}" if target is not None else ""
        super().__init__(f"Cannot {action} from {current.value}{goal}")


class ConductorTurn(BaseModel):  # What the caller should say/show after a step
    session_id: str
    state: InterviewState
    label: str
    messages: List[str] = Field(default_factory=list)
    question: Optional[str] = None
    question_id: Optional[str] = None
    question_number: int = 0
    total_questions: int = 0
    answered: int = 0
    challenge: bool = False
    complete: bool = False


class InterviewConductor:
    def __init__(
        self,
        *,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
        opening: Optional[OpeningGenerator] = None,
        release_hooks: Sequence[Callable[[], None]] = (),
        catalog: Optional[QuestionCatalog] = None,
    ) -> None:
        self.rng = resolve_rng(rng)
        self.sleep = sleep
        self.opening = opening or StaticOpeningGenerator()
        self.release_hooks: List[Callable[[], None]] = list(release_hooks)
        self.catalog = catalog
        self.machine = InterviewStateMachine()
        self.events: List[Dict[str, object]] = []
        self.session: Optional[InterviewSession] = None
        self.config: Optional[InterviewConfig] = None
        self.report: Optional[InterviewReport] = None
        self._persona: Optional[PersonaConfig] = None
        self._prompt: Optional[str] = None
        self._paused_from: Optional[InterviewState] = None
        self._pending_answer: Optional[str] = None
        self._challenged_index: Optional[int] = None

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> InterviewState:
        return self.machine.state

    @property
    def session_id(self) -> str:
        return self.session.session_id if self.session is not None else "-"

    def _step(self, target: InterviewState, action: str) -> None:
        if not self.machine.transition_to(target):
            raise IllegalTransitionError(self.machine.state, target, action)

    def _require_session(self, action: str) -> InterviewSession:
        if self.session is None:
            raise IllegalTransitionError(self.machine.state, None, action)
        return self.session

    def _sync_progress(self) -> None:
        session = self.session
        if session is None:
            self.machine.set_question_count(0, 0)
            return
        total = len(session.questions)
        current = min(session.current_index + 1, total)
        self.machine.set_question_count(current, total)

    def _ask_current(self) -> Optional[str]:
        session = self._require_session("ask")
        question = get_current_question(session)
        if question is None:
            self._prompt = None
        else:
            self._prompt = format_question_naturally(question, session.persona, rng=self.rng, language=session.language)
        return self._prompt

    def snapshot(self, messages: Sequence[str] = (), *, challenge: bool = False) -> ConductorTurn:
        session = self.session
        question = get_current_question(session) if session is not None else None
        asking = self.state in ASKING or self.state is S.LISTENING
        return ConductorTurn(
            session_id=self.session_id,
            state=self.state,
            label=state_label(self.state),
            messages=[m for m in messages if m],
            question=self._prompt if asking else None,
            question_id=question.id if (question is not None and asking) else None,
            question_number=self.machine.question_number,
            total_questions=self.machine.total_questions,
            answered=answered_count(session) if session is not None else 0,
            challenge=challenge,
            complete=self.state is S.COMPLETE,
        )

    # ------------------------------------------------------------- lifecycle

    def start(self, config: InterviewConfig) -> ConductorTurn:
        """Set up a new interview and ask the first question."""

        if self.state is S.COMPLETE:
            self._discard()
        self._step(S.SETUP, "start")
        self.config = config
        self._step(S.INITIALIZING, "start")
        try:
            with span(self, "initialize"):
                self.session = create_session(config, rng=self.rng, catalog=self.catalog)
                self.machine.session_id = self.session.session_id
                self._persona = get_persona(config.persona)
                greeting = self.opening.opening(config, opening_greeting(config))
        except Exception:
            self.cancel()
            raise

        self._sync_progress()
        self._step(S.ASK_QUESTION, "start")
        prompt = self._ask_current()
        log_event(
            "interview_started",
            self.session_id,
            persona=self._persona.id,
            question=len(self.session.questions),
            role=config.job_role,
        )
        return self.snapshot([greeting, prompt or ""])

    def begin_listening(self) -> ConductorTurn:
        """Interviewer finished speaking; capture the candidate's answer next."""

        if self.state not in ASKING:
            raise IllegalTransitionError(self.state, S.LISTENING, "listen")
        self._step(S.LISTENING, "listen")
        return self.snapshot()

    def _ensure_listening(self, action: str) -> None:
        if self.state in ASKING:
            self._step(S.LISTENING, action)
        elif self.state is not S.LISTENING:
            raise IllegalTransitionError(self.state, S.PROCESSING, action)

    def submit_answer(self, text: str) -> ConductorTurn:
        """Record the candidate's answer and move to the next question or to feedback."""

        session = self._require_session("answer")
        self._ensure_listening("answer")
        self._step(S.PROCESSING, "answer")

        answer = (text or "").strip()
        if self._pending_answer is not None:
            answer = f"{self._pending_answer} {answer}".strip()
            self._pending_answer = None
        elif self._should_challenge(session, answer):
            return self._challenge(session, answer)

        self.session = record_answer(session, answer)
        log_event("answer_recorded", self.session_id, question=session.current_index + 1)
        return self._advance()

    def skip(self) -> ConductorTurn:
        session = self._require_session("skip")
        self._ensure_listening("skip")
        self._step(S.PROCESSING, "skip")

        if self._pending_answer is not None:
            recorded, self._pending_answer = self._pending_answer, None
        else:
            recorded = settings.SKIP_MARKER
        self.session = record_answer(session, recorded)
        log_event("question_skipped", self.session_id, question=session.current_index + 1)
        return self._advance()

    def _advance(self) -> ConductorTurn:
        session = self._require_session("advance")
        thinking_delay(self.rng, self.sleep)
        if is_interview_complete(session):
            self._sync_progress()
            self._prompt = None
            self._step(S.GENERATING_FEEDBACK, "advance")
            return self.snapshot()

        self._sync_progress()
        self._step(S.ASK_FOLLOW_UP, "advance")
        transition = transition_phrase(session.persona, session.language, rng=self.rng)
        if settings.TRANSITION_PAUSE_S > 0:
            self.sleep(settings.TRANSITION_PAUSE_S)
        prompt = self._ask_current()
        return self.snapshot([transition, prompt or ""])

    def _should_challenge(self, session: InterviewSession, answer: str) -> bool:
        if not settings.CHALLENGE_FOLLOW_UPS or self._persona is None:
            return False
        if self._challenged_index == session.current_index or not is_substantive(answer):
            return False
        return should_challenge(self._persona, self._answer_quality(session, answer), rng=self.rng)

    def _answer_quality(self, session: InterviewSession, answer: str) -> float:
        score = score_interview([answer], scoring_config_for(session.job_role, session.cv_summary))
        dimensions = len(score.dimensions) or 1
        return min(DIMENSION_MAX, score.total_score / dimensions)

    def _challenge(self, session: InterviewSession, answer: str) -> ConductorTurn:
        self._pending_answer = answer
        self._challenged_index = session.current_index
        thinking_delay(self.rng, self.sleep)
        self._step(S.ASK_FOLLOW_UP, "challenge")
        phrase = challenge_phrase(session.persona, session.language, rng=self.rng)
        self._prompt = phrase
        log_event("challenge_issued", self.session_id, question=session.current_index + 1)
        return self.snapshot([phrase], challenge=True)

    def pause(self) -> ConductorTurn:
        if self.state not in PAUSABLE:
            raise IllegalTransitionError(self.state, S.PAUSED, "pause")
        previous = self.state
        self._step(S.PAUSED, "pause")
        self._paused_from = previous
        log_event("interview_paused", self.session_id, from_state=previous.value)
        return self.snapshot()

    def resume(self) -> ConductorTurn:
        if self.state is not S.PAUSED or self._paused_from is None:
            raise IllegalTransitionError(self.state, self._paused_from, "resume")
        target, self._paused_from = self._paused_from, None
        self._step(target, "resume")
        log_event("interview_resumed", self.session_id, to_state=target.value)
        return self.snapshot()

    def finish(self) -> InterviewReport:
        """Score the interview, collect optional feedback and complete it.

        Raises ``InsufficientResponsesError`` before any transition when there
        are too few real answers.
        """

        if self.state is S.COMPLETE and self.report is not None:
            return self.report
        session = self._require_session("finish")
        if self._pending_answer is not None:
            session = record_answer(session, self._pending_answer)
        ensure_enough_responses(session)
        self._route_to_feedback()
        self.session, self._pending_answer = session, None
        self._prompt = None
        self._sync_progress()

        with span(self, "feedback"):
            feedback = generate_feedback(session)
        with span(self, "report"):
            report = build_report(session, feedback)

        self._step(S.COMPLETE, "finish")
        self.report = report
        log_event(
            "interview_complete",
            self.session_id,
            percentage=report.score.percentage,
            combined=report.combined_score,
            feedback=feedback is not None,
        )
        return report

    def _route_to_feedback(self) -> None:
        if self.state is S.GENERATING_FEEDBACK:
            return
        if self.state is S.PAUSED:
            self.resume()
        if self.state in ASKING:
            self._step(S.LISTENING, "finish")
        if self.state not in (S.LISTENING, S.PROCESSING):
            raise IllegalTransitionError(self.state, S.GENERATING_FEEDBACK, "finish")
        self._step(S.GENERATING_FEEDBACK, "finish")

    def cancel(self) -> ConductorTurn:
        """Abort from any state: discard progress and release held resources."""

        cancelled = self.session_id
        if self.state is not S.IDLE:
            self._step(S.IDLE, "cancel")
        self._discard()
        self.machine.reset()
        self._release()
        log_event("interview_cancelled", cancelled)
        return self.snapshot()

    def _discard(self) -> None:
        self.session = None
        self.config = None
        self.report = None
        self._persona = None
        self._prompt = None
        self._paused_from = None
        self._pending_answer = None
        self._challenged_index = None

    def _release(self) -> None:
        for hook in self.release_hooks:
            try:
                hook()
            except Exception:  # noqa: BLE001
                logger.exception("Release hook failed")


@contextmanager
def active_interview(conductor: InterviewConductor, config: InterviewConfig) -> Iterator[ConductorTurn]:
    """Start an interview and guarantee it is cancelled unless it reached COMPLETE."""

    turn = conductor.start(config)
    try:
        yield turn
    finally:
        if conductor.state is not S.COMPLETE:
            conductor.cancel()


__all__ = [
    "ConductorTurn",
    "IllegalTransitionError",
    "InterviewConductor",
    "active_interview",
]
