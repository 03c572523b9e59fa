"""FastAPI routes for interview session control."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Dict, Iterator

from fastapi import APIRouter, HTTPException, Response

from api.schemas import AnswerReq, ApiResp, QuestionPayload, SessionReq, StartReq, UIMessage
from config.settings import settings
from feedback import InsufficientResponsesError, InterviewReport
from interview_session import InterviewConfig, InterviewState
from personas import RegistryOpeningGenerator
from services import ConductorTurn, IllegalTransitionError, InterviewConductor
from session_reports import generate_interview_report_pdf

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interview-sessions")

# Active interviews for this process only, oldest first.
_ACTIVE: Dict[str, InterviewConductor] = {}


def _default_conductor() -> InterviewConductor:
    return InterviewConductor(opening=RegistryOpeningGenerator())


conductor_factory: Callable[[], InterviewConductor] = _default_conductor


def _remember(conductor: InterviewConductor) -> None:
    """Track ``conductor``, evicting finished then oldest interviews beyond MAX_ACTIVE_SESSIONS."""

    while _ACTIVE and len(_ACTIVE) >= settings.MAX_ACTIVE_SESSIONS:
        finished = [sid for sid, c in _ACTIVE.items() if c.state is InterviewState.COMPLETE]
        victim = finished[0] if finished else next(iter(_ACTIVE))
        evicted = _ACTIVE.pop(victim)
        if evicted.state is not InterviewState.COMPLETE:
            evicted.cancel()
        logger.info("Evicted interview %s", victim)
    _ACTIVE[conductor.session_id] = conductor


def _lookup(session_id: str) -> InterviewConductor:
    conductor = _ACTIVE.get(session_id)
    if conductor is None:
        raise HTTPException(status_code=404, detail="session not found")
    return conductor


@contextmanager
def _guard() -> Iterator[None]:
    try:
        yield
    except IllegalTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except InsufficientResponsesError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _resp(conductor: InterviewConductor, turn: ConductorTurn, session_id: str | None = None) -> ApiResp:
    question = None
    if turn.question:
        question = QuestionPayload(
            id=turn.question_id,
            text=turn.question,
            number=turn.question_number,
            total=turn.total_questions,
        )
    return ApiResp(
        session_id=session_id or turn.session_id,
        state=turn.state,
        label=turn.label,
        ui_messages=[UIMessage(text=text) for text in turn.messages],
        question=question,
        answered=turn.answered,
        challenge=turn.challenge,
        complete=turn.complete,
        event_log=list(conductor.events),
    )


@router.post("/start", response_model=ApiResp)
def start(req: StartReq) -> ApiResp:
    fields = req.model_dump(exclude_none=True)
    config = InterviewConfig(**fields)
    conductor = conductor_factory()
    with _guard():
        turn = conductor.start(config)
    _remember(conductor)
    return _resp(conductor, turn)


@router.get("/{session_id}", response_model=ApiResp)
def status(session_id: str) -> ApiResp:
    conductor = _lookup(session_id)
    return _resp(conductor, conductor.snapshot(), session_id)


@router.post("/listen", response_model=ApiResp)
def listen(req: SessionReq) -> ApiResp:
    conductor = _lookup(req.session_id)
    with _guard():
        turn = conductor.begin_listening()
    return _resp(conductor, turn)


@router.post("/answer", response_model=ApiResp)
def answer(req: AnswerReq) -> ApiResp:
    conductor = _lookup(req.session_id)
    with _guard():
        turn = conductor.submit_answer(req.answer)
    return _resp(conductor, turn)


@router.post("/skip", response_model=ApiResp)
def skip(req: SessionReq) -> ApiResp:
    conductor = _lookup(req.session_id)
    with _guard():
        turn = conductor.skip()
    return _resp(conductor, turn)


@router.post("/pause", response_model=ApiResp)
def pause(req: SessionReq) -> ApiResp:
    conductor = _lookup(req.session_id)
    with _guard():
        turn = conductor.pause()
    return _resp(conductor, turn)


@router.post("/resume", response_model=ApiResp)
def resume(req: SessionReq) -> ApiResp:
    conductor = _lookup(req.session_id)
    with _guard():
        turn = conductor.resume()
    return _resp(conductor, turn)


@router.post("/cancel", response_model=ApiResp)
def cancel(req: SessionReq) -> ApiResp:
    conductor = _ACTIVE.pop(req.session_id, None)
    if conductor is None:
        raise HTTPException(status_code=404, detail="session not found")
    turn = conductor.cancel()
    return _resp(conductor, turn, req.session_id)


@router.post("/finish", response_model=InterviewReport)
def finish(req: SessionReq) -> InterviewReport:
    conductor = _lookup(req.session_id)
    with _guard():
        return conductor.finish()


def _finished_report(session_id: str) -> InterviewReport:
    conductor = _lookup(session_id)
    if conductor.report is None:
        raise HTTPException(status_code=409, detail="interview not finished")
    return conductor.report


@router.get("/{session_id}/report", response_model=InterviewReport)
def report(session_id: str) -> InterviewReport:
    return _finished_report(session_id)


@router.get("/{session_id}/report.pdf")
def report_pdf(session_id: str) -> Response:
    result = _finished_report(session_id)
    payload = generate_interview_report_pdf(result)
    headers = {"Content-Disposition": f"attachment; filename=\"interview-{session_id[:8]}.pdf\""}
    return Response(content=payload, media_type="application/pdf", headers=headers)
