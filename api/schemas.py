"""Pydantic schemas for the interview session and resume APIs."""
from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from interview_session import InterviewState


class StartReq(BaseModel):
    job_role: str = Field(min_length=1)
    language: Optional[str] = None
    persona: Optional[str] = None
    cv_summary: str = ""
    question_count: Optional[int] = None


class SessionReq(BaseModel):
    session_id: str


class AnswerReq(BaseModel):
    session_id: str
    answer: str = ""


class UIMessage(BaseModel):
    role: Literal["assistant", "system"] = "assistant"
    text: str


class QuestionPayload(BaseModel):
    id: Optional[str] = None
    text: str
    number: int
    total: int


class ApiResp(BaseModel):
    session_id: str
    state: InterviewState
    label: str
    ui_messages: List[UIMessage] = Field(default_factory=list)
    question: Optional[QuestionPayload] = None
    answered: int = 0
    challenge: bool = False
    complete: bool = False
    event_log: List[Dict] = Field(default_factory=list)


class ResumeScoreReq(BaseModel):
    resume_text: str
    job_description: str = ""
