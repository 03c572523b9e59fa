"""FastAPI routes for ATS resume scoring."""
from __future__ import annotations

from fastapi import APIRouter, Response

from api.schemas import ResumeScoreReq
from resume_screening import ATSScoreResult, calculate_ats_score
from session_reports import generate_ats_report_pdf

router = APIRouter(prefix="/api/resume")


@router.post("/score", response_model=ATSScoreResult)
def score(req: ResumeScoreReq) -> ATSScoreResult:
    return calculate_ats_score(req.resume_text, req.job_description)


@router.post("/report.pdf")
def report_pdf(req: ResumeScoreReq) -> Response:
    result = calculate_ats_score(req.resume_text, req.job_description)
    headers = {"Content-Disposition": "attachment; filename=\"ats-report.pdf\""}
    return Response(content=generate_ats_report_pdf(result), media_type="application/pdf", headers=headers)
