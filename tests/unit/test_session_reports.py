from feedback import build_report, parse_feedback
from interview_session import InterviewConfig, create_session, record_answer, skip_question
from resume_screening import calculate_ats_score
from session_reports import ReportPDF, generate_ats_report_pdf, generate_interview_report_pdf


def _report(rng, answer, feedback=None):
    session = create_session(InterviewConfig(job_role="Sales Executive", question_count=3), rng=rng)
    session = skip_question(record_answer(session, answer))
    return build_report(session, feedback)


def test_interview_pdf_renders(rng, strong_answer):
    data = generate_interview_report_pdf(_report(rng, strong_answer))
    assert data.startswith(b"%PDF")
    assert len(data) > 1000


def test_interview_pdf_with_feedback_and_unicode(rng, fake_feedback):
    answer = "Grew revenue to ₹40,00,000 — a 35% jump ’quarter on quarter’ • with 12 clients."
    data = generate_interview_report_pdf(_report(rng, answer, parse_feedback(fake_feedback())))
    assert data.startswith(b"%PDF")


def test_ats_pdf_renders_issues():
    data = generate_ats_report_pdf(calculate_ats_score("John Doe. Experience: none."))
    assert data.startswith(b"%PDF")


def test_ats_pdf_without_issues():
    result = calculate_ats_score("")
    data = generate_ats_report_pdf(result.model_copy(update={"issues": (), "recommendations": ()}), title="Resume")
    assert data.startswith(b"%PDF")


def test_latin1_fallback_text():
    pdf = ReportPDF("t")
    assert pdf.bullet == "-"
    assert pdf.prepare_text("₹500 • done") == "Rs.500 - done"
    assert pdf.prepare_text(None) == ""
