from __future__ import annotations  # PDF rendering for interview and resume reports

from datetime import datetime
from typing import Any, Iterable, List, Sequence, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from feedback import InterviewReport
from resume_screening import ATSScoreResult
from resume_screening.ats import COMPLETENESS_MAX, FORMATTING_MAX, IMPACT_MAX, KEYWORDS_MAX

DEJAVU_SANS = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"  # System font
DEJAVU_SANS_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"  # System font

ACCENT = (45, 115, 245)  # Palette accent
TEXT = (34, 34, 34)  # Primary text color
MUTED = (100, 100, 100)  # Secondary text color
RULE = (230, 230, 230)  # Divider color
SOFT_ACCENT_BG = (243, 248, 255)  # Highlight background
SEVERITY_COLORS = {
    "critical": (200, 40, 40),
    "warning": (205, 125, 0),
    "info": (70, 110, 170),
}


class ReportPDF(FPDF):  # Banner header, paginated footer, latin-1 fallback
    def __init__(self, title: str, *args: Any, accent: Tuple[int, int, int] = ACCENT, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.accent = accent
        self.header_title = title
        self._font_regular = "Helvetica"
        self._font_bold = "Helvetica"
        self._supports_unicode = False

    def use_system_fonts(self) -> None:  # Prefer DejaVu when installed
        try:
            self.add_font("DejaVu", "", DEJAVU_SANS)
            self.add_font("DejaVu", "B", DEJAVU_SANS_BOLD)
        except OSError:
            return
        self._font_regular = "DejaVu"
        self._font_bold = "DejaVu"
        self._supports_unicode = True

    @property
    def bullet(self) -> str:
        return "•" if self._supports_unicode else "-"

    def prepare_text(self, text: Any) -> str:  # Drop characters the core fonts cannot encode
        value = "" if text is None else str(text)
        if self._supports_unicode:
            return value
        value = value.replace("•", "-").replace("₹", "Rs.").replace("—", "-").replace("’", "'")
        return value.encode("latin-1", "ignore").decode("latin-1")

    def cell(self, w=None, h=None, text="", *args, **kwargs):
        return super().cell(w, h, self.prepare_text(text), *args, **kwargs)

    def multi_cell(self, w, h=None, text="", *args, **kwargs):
        return super().multi_cell(w, h, self.prepare_text(text), *args, **kwargs)

    @property
    def usable_width(self) -> float:
        return float(self.w) - float(self.l_margin) - float(self.r_margin)

    def header(self) -> None:
        if self.page_no() == 1:
            self.set_fill_color(*self.accent)
            self.rect(0, 0, self.w, 20, style="F")
            self.set_text_color(255, 255, 255)
            self.set_font(self._font_bold, "B", 16)
            self.set_xy(self.l_margin, 6)
            self.cell(self.usable_width, 8, self.header_title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            self.set_y(24)
        else:
            self.set_text_color(80, 80, 80)
            self.set_font(self._font_bold, "B", 11)
            self.set_xy(self.l_margin, 8)
            self.cell(self.usable_width, 6, self.header_title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            self.set_draw_color(*self.accent)
            self.set_line_width(0.4)
            self.line(self.l_margin, self.get_y() + 1, self.w - self.r_margin, self.get_y() + 1)
            self.ln(4)
        self.set_text_color(*TEXT)

    def footer(self) -> None:
        self.set_y(-12)
        self.set_draw_color(*RULE)
        self.set_line_width(0.2)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_text_color(120, 120, 120)
        self.set_font(self._font_regular, "", 9)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="R")


def _new_pdf(title: str) -> ReportPDF:
    pdf = ReportPDF(title)
    pdf.use_system_fonts()
    pdf.alias_nb_pages()
    pdf.set_margins(15, 22, 15)
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()
    return pdf


def _to_bytes(pdf: ReportPDF) -> bytes:
    return bytes(pdf.output())


def _section_title(pdf: ReportPDF, title: str) -> None:
    pdf.ln(2)
    pdf.set_text_color(*TEXT)
    pdf.set_font(pdf._font_bold, "B", 13)
    pdf.set_x(pdf.l_margin)
    pdf.cell(0, 9, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    pdf.line(pdf.l_margin, pdf.get_y(), pdf.l_margin + pdf.usable_width, pdf.get_y())
    pdf.ln(2)


def _paragraph(
    pdf: ReportPDF,
    text: str,
    *,
    size: int = 11,
    bold: bool = False,
    color: Tuple[int, int, int] = TEXT,
    indent: float = 0.0,
) -> None:
    pdf.set_x(pdf.l_margin + indent)
    pdf.set_text_color(*color)
    if bold:
        pdf.set_font(pdf._font_bold, "B", size)
    else:
        pdf.set_font(pdf._font_regular, "", size)
    pdf.multi_cell(pdf.usable_width - indent, 6, text or "-", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*TEXT)


def _bullets(pdf: ReportPDF, items: Iterable[str], empty: str) -> None:
    rows = [item for item in items if item]
    if not rows:
        _paragraph(pdf, empty, size=10, color=MUTED)
        return
    for item in rows:
        _paragraph(pdf, f"{pdf.bullet} {item}", size=11)


def _meta_block(pdf: ReportPDF, rows: Sequence[Tuple[str, str]]) -> None:  # Two label/value columns
    col = pdf.usable_width / 2.0
    for idx in range(0, len(rows), 2):
        pair = list(rows[idx : idx + 2])
        if len(pair) == 1:
            pair.append(("", ""))
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.set_font(pdf._font_regular, "", 10)
        pdf.cell(col, 6, pair[0][0])
        pdf.cell(col, 6, pair[1][0], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(*TEXT)
        pdf.set_font(pdf._font_bold, "B", 11)
        pdf.cell(col, 6, pair[0][1])
        pdf.cell(col, 6, pair[1][1], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)


def _score_callout(pdf: ReportPDF, label: str, value: str) -> None:
    top = pdf.get_y()
    pdf.set_fill_color(*SOFT_ACCENT_BG)
    pdf.rect(pdf.l_margin, top, pdf.usable_width, 16, style="F")
    pdf.set_xy(pdf.l_margin + 6, top + 5)
    pdf.set_text_color(*MUTED)
    pdf.set_font(pdf._font_regular, "", 10)
    pdf.cell(pdf.usable_width / 2, 6, label)
    pdf.set_text_color(*pdf.accent)
    pdf.set_font(pdf._font_bold, "B", 14)
    pdf.cell(pdf.usable_width / 2 - 12, 6, value, align="R")
    pdf.set_y(top + 19)
    pdf.set_text_color(*TEXT)


def _table(pdf: ReportPDF, headers: Sequence[str], ratios: Sequence[float], rows: Sequence[Sequence[str]]) -> None:
    widths = [pdf.usable_width * ratio for ratio in ratios]
    pdf.set_x(pdf.l_margin)
    pdf.set_fill_color(*pdf.accent)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font(pdf._font_bold, "B", 10)
    for width, title in zip(widths, headers):
        pdf.cell(width, 8, title, fill=True)
    pdf.ln(8)
    pdf.set_text_color(*TEXT)
    pdf.set_font(pdf._font_regular, "", 10)
    for idx, row in enumerate(rows):
        fill = idx % 2 == 0
        pdf.set_fill_color(247, 250, 255)
        pdf.set_x(pdf.l_margin)
        for width, value in zip(widths, row):
            pdf.cell(width, 7, value, fill=fill)
        pdf.ln(7)
    pdf.ln(2)


def _format_timestamp(epoch: float) -> str:
    return datetime.fromtimestamp(epoch).strftime("%d %b %Y, %H:%M")


def _transcript_blocks(transcript: str) -> List[Tuple[str, str]]:
    blocks: List[Tuple[str, str]] = []
    for block in transcript.split("\n\n"):
        question, _, answer = block.partition("\nCANDIDATE: ")
        question = question.removeprefix("INTERVIEWER: ").strip()
        if question:
            blocks.append((question, answer.strip()))
    return blocks


def generate_interview_report_pdf(report: InterviewReport) -> bytes:
    """Render a finished interview report (scores, feedback and transcript)."""

    pdf = _new_pdf(f"{report.job_role} - Mock Interview Report")

    _section_title(pdf, "Session Overview")
    _meta_block(
        pdf,
        [
            ("Session", report.session_id[:8]),
            ("Role", report.job_role),
            ("Interviewer", report.persona.title()),
            ("Language", report.language),
            ("Answered", f"{report.answered}/{report.total_questions}"),
            ("Generated", _format_timestamp(report.generated_at)),
        ],
    )
    _score_callout(pdf, "Overall Score", f"{report.combined_score}/100")
    _paragraph(pdf, report.score.overall_feedback, size=11, color=MUTED)

    _section_title(pdf, "Dimension Scores")
    if report.score.dimensions:
        _table(
            pdf,
            ["Dimension", "Score", "Feedback"],
            [0.24, 0.12, 0.64],
            [(d.name, f"{d.score:.1f}/5", d.feedback) for d in report.score.dimensions],
        )
    else:
        _paragraph(pdf, "No answers were available to score.", size=10, color=MUTED)

    _section_title(pdf, "Strengths")
    _bullets(pdf, report.strengths, "No strengths recorded.")
    _section_title(pdf, "Areas to Improve")
    _bullets(pdf, report.improvements, "No improvement areas recorded.")

    if report.feedback is not None:
        _section_title(pdf, "Coach Feedback")
        _paragraph(pdf, report.feedback.summary)
        if report.suggestions:
            pdf.ln(1)
            _paragraph(pdf, "Suggestions", bold=True, size=11)
            _bullets(pdf, report.suggestions, "")
        if report.feedback.ideal_response_tip:
            pdf.ln(1)
            _paragraph(pdf, "Ideal response tip", bold=True, size=11)
            _paragraph(pdf, report.feedback.ideal_response_tip, color=MUTED)

    _section_title(pdf, "Transcript")
    blocks = _transcript_blocks(report.transcript)
    if not blocks:
        _paragraph(pdf, "No transcript entries recorded for this session.", size=10, color=MUTED)
    for number, (question, answer) in enumerate(blocks, start=1):
        _paragraph(pdf, f"Q{number}. {question}", size=10, bold=True, color=pdf.accent)
        _paragraph(pdf, answer, size=10, indent=4)
        pdf.ln(1)

    return _to_bytes(pdf)


def generate_ats_report_pdf(result: ATSScoreResult, *, title: str = "ATS Resume Report") -> bytes:
    """Render an ATS score with its breakdown, issues and recommendations."""

    pdf = _new_pdf(title)
    _score_callout(pdf, "ATS Score", f"{result.overall_score}/100")

    _section_title(pdf, "Score Breakdown")
    breakdown = result.breakdown
    _table(
        pdf,
        ["Section", "Score", "Maximum"],
        [0.5, 0.25, 0.25],
        [
            ("Keywords", str(breakdown.keywords), str(KEYWORDS_MAX)),
            ("Impact", str(breakdown.impact), str(IMPACT_MAX)),
            ("Formatting", str(breakdown.formatting), str(FORMATTING_MAX)),
            ("Completeness", str(breakdown.completeness), str(COMPLETENESS_MAX)),
        ],
    )

    _section_title(pdf, "Issues")
    if not result.issues:
        _paragraph(pdf, "No issues found.", size=10, color=MUTED)
    for issue in result.issues:
        color = SEVERITY_COLORS.get(issue.severity, TEXT)
        _paragraph(pdf, f"[{issue.severity.upper()}] {issue.title} ({issue.location})", bold=True, color=color)
        _paragraph(pdf, issue.description, size=10, indent=4)
        if issue.highlight:
            _paragraph(pdf, f"Excerpt: {issue.highlight}", size=10, color=MUTED, indent=4)
        _paragraph(pdf, f"Fix: {issue.suggestion}", size=10, indent=4)
        pdf.ln(1)

    _section_title(pdf, "Recommendations")
    _bullets(pdf, result.recommendations, "No further recommendations.")
    return _to_bytes(pdf)


__all__ = ["ReportPDF", "generate_ats_report_pdf", "generate_interview_report_pdf"]
