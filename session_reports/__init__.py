from __future__ import annotations  # Report rendering exports

from .pdf import ReportPDF, generate_ats_report_pdf, generate_interview_report_pdf

__all__ = ["ReportPDF", "generate_ats_report_pdf", "generate_interview_report_pdf"]
