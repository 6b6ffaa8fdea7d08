from __future__ import annotations  # Session report package exports

from .models import Grade, SessionSummary
from .pdf import generate_session_report_pdf
from .summarizer import EmptySessionError, generate_session_summary, summarize_analyses

__all__ = [
    "EmptySessionError",
    "Grade",
    "SessionSummary",
    "generate_session_report_pdf",
    "generate_session_summary",
    "summarize_analyses",
]
