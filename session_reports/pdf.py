from __future__ import annotations  # Styled PDF rendering for practice session reports

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, List, Sequence, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from answer_analysis.models import AnalysisResult
from answer_analysis.rubric import criterion_label, score_to_percentage

from .models import SessionSummary
from .summarizer import EmptySessionError

if TYPE_CHECKING:
    from interview_session.models import Answer, Session

DEJAVU_SANS = Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf")  # System font
DEJAVU_SANS_BOLD = Path("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf")  # System font

ACCENT = (45, 115, 245)  # Palette accent
TEXT = (34, 34, 34)  # Primary text color
MUTED = (100, 100, 100)  # Secondary text color
RULE = (230, 230, 230)  # Divider color
SOFT_ACCENT_BG = (243, 248, 255)  # Highlight background

_CLASSIFICATION_COLORS = {
    "Excellent": (30, 140, 70),
    "Good": (45, 115, 245),
    "Average": (210, 140, 20),
    "Weak": (200, 50, 50),
}


def _format_datetime(value: datetime | None) -> str:  # Format timestamp for display
    if not value:
        return "-"
    return value.strftime("%d %b %Y, %I:%M %p").lstrip("0").replace(" 0", " ")


def _effective_width(pdf: FPDF) -> float:
    return float(pdf.w) - float(pdf.l_margin) - float(pdf.r_margin)


def _section_title(pdf: "ReportPDF", title: str) -> None:  # Render styled section title
    pdf.set_text_color(*TEXT)
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf.font_bold, "B", 13)
    pdf.cell(0, 9, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    y = pdf.get_y()
    pdf.line(pdf.l_margin, y, pdf.l_margin + _effective_width(pdf), y)
    pdf.ln(2)


def _meta_block(pdf: "ReportPDF", rows: List[Tuple[str, str]]) -> None:  # Draw two-column metadata
    col = _effective_width(pdf) / 2.0
    line = 6
    for idx in range(0, len(rows), 2):
        left = rows[idx]
        right = rows[idx + 1] if idx + 1 < len(rows) else ("", "")
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.set_font(pdf.font_regular, "", 10)
        pdf.cell(col, line, left[0], new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, line, right[0], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(*TEXT)
        pdf.set_font(pdf.font_bold, "B", 11)
        pdf.cell(col, line, left[1], new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, line, right[1], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)


def _paragraph(pdf: "ReportPDF", text: str, *, size: int = 10, color: Tuple[int, int, int] = TEXT) -> None:
    pdf.set_x(pdf.l_margin)
    pdf.set_text_color(*color)
    pdf.set_font(pdf.font_regular, "", size)
    pdf.multi_cell(_effective_width(pdf), 5.5, text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*TEXT)


def _bullets(pdf: "ReportPDF", heading: str, items: Sequence[str]) -> None:  # Labelled bullet list; "-" when empty
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf.font_bold, "B", 10)
    pdf.cell(0, 6, heading, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    if not items:
        _paragraph(pdf, "-", color=MUTED)
        return
    for item in items:
        _paragraph(pdf, f"{pdf.bullet} {item}")


class ReportPDF(FPDF):  # PDF with custom header/footer styling
    def __init__(self, *args: Any, accent: Tuple[int, int, int] = ACCENT, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.accent = accent
        self.header_title = "Visa Interview Practice Report"
        self.font_regular = "Helvetica"
        self.font_bold = "Helvetica"
        self.supports_unicode = False

    @property
    def bullet(self) -> str:
        return "•" if self.supports_unicode else "-"

    def use_unicode_font(self) -> bool:  # Register DejaVu when the system ships it
        if not (DEJAVU_SANS.is_file() and DEJAVU_SANS_BOLD.is_file()):
            return False
        self.add_font("DejaVu", "", str(DEJAVU_SANS))
        self.add_font("DejaVu", "B", str(DEJAVU_SANS_BOLD))
        self.font_regular = "DejaVu"
        self.font_bold = "DejaVu"
        self.supports_unicode = True
        return True

    def prepare_text(self, text: Any) -> str:  # Sanitize text for the latin-1 core fonts
        value = "" if text is None else str(text)
        if self.supports_unicode:
            return value
        cleaned = value.replace("•", "-").replace("’", "'").replace("—", "-")
        return cleaned.encode("latin-1", "ignore").decode("latin-1")

    def cell(self, w=None, h=None, text="", *args: Any, **kwargs: Any):  # type: ignore[override]
        return super().cell(w, h, self.prepare_text(text), *args, **kwargs)

    def multi_cell(self, w, h=None, text="", *args: Any, **kwargs: Any):  # type: ignore[override]
        return super().multi_cell(w, h, self.prepare_text(text), *args, **kwargs)

    def header(self) -> None:  # Render header banner
        usable = _effective_width(self)
        if self.page_no() == 1:
            self.set_fill_color(*self.accent)
            self.rect(0, 0, self.w, 18, style="F")
            self.set_text_color(255, 255, 255)
            self.set_font(self.font_bold, "B", 16)
            self.set_xy(self.l_margin, 5)
            self.cell(usable, 8, self.header_title)
            self.set_text_color(*TEXT)
            self.set_y(24)
        else:
            self.set_text_color(80, 80, 80)
            self.set_xy(self.l_margin, 8)
            self.set_font(self.font_bold, "B", 12)
            self.cell(usable, 6, self.header_title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            mark = self.get_y()
            self.set_draw_color(*self.accent)
            self.set_line_width(0.4)
            self.line(self.l_margin, mark + 1, self.w - self.r_margin, mark + 1)
            self.set_text_color(*TEXT)
            self.ln(4)

    def footer(self) -> None:  # Render footer with pagination
        self.set_y(-12)
        self.set_draw_color(*RULE)
        self.set_line_width(0.2)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_text_color(120, 120, 120)
        self.set_font(self.font_regular, "", 9)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="R")


def _render_summary(pdf: ReportPDF, summary: SessionSummary) -> None:
    width = _effective_width(pdf)
    top = pdf.get_y()
    pdf.set_fill_color(*SOFT_ACCENT_BG)
    pdf.rect(pdf.l_margin, top, width, 16, style="F")
    pdf.set_xy(pdf.l_margin + 6, top + 4)
    pdf.set_text_color(*MUTED)
    pdf.set_font(pdf.font_regular, "", 10)
    pdf.cell(width / 2, 8, f"Average score {summary.average_score:.1f} over {summary.total_questions} answers")
    pdf.set_text_color(*ACCENT)
    pdf.set_font(pdf.font_bold, "B", 14)
    pdf.cell(width / 2 - 12, 8, f"Grade {summary.overall_grade}", align="R")
    pdf.set_y(top + 20)
    pdf.set_text_color(*TEXT)
    _paragraph(pdf, summary.recommendation, size=11)
    pdf.ln(2)
    _bullets(pdf, "Strong areas", summary.strong_areas)
    _bullets(pdf, "Areas to improve", summary.weak_areas)
    _bullets(pdf, "Red flags", summary.common_red_flags)
    pdf.ln(2)


def _render_scores(pdf: ReportPDF, analysis: AnalysisResult) -> None:  # Two-column criterion/score table
    widths = (_effective_width(pdf) * 0.7, _effective_width(pdf) * 0.3)
    pdf.set_x(pdf.l_margin)
    pdf.set_fill_color(*ACCENT)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font(pdf.font_bold, "B", 9)
    pdf.cell(widths[0], 7, "Criterion", fill=True)
    pdf.cell(widths[1], 7, "Score", fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*TEXT)
    pdf.set_font(pdf.font_regular, "", 9)
    for idx, (name, score) in enumerate(analysis.scores.present().items()):
        fill = idx % 2 == 0
        if fill:
            pdf.set_fill_color(247, 250, 255)
        pdf.set_x(pdf.l_margin)
        pdf.cell(widths[0], 6, criterion_label(name), fill=fill)
        pdf.cell(widths[1], 6, f"{score}/5", fill=fill, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(1)


def _render_answer(pdf: ReportPDF, position: int, answer: "Answer") -> None:
    pdf.set_x(pdf.l_margin)
    pdf.set_text_color(*ACCENT)
    pdf.set_font(pdf.font_bold, "B", 11)
    label = f"Q{position}. {answer.category}" if answer.category else f"Q{position}."
    pdf.cell(0, 7, label, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font(pdf.font_bold, "B", 10)
    pdf.set_text_color(*TEXT)
    pdf.multi_cell(_effective_width(pdf), 5.5, answer.question_text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    _paragraph(pdf, f"Answer: {answer.text}", color=(60, 60, 60))
    analysis = answer.analysis
    if analysis is None:
        _paragraph(pdf, "No analysis recorded.", color=MUTED)
        pdf.ln(3)
        return
    count = analysis.scores.criteria_count()
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf.font_bold, "B", 10)
    pdf.set_text_color(*_CLASSIFICATION_COLORS.get(analysis.classification, TEXT))
    pdf.cell(
        0,
        6,
        f"{analysis.classification}: {analysis.scores.total_score}/{count * 5} "
        f"({score_to_percentage(analysis.scores.total_score, count):.0f}%)",
        new_x=XPos.LMARGIN,
        new_y=YPos.NEXT,
    )
    pdf.set_text_color(*TEXT)
    _render_scores(pdf, analysis)
    if analysis.feedback.overall:
        _paragraph(pdf, analysis.feedback.overall)
    _bullets(pdf, "Suggested improvements", analysis.feedback.improvements)
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    y = pdf.get_y() + 2
    pdf.line(pdf.l_margin, y, pdf.l_margin + _effective_width(pdf), y)
    pdf.set_y(y + 3)


def generate_session_report_pdf(session: "Session") -> bytes:
    """Render a finished session (overview, summary, every answer) to PDF bytes."""

    summary = session.summary
    if summary is None:
        raise EmptySessionError(f"session {session.id} has no summary to report")

    pdf = ReportPDF()
    pdf.use_unicode_font()
    pdf.alias_nb_pages()
    pdf.set_margins(15, 22, 15)
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    _section_title(pdf, "Session Overview")
    _meta_block(
        pdf,
        [
            ("Session ID", session.id),
            ("User", session.user_id or "-"),
            ("Level", session.level or "default"),
            ("Status", session.status.title()),
            ("Started", _format_datetime(session.created_at)),
            ("Completed", _format_datetime(summary.completed_at)),
        ],
    )

    _section_title(pdf, "Summary")
    _render_summary(pdf, summary)

    _section_title(pdf, "Answers")
    for position, answer in enumerate(session.answers, start=1):
        _render_answer(pdf, position, answer)

    return bytes(pdf.output())


__all__ = ["ReportPDF", "generate_session_report_pdf"]
