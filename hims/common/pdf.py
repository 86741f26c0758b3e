# hims/common/pdf.py
"""
Small reportlab platypus toolkit shared by bill, prescription and lab report
exports. Documents are built as a list of flowables and rendered in memory.
"""
from __future__ import annotations

from io import BytesIO
from typing import Any, Iterable, Sequence
from xml.sax.saxutils import escape

from django.conf import settings
from django.http import HttpResponse
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

HEADER_COLOR = colors.HexColor("#0b3d60")

_styles = getSampleStyleSheet()

TITLE_STYLE = ParagraphStyle(
    "HimsTitle",
    parent=_styles["Heading1"],
    fontSize=16,
    textColor=HEADER_COLOR,
    spaceAfter=12,
)
SECTION_STYLE = ParagraphStyle(
    "HimsSection",
    parent=_styles["Heading3"],
    textColor=HEADER_COLOR,
    spaceBefore=8,
    spaceAfter=4,
)
BODY_STYLE = _styles["BodyText"]


def _text(value: Any) -> str:
    if value is None or value == "":
        return "-"
    return str(value)


def header(title: str) -> list:
    hospital = getattr(settings, "HOSPITAL_NAME", "Hospital")
    return [
        Paragraph(hospital, TITLE_STYLE),
        Paragraph(title, SECTION_STYLE),
        Spacer(1, 0.1 * inch),
    ]


def section(title: str) -> Paragraph:
    return Paragraph(title, SECTION_STYLE)


def paragraph(text: Any) -> Paragraph:
    # reportlab paragraphs parse markup; escape first, newlines become breaks
    return Paragraph(escape(_text(text)).replace("\n", "<br/>"), BODY_STYLE)


def key_value_table(rows: Iterable[tuple[str, Any]], *, col_widths=(1.8 * inch, 4.6 * inch)) -> Table:
    data = [[label, _text(value)] for label, value in rows]
    table = Table(data, colWidths=list(col_widths))
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    return table


def grid_table(head: Sequence[str], rows: Iterable[Sequence[Any]], *, col_widths: Sequence[float] | None = None) -> Table:
    data = [list(head)] + [[_text(c) for c in row] for row in rows]
    table = Table(data, colWidths=list(col_widths) if col_widths else None, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
    ]))
    return table


def totals_table(rows: Iterable[tuple[str, Any]]) -> Table:
    data = [[label, _text(value)] for label, value in rows]
    table = Table(data, colWidths=[2 * inch, 1.6 * inch], hAlign="RIGHT")
    table.setStyle(TableStyle([
        ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
        ("FONTNAME", (0, 0), (-1, -2), "Helvetica"),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
    ]))
    return table


def render(story: list, *, title: str = "") -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=title,
        leftMargin=0.6 * inch,
        rightMargin=0.6 * inch,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
    )
    doc.build(story)
    return buffer.getvalue()


def pdf_response(content: bytes, *, filename: str, inline: bool = False) -> HttpResponse:
    disposition = "inline" if inline else "attachment"
    response = HttpResponse(content, content_type="application/pdf")
    response["Content-Disposition"] = f'{disposition}; filename="{filename}"'
    return response
