"""Document rendering for complaint exports and submission receipts."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Any, Iterable, Sequence
from xml.sax.saxutils import escape

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

PAGE_MARGIN = 15 * mm

styles = getSampleStyleSheet()

TITLE_STYLE = ParagraphStyle(
    name="ReportTitle",
    parent=styles["Title"],
    fontName="Helvetica-Bold",
    fontSize=16,
    leading=20,
    spaceAfter=10,
)

SUBTITLE_STYLE = ParagraphStyle(
    name="ReportSubtitle",
    parent=styles["Normal"],
    fontName="Helvetica",
    fontSize=10,
    leading=13,
    alignment=1,
    textColor=colors.grey,
    spaceAfter=14,
)

LABEL_STYLE = ParagraphStyle(
    name="LabelText",
    fontName="Helvetica-Bold",
    fontSize=11,
    leading=14,
    spaceBefore=8,
)

VALUE_STYLE = ParagraphStyle(
    name="ValueText",
    fontName="Helvetica",
    fontSize=11,
    leading=14,
    spaceAfter=4,
)

ID_STYLE = ParagraphStyle(
    name="TrackingId",
    parent=VALUE_STYLE,
    fontName="Courier-Bold",
    fontSize=18,
    leading=22,
)

WARNING_STYLE = ParagraphStyle(
    name="WarningText",
    parent=VALUE_STYLE,
    fontSize=9,
    leading=12,
    textColor=colors.HexColor("#b45309"),
)

CELL_STYLE = ParagraphStyle(
    name="CellText",
    fontName="Helvetica",
    fontSize=7,
    leading=9,
    wordWrap="CJK",
    splitLongWords=True,
)

FOOTER_STYLE = ParagraphStyle(
    name="FooterText",
    parent=VALUE_STYLE,
    fontSize=9,
    alignment=1,
    textColor=colors.grey,
)

EXPORT_HEADER_FILL = PatternFill(start_color="366092", end_color="366092", fill_type="solid")


def _para(value: Any, style: ParagraphStyle = CELL_STYLE) -> Paragraph:
    """Create a wrapping paragraph with safe escaping."""
    text = escape(str(value if value is not None else "").strip())
    return Paragraph(text.replace("\n", "<br/>"), style)


def _format_cell(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    return "" if value is None else value


# ═══════════════════════════════════════════════════════════════════
#  Tabular exports
# ═══════════════════════════════════════════════════════════════════


def render_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_format_cell(value) for value in row])
    # BOM so spreadsheet apps detect UTF-8
    return output.getvalue().encode("utf-8-sig")


def render_xlsx(headers: Sequence[str], rows: Iterable[Sequence[Any]], *, title: str) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = title[:31]

    sheet.append(list(headers))
    for cell in sheet[1]:
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = EXPORT_HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row in rows:
        sheet.append([_format_cell(value) for value in row])

    for column_cells in sheet.columns:
        length = max(len(str(cell.value or "")) for cell in column_cells)
        sheet.column_dimensions[get_column_letter(column_cells[0].column)].width = min(length + 2, 50)
    sheet.freeze_panes = "A2"

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def render_pdf_table(
    headers: Sequence[str],
    rows: Iterable[Sequence[Any]],
    *,
    title: str,
    subtitle: str = "",
) -> bytes:
    buffer = io.BytesIO()
    pagesize = landscape(A4)
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
        title=title,
    )

    header_style = ParagraphStyle(name="HeaderCell", parent=CELL_STYLE, fontName="Helvetica-Bold", textColor=colors.white)
    data = [[_para(h, header_style) for h in headers]]
    data.extend([_para(_format_cell(v)) for v in row] for row in rows)

    col_width = (pagesize[0] - 2 * PAGE_MARGIN) / len(headers)
    table = Table(data, colWidths=[col_width] * len(headers), repeatRows=1, hAlign="LEFT")
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#366092")),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
                ("LEFTPADDING", (0, 0), (-1, -1), 3),
                ("RIGHTPADDING", (0, 0), (-1, -1), 3),
            ]
        )
    )

    story = [Paragraph(escape(title), TITLE_STYLE)]
    if subtitle:
        story.append(Paragraph(escape(subtitle), SUBTITLE_STYLE))
    story.append(table)
    doc.build(story)
    return buffer.getvalue()


# ═══════════════════════════════════════════════════════════════════
#  Submission receipt
# ═══════════════════════════════════════════════════════════════════


def render_receipt(
    *,
    complaint_id: str,
    submitted_at: datetime,
    passcode_protected: bool,
    organisation: str,
) -> bytes:
    """
    Render the one-page receipt handed to a complainant after submission.

    The receipt shows the tracking ID, the submission time and whether a
    passcode guards the tracking page.  It never contains the passcode.
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=20 * mm,
        bottomMargin=20 * mm,
        title=f"Receipt {complaint_id}",
    )

    story = [
        Paragraph("Complaint Submission Receipt", TITLE_STYLE),
        Paragraph(escape(organisation), SUBTITLE_STYLE),
        Paragraph("Complaint Tracking ID:", LABEL_STYLE),
        Paragraph(escape(complaint_id), ID_STYLE),
        Paragraph("Submission Date:", LABEL_STYLE),
        Paragraph(submitted_at.strftime("%Y-%m-%d %H:%M %Z").strip(), VALUE_STYLE),
        Paragraph("Passcode Protection:", LABEL_STYLE),
    ]
    if passcode_protected:
        story.append(Paragraph("Yes (Passcode set by user)", VALUE_STYLE))
        story.append(Paragraph(
            "Note: We do not store your raw passcode. If you forget it, "
            "you will not be able to track this complaint.",
            WARNING_STYLE,
        ))
    else:
        story.append(Paragraph("No (Open access with ID)", VALUE_STYLE))

    story.append(Spacer(1, 40 * mm))
    story.append(Paragraph(
        "Please keep this document safe. This ID is the only way to track your case.",
        FOOTER_STYLE,
    ))

    doc.build(story)
    return buffer.getvalue()
