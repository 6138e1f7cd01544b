# Overview: Service-layer operations for export; writes complaint lists as spreadsheet, CSV or PDF.

"""
Export Service - read-only rendering of complaint lists (xlsx, CSV, PDF)

Consumes the output of list_complaints() / monthly_report(); never writes
to the database.
"""

from __future__ import annotations

import csv
from typing import IO, Iterable
from xml.sax.saxutils import escape

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Table, TableStyle

from ..models import Complaint
from ..time_utils import format_timestamp, localnow


EXPORT_HEADERS = [
    "Complaint No", "Created At", "Name", "Mobile", "Location",
    "Department", "Product", "Serial No", "Status", "Completed At",
]

SHEET_TITLE = "Complaints"

# Upper bound for auto-sized column widths
MAX_COLUMN_WIDTH = 60


def complaint_row(complaint: Complaint) -> list[str]:
    return [
        complaint.complaint_number,
        format_timestamp(complaint.created_at) or "",
        complaint.name,
        complaint.mobile,
        complaint.location,
        complaint.department,
        complaint.product,
        complaint.serial_number,
        complaint.status,
        format_timestamp(complaint.completed_at) or "",
    ]


def export_excel(target, items: Iterable[Complaint]) -> None:
    """
    Write items to an .xlsx workbook.

    target may be a filesystem path or a binary file-like object.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append(EXPORT_HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    widths = [len(h) for h in EXPORT_HEADERS]
    for complaint in items:
        row = complaint_row(complaint)
        ws.append(row)
        widths = [max(w, len(v)) for w, v in zip(widths, row)]

    for idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = min(width + 2, MAX_COLUMN_WIDTH)

    wb.save(target)


def export_csv(stream: IO[str], items: Iterable[Complaint]) -> int:
    """Write items as CSV to a text stream. Returns the number of data rows."""
    writer = csv.writer(stream)
    writer.writerow(EXPORT_HEADERS)
    count = 0
    for complaint in items:
        writer.writerow(complaint_row(complaint))
        count += 1
    return count


# PDF layout: A4 landscape, points
PDF_MARGIN = 20
PDF_HEADER_HEIGHT = 40
PDF_COLUMN_WEIGHTS = [2, 2, 2, 2, 2, 2, 2, 2, 1, 2]
PDF_HEADER_FILL = colors.HexColor("#EEF2FF")

_CELL_STYLE = ParagraphStyle("ComplaintCell", fontName="Helvetica", fontSize=8, leading=10)
_HEAD_STYLE = ParagraphStyle("ComplaintHead", parent=_CELL_STYLE, fontName="Helvetica-Bold")


class _NumberedCanvas(canvas.Canvas):
    """Canvas that defers page output so each footer can carry the total page count."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._page_states = []

    def showPage(self):
        self._page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._page_states)
        for state in self._page_states:
            self.__dict__.update(state)
            self.setFont("Helvetica", 8)
            self.drawRightString(
                self._pagesize[0] - PDF_MARGIN,
                PDF_MARGIN / 2,
                f"Page {self._pageNumber} / {total}",
            )
            super().showPage()
        super().save()


def export_pdf(target, title: str, items: Iterable[Complaint]) -> int:
    """
    Write items to a landscape A4 PDF table headed by title and a
    "Generated:" timestamp. Every page carries a "Page X / Y" footer.

    target may be a filesystem path or a binary file-like object.
    Returns the number of data rows.
    """
    generated = f"Generated: {format_timestamp(localnow())}"

    def _draw_header(canv, doc):
        width, height = doc.pagesize
        canv.saveState()
        canv.setFont("Helvetica-Bold", 16)
        canv.drawString(PDF_MARGIN, height - PDF_MARGIN - 16, title)
        canv.setFont("Helvetica", 9)
        canv.setFillColor(colors.grey)
        canv.drawString(PDF_MARGIN, height - PDF_MARGIN - 30, generated)
        canv.restoreState()

    def _cell(value, style=_CELL_STYLE):
        return Paragraph(escape(value), style)

    rows = [[_cell(h, _HEAD_STYLE) for h in EXPORT_HEADERS]]
    for complaint in items:
        rows.append([_cell(v) for v in complaint_row(complaint)])

    doc = SimpleDocTemplate(
        target,
        pagesize=landscape(A4),
        leftMargin=PDF_MARGIN,
        rightMargin=PDF_MARGIN,
        topMargin=PDF_MARGIN + PDF_HEADER_HEIGHT,
        bottomMargin=PDF_MARGIN * 2,
        title=title,
        pageCompression=0,
    )
    unit = doc.width / sum(PDF_COLUMN_WEIGHTS)
    table = Table(rows, colWidths=[w * unit for w in PDF_COLUMN_WEIGHTS], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), PDF_HEADER_FILL),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ("LINEBELOW", (0, 0), (-1, -1), 0.25, colors.lightgrey),
    ]))

    doc.build([table], onFirstPage=_draw_header, onLaterPages=_draw_header, canvasmaker=_NumberedCanvas)
    return len(rows) - 1
