# Overview: Pytest coverage for spreadsheet, CSV and PDF export.

import csv
import io

from openpyxl import load_workbook

from complaint_register.services import export_service
from complaint_register.services.complaint_service import list_complaints, toggle_status


def test_excel_export(make_complaint, clock):
    first = make_complaint(name="Asha Patil").complaint_number
    clock.advance(minutes=5)
    make_complaint(name="Ravi Kumar")
    toggle_status(first)

    buffer = io.BytesIO()
    export_service.export_excel(buffer, list_complaints())
    buffer.seek(0)

    ws = load_workbook(buffer).active
    rows = list(ws.values)

    assert ws.title == "Complaints"
    assert list(rows[0]) == export_service.EXPORT_HEADERS
    assert ws["A1"].font.bold
    assert len(rows) == 3
    assert rows[1][2] == "Ravi Kumar"
    assert rows[1][9] in (None, "")
    assert rows[2][0] == first
    assert rows[2][1] == "2024-02-10 09:30:00"
    assert rows[2][8] == "Completed"
    assert rows[2][9] == "2024-02-10 09:35:00"


def test_excel_export_empty(db_session):
    buffer = io.BytesIO()
    export_service.export_excel(buffer, [])
    buffer.seek(0)
    rows = list(load_workbook(buffer).active.values)
    assert rows == [tuple(export_service.EXPORT_HEADERS)]


def test_csv_export(make_complaint):
    make_complaint()
    make_complaint()

    stream = io.StringIO()
    written = export_service.export_csv(stream, list_complaints())

    rows = list(csv.reader(io.StringIO(stream.getvalue())))
    assert written == 2
    assert rows[0] == export_service.EXPORT_HEADERS
    assert rows[1][0].endswith("/0002")
    assert rows[2][0].endswith("/0001")


def test_pdf_export(make_complaint, clock):
    first = make_complaint(name="Asha Patil").complaint_number
    clock.advance(minutes=5)
    make_complaint(name="Ravi Kumar")
    toggle_status(first)

    buffer = io.BytesIO()
    written = export_service.export_pdf(buffer, "Complaints Export", list_complaints())
    data = buffer.getvalue()

    assert written == 2
    assert data.startswith(b"%PDF")
    assert b"Complaints Export" in data
    assert b"Generated: " in data
    assert b"Page 1 / 1" in data
    for header in export_service.EXPORT_HEADERS:
        assert header.encode() in data
    assert b"Asha Patil" in data
    assert b"Ravi Kumar" in data
    assert b"(Completed)" in data


def test_pdf_export_paginates(make_complaint):
    for _ in range(60):
        make_complaint()

    buffer = io.BytesIO()
    export_service.export_pdf(buffer, "Monthly Report 2024-02", list_complaints())
    data = buffer.getvalue()

    assert b"Page 1 / " in data
    assert b"Page 1 / 1)" not in data
