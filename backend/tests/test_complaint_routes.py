# Overview: Pytest coverage for the complaint, report and export HTTP routes.

import csv
import io

import pytest
from openpyxl import load_workbook


NEW_COMPLAINT = {
    "name": "Asha Patil",
    "mobile": "9820012345",
    "location": "Pune",
    "department": "Service",
    "product": "Inverter",
    "serial_number": "INV-1",
    "details": "No output",
}


@pytest.fixture
def created(client, db_session, clock):
    response = client.post("/api/complaints", json=NEW_COMPLAINT)
    assert response.status_code == 201
    return response.get_json()


class TestComplaintRoutes:

    def test_create(self, created):
        assert created["complaint_number"] == "JIPL/PUNE/20240210/SERVICE/0001"
        assert created["complaint"]["status"] == "Pending"
        assert created["complaint"]["completed_at"] is None
        assert created["complaint"]["created_at"] == "2024-02-10 09:30:00"

    def test_create_missing_field(self, client, db_session, clock):
        payload = dict(NEW_COMPLAINT, serial_number="")
        response = client.post("/api/complaints", json=payload)
        assert response.status_code == 400
        assert "Serial Number" in response.get_json()["error"]

    def test_create_without_body(self, client, db_session, clock):
        response = client.post("/api/complaints")
        assert response.status_code == 400

    def test_list_with_filters(self, client, created):
        client.post("/api/complaints", json=dict(NEW_COMPLAINT, name="Ravi Kumar"))

        everything = client.get("/api/complaints").get_json()["complaints"]
        assert len(everything) == 2

        searched = client.get("/api/complaints?search=ravi").get_json()["complaints"]
        assert [c["name"] for c in searched] == ["Ravi Kumar"]

        ranged = client.get("/api/complaints?from=2024-02-11").get_json()["complaints"]
        assert ranged == []

        completed = client.get("/api/complaints?status=Completed").get_json()["complaints"]
        assert completed == []

    def test_list_bad_date(self, client, db_session):
        response = client.get("/api/complaints?from=10-02-2024")
        assert response.status_code == 400

    def test_get_by_number(self, client, created):
        number = created["complaint_number"]
        response = client.get(f"/api/complaints/{number}")
        assert response.status_code == 200
        assert response.get_json()["complaint"]["complaint_number"] == number

    def test_get_unknown(self, client, db_session):
        response = client.get("/api/complaints/JIPL/NA/20240210/NA/0001")
        assert response.status_code == 404

    def test_update(self, client, created):
        number = created["complaint_number"]
        body = dict(NEW_COMPLAINT, name="Asha P.", status="Completed")

        response = client.put(f"/api/complaints/{number}", json=body)

        assert response.status_code == 200
        complaint = response.get_json()["complaint"]
        assert complaint["name"] == "Asha P."
        assert complaint["status"] == "Completed"
        assert complaint["completed_at"] == "2024-02-10 09:30:00"
        assert complaint["complaint_number"] == number

    def test_update_with_completed_at(self, client, created):
        number = created["complaint_number"]
        body = dict(NEW_COMPLAINT, status="Completed", completed_at="2024-02-12T16:00:00")
        complaint = client.put(f"/api/complaints/{number}", json=body).get_json()["complaint"]
        assert complaint["completed_at"] == "2024-02-12 16:00:00"

    def test_update_rejects_non_datetime_completed_at(self, client, created):
        number = created["complaint_number"]
        body = dict(NEW_COMPLAINT, status="Completed", completed_at=12345)

        response = client.put(f"/api/complaints/{number}", json=body)

        assert response.status_code == 400
        assert "completed_at" in response.get_json()["error"]
        stored = client.get(f"/api/complaints/{number}").get_json()["complaint"]
        assert stored["status"] == "Pending"

    def test_update_unknown(self, client, db_session, clock):
        body = dict(NEW_COMPLAINT, status="Pending")
        response = client.put("/api/complaints/JIPL/NA/20240210/NA/0009", json=body)
        assert response.status_code == 404

    def test_update_invalid_status(self, client, created):
        number = created["complaint_number"]
        response = client.put(f"/api/complaints/{number}", json=dict(NEW_COMPLAINT, status="Done"))
        assert response.status_code == 400

    def test_toggle(self, client, created):
        number = created["complaint_number"]

        first = client.post(f"/api/complaints/toggle/{number}")
        assert first.status_code == 200
        assert first.get_json()["complaint"]["status"] == "Completed"

        second = client.post(f"/api/complaints/toggle/{number}")
        assert second.get_json()["complaint"]["status"] == "Pending"
        assert second.get_json()["complaint"]["completed_at"] is None

    def test_toggle_unknown(self, client, db_session):
        response = client.post("/api/complaints/toggle/JIPL/NA/20240210/NA/0001")
        assert response.status_code == 404


class TestReportRoutes:

    def test_monthly(self, client, created):
        response = client.get("/api/reports/monthly?year=2024&month=2&status=All")
        assert response.status_code == 200
        body = response.get_json()
        assert (body["pending_count"], body["completed_count"], body["total"]) == (1, 0, 1)
        assert body["items"][0]["complaint_number"] == created["complaint_number"]

    def test_monthly_requires_period(self, client, db_session):
        assert client.get("/api/reports/monthly?year=2024").status_code == 400

    def test_monthly_invalid_month(self, client, db_session):
        assert client.get("/api/reports/monthly?year=2024&month=13").status_code == 400

    def test_monthly_unexpected_failure(self, client, db_session, monkeypatch):
        from complaint_register.services import reporting_service

        def _boom(**kwargs):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(reporting_service, "monthly_report", _boom)
        response = client.get("/api/reports/monthly?year=2024&month=2")
        assert response.status_code == 500
        assert response.get_json() == {"error": "Internal server error"}


class TestExportRoutes:

    def test_complaints_xlsx(self, client, created):
        response = client.get("/api/exports/complaints?format=xlsx")
        assert response.status_code == 200
        assert response.mimetype.endswith("spreadsheetml.sheet")

        rows = list(load_workbook(io.BytesIO(response.data)).active.values)
        assert rows[1][0] == created["complaint_number"]

    def test_complaints_csv(self, client, created):
        response = client.get("/api/exports/complaints?format=csv&status=Pending")
        assert response.status_code == 200
        assert response.mimetype == "text/csv"
        rows = list(csv.reader(io.StringIO(response.get_data(as_text=True))))
        assert len(rows) == 2

    def test_complaints_pdf(self, client, created):
        response = client.get("/api/exports/complaints?format=pdf")
        assert response.status_code == 200
        assert response.mimetype == "application/pdf"
        assert response.data.startswith(b"%PDF")
        assert b"Complaints Export" in response.data
        assert b"Asha Patil" in response.data

    def test_unsupported_format(self, client, db_session):
        assert client.get("/api/exports/complaints?format=docx").status_code == 400

    def test_monthly_export(self, client, created):
        response = client.get("/api/exports/monthly?year=2024&month=2&format=csv")
        assert response.status_code == 200
        assert "monthly_report_2024-02.csv" in response.headers["Content-Disposition"]

    def test_monthly_export_pdf(self, client, created):
        response = client.get("/api/exports/monthly?year=2024&month=2&format=pdf")
        assert response.status_code == 200
        assert "monthly_report_2024-02.pdf" in response.headers["Content-Disposition"]
        assert b"Monthly Report 2024-02" in response.data


def test_health(client, db_session):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "healthy"
