"""
Pytest fixtures for the complaint register backend tests.

Provides an in-memory application, a cleared database per test, a test
client, a controllable clock and small factories for complaint rows.
"""

from datetime import datetime, timedelta

import pytest

from complaint_register import create_app, sqlite_uri
from complaint_register.extensions import db
from complaint_register.models import Complaint, STATUS_PENDING
from complaint_register.services import complaint_service


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        db.session.query(Complaint).delete()
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def file_app(tmp_path):
    """Application bound to a throwaway SQLite file (for CLI and store tests)."""
    return create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': sqlite_uri(str(tmp_path / "data" / "complaints.db")),
    })


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def set(self, value: datetime) -> None:
        self.now = value

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(scope='function')
def clock(monkeypatch):
    """Freeze complaint_service's notion of 'now' (default 2024-02-10 09:30:00)."""
    c = Clock(datetime(2024, 2, 10, 9, 30, 0))
    monkeypatch.setattr(complaint_service, "localnow", c)
    return c


COMPLAINT_DEFAULTS = {
    "name": "Asha Patil",
    "mobile": "+91 98200 12345",
    "location": "Mumbai / Andheri East",
    "department": "Service",
    "product": "Inverter 1100VA",
    "serial_number": "INV-2024-0001",
    "details": "Unit beeps continuously",
}


@pytest.fixture(scope='function')
def make_complaint(db_session, clock):
    """Create complaints through the service with overridable defaults."""
    def _make(**overrides):
        fields = dict(COMPLAINT_DEFAULTS)
        fields.update(overrides)
        return complaint_service.create_complaint(**fields)
    return _make


@pytest.fixture(scope='function')
def insert_complaint(db_session):
    """Insert a raw row, bypassing numbering (for legacy/edge-case data)."""
    def _insert(complaint_number, *, created_at=None, status=STATUS_PENDING, completed_at=None):
        complaint = Complaint(
            complaint_number=complaint_number,
            created_at=created_at or datetime(2024, 2, 10, 9, 0, 0),
            name="Legacy",
            mobile="022 1234 5678",
            location="Pune",
            department="Sales",
            product="Battery",
            serial_number="B-1",
            status=status,
            completed_at=completed_at,
            details="",
        )
        db_session.add(complaint)
        db_session.commit()
        return complaint
    return _insert
