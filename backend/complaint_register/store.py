# Overview: In-process façade over the complaint services for non-HTTP callers.

"""
Complaint Store

open_store(path) binds an application to one SQLite file, creating the
directory and schema if needed, and returns a ComplaintStore. Every method
runs inside its own application context; the database session is removed
when that context ends, on success and on error alike.

Records handed back are detached from any session. Their column values
are loaded and safe to read; assigning to them changes nothing until the
record is passed back through update().
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from contextlib import contextmanager
from typing import Iterator

from flask import Flask

from . import create_app, sqlite_uri
from .extensions import db
from .models import Complaint, STATUS_ALL
from .services import complaint_service, reporting_service
from .services.reporting_service import MonthlyReport
from .time_utils import DateLike


UPDATE_FIELDS = (
    "name", "mobile", "location", "department", "product",
    "serial_number", "status", "completed_at", "details",
)


def _field(record, key: str):
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


class ComplaintStore:
    def __init__(self, app: Flask):
        self.app = app

    @contextmanager
    def _scope(self) -> Iterator[None]:
        with self.app.app_context():
            yield

    def create(self, **fields) -> str:
        """Persist a new complaint and return its complaint number."""
        with self._scope():
            complaint = complaint_service.create_complaint(**fields)
            return complaint.complaint_number

    def get(self, complaint_number: str) -> Complaint | None:
        with self._scope():
            return complaint_service.get_complaint(complaint_number)

    def list(
        self,
        status: str | None = STATUS_ALL,
        from_date: DateLike = None,
        to_date: DateLike = None,
        search: str | None = "",
    ) -> list[Complaint]:
        with self._scope():
            return complaint_service.list_complaints(
                status=status, from_date=from_date, to_date=to_date, search=search
            )

    def update(self, record) -> bool:
        """
        Write back a record (model instance or mapping) keyed by complaint_number.

        Returns False when no stored complaint has that number.
        """
        complaint_number = _field(record, "complaint_number")
        values = {key: _field(record, key) for key in UPDATE_FIELDS}
        with self._scope():
            return complaint_service.update_complaint(complaint_number, **values)

    def toggle_status(self, complaint_number: str) -> Complaint | None:
        with self._scope():
            complaint = complaint_service.toggle_status(complaint_number)
            if complaint is not None:
                db.session.refresh(complaint)
            return complaint

    def monthly_report(self, year: int, month: int, status: str | None = STATUS_ALL) -> MonthlyReport:
        with self._scope():
            return reporting_service.monthly_report(year=year, month=month, status=status)


def open_store(path: str | os.PathLike, **config) -> ComplaintStore:
    """Open (and initialize if new) the complaint database at path."""
    path = os.fspath(path)
    overrides = {
        "COMPLAINTS_DB_PATH": path,
        "SQLALCHEMY_DATABASE_URI": sqlite_uri(path),
    }
    overrides.update(config)
    return ComplaintStore(create_app(overrides))
