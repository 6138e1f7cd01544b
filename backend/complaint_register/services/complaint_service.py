# Overview: Service-layer operations for complaints; encapsulates business logic and database work.

"""
Complaint Service - intake, lookup, filtering and status lifecycle

KEYS: Records are addressed by complaint_number (business key). The
surrogate id is never exposed as an update key.

STATUS RULES:
- Completed: completed_at = supplied value, else now
- Pending: completed_at forced to NULL whatever the caller supplied

VALIDATION: Fields are trimmed and validated here, not only at the form or
API boundary, so direct callers cannot persist blank or malformed data.
"""

from __future__ import annotations

from datetime import datetime

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Complaint, STATUS_COMPLETED, STATUS_PENDING, STATUSES
from ..time_utils import (
    DateLike,
    as_date,
    localnow,
    parse_iso_datetime,
    start_of_day,
    start_of_next_day,
)
from ..validation import ConflictError, ValidationError, validate_complaint_fields
from . import numbering_service
from .concurrency import is_unique_violation, run_with_retry


SEARCH_COLUMNS = (
    Complaint.complaint_number,
    Complaint.name,
    Complaint.mobile,
    Complaint.location,
    Complaint.department,
    Complaint.product,
    Complaint.serial_number,
)


class ComplaintNumberConflictError(ConflictError):
    """Raised when a unique complaint number could not be allocated."""


def normalize_status_filter(status: str | None) -> str | None:
    """Map a filter value to a concrete status, or None for "All" and anything unrecognised."""
    if status in STATUSES:
        return status
    return None


def resolve_completed_at(status: str, completed_at: datetime | str | None) -> datetime | None:
    if status != STATUS_COMPLETED:
        return None
    if isinstance(completed_at, str):
        try:
            completed_at = parse_iso_datetime(completed_at)
        except ValueError as exc:
            raise ValidationError("completed_at must be an ISO-8601 datetime") from exc
    elif completed_at is not None and not isinstance(completed_at, datetime):
        raise ValidationError("completed_at must be an ISO-8601 datetime")
    return (completed_at or localnow()).replace(microsecond=0)


def create_complaint(
    *,
    name: str,
    mobile: str,
    location: str,
    department: str,
    product: str,
    serial_number: str,
    details: str | None = "",
) -> Complaint:
    """
    Validate and persist a new Pending complaint, assigning its number.

    The clock is read once; the same instant supplies both created_at and
    the date token, so a call straddling midnight stays in one bucket.
    """
    fields = validate_complaint_fields(
        name=name,
        mobile=mobile,
        location=location,
        department=department,
        product=product,
        serial_number=serial_number,
        details=details,
    )

    now = localnow()
    prefix = numbering_service.bucket_prefix(
        numbering_service.sanitize_token(fields.location),
        numbering_service.date_token(now),
        numbering_service.sanitize_token(fields.department),
    )

    def _op() -> Complaint:
        number = numbering_service.allocate_complaint_number(fields.location, fields.department, now)
        complaint = Complaint(
            complaint_number=number,
            created_at=now,
            status=STATUS_PENDING,
            completed_at=None,
            **fields.as_dict(),
        )
        db.session.add(complaint)
        db.session.commit()
        return complaint

    attempts = current_app.config.get("COMPLAINT_NUMBER_ATTEMPTS", 3)
    with numbering_service.bucket_lock(prefix):
        try:
            complaint = run_with_retry(_op, attempts=attempts, retry_on=(IntegrityError,))
        except IntegrityError as exc:
            db.session.rollback()
            if is_unique_violation(exc):
                raise ComplaintNumberConflictError(
                    f"Could not allocate a unique complaint number under {prefix} "
                    f"after {attempts} attempts"
                ) from exc
            raise

    current_app.logger.info("Created complaint %s", complaint.complaint_number)
    return complaint


def get_complaint(complaint_number: str) -> Complaint | None:
    return db.session.query(Complaint).filter_by(complaint_number=complaint_number).first()


def list_complaints(
    *,
    status: str | None = "All",
    from_date: DateLike = None,
    to_date: DateLike = None,
    search: str | None = "",
) -> list[Complaint]:
    """
    List complaints matching every supplied filter, newest first.

    Args:
        status: "Pending", "Completed", or anything else for no restriction
        from_date: inclusive lower bound on the created_at date
        to_date: inclusive upper bound on the created_at date
        search: substring matched against the number and the free-text columns

    Date bounds are applied as datetime ranges ([from 00:00, to+1 00:00)),
    never as string comparisons on the stored value.
    """
    q = db.session.query(Complaint)

    status_value = normalize_status_filter(status)
    if status_value:
        q = q.filter(Complaint.status == status_value)

    try:
        start = as_date(from_date)
        end = as_date(to_date)
    except ValueError as exc:
        raise ValidationError(f"Invalid date filter: {exc}") from exc

    if start:
        q = q.filter(Complaint.created_at >= start_of_day(start))
    if end:
        q = q.filter(Complaint.created_at < start_of_next_day(end))

    term = (search or "").strip()
    if term:
        pattern = f"%{term}%"
        q = q.filter(or_(*[column.like(pattern) for column in SEARCH_COLUMNS]))

    return q.order_by(Complaint.created_at.desc(), Complaint.id.desc()).all()


def update_complaint(
    complaint_number: str,
    *,
    name: str,
    mobile: str,
    location: str,
    department: str,
    product: str,
    serial_number: str,
    status: str,
    completed_at: datetime | str | None = None,
    details: str | None = "",
) -> bool:
    """
    Overwrite the mutable fields of the complaint with this number.

    Returns True when a row was updated, False when no complaint has that
    number. complaint_number and created_at are never written.
    """
    if status not in STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(STATUSES)}")

    fields = validate_complaint_fields(
        name=name,
        mobile=mobile,
        location=location,
        department=department,
        product=product,
        serial_number=serial_number,
        details=details,
    )

    values = dict(fields.as_dict())
    values["status"] = status
    values["completed_at"] = resolve_completed_at(status, completed_at)

    def _op() -> int:
        affected = (
            db.session.query(Complaint)
            .filter(Complaint.complaint_number == complaint_number)
            .update(values, synchronize_session="fetch")
        )
        db.session.commit()
        return affected

    affected = run_with_retry(_op)
    if affected:
        current_app.logger.info("Updated complaint %s (status=%s)", complaint_number, status)
    else:
        current_app.logger.info("No complaint matched %s; nothing updated", complaint_number)
    return bool(affected)


def toggle_status(complaint_number: str) -> Complaint | None:
    """
    Flip a complaint between Pending and Completed.

    Completing stamps completed_at with now; reopening clears it.
    Returns the refreshed complaint, or None if the number is unknown.
    """
    complaint = get_complaint(complaint_number)
    if not complaint:
        return None

    if complaint.status == STATUS_PENDING:
        complaint.status = STATUS_COMPLETED
        complaint.completed_at = localnow()
    else:
        complaint.status = STATUS_PENDING
        complaint.completed_at = None

    db.session.commit()
    current_app.logger.info("Toggled complaint %s to %s", complaint_number, complaint.status)
    return complaint
