# Overview: Service-layer operations for complaint numbering; derives per-bucket sequences from stored rows.

"""
Complaint Numbering Service

FORMAT: JIPL/{LOCATION}/{YYYYMMDD}/{DEPARTMENT}/{SEQ}

A bucket is the (location token, date token, department token) triple.
Sequences restart at 1 in every bucket and are derived from the highest
number already stored under the bucket prefix; there is no counter table.

CONCURRENCY: The read-then-insert window is serialized per bucket by
bucket_lock(). The UNIQUE constraint on complaint_number backs this up for
writers the lock cannot see (see complaint_service.create_complaint).
"""

from __future__ import annotations

import re
import threading
from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterator

from sqlalchemy import func

from ..extensions import db
from ..models import Complaint


ORG_CODE = "JIPL"
SEQUENCE_PAD = 4
EMPTY_TOKEN = "NA"

_SLASH_SEPARATOR = re.compile(r"\s*/\s*")
_WHITESPACE_RUN = re.compile(r"\s+")
_TOKEN_DISALLOWED = re.compile(r"[^A-Z0-9\-]")

# Entries live only while some caller holds or waits on the bucket
_bucket_locks: dict[str, threading.Lock] = {}
_bucket_users: dict[str, int] = {}
_bucket_locks_guard = threading.Lock()


def sanitize_token(value: str | None) -> str:
    """
    Render free text as an identifier-safe token.

    A slash together with the spaces around it becomes one dash, so
    "Mumbai / Andheri East" yields "MUMBAI-ANDHERI-EAST". Text with nothing
    usable left maps to "NA".
    """
    s = (value or "").strip().upper()
    s = _SLASH_SEPARATOR.sub("-", s)
    s = _WHITESPACE_RUN.sub("-", s)
    s = _TOKEN_DISALLOWED.sub("", s)
    return s or EMPTY_TOKEN


def date_token(day: date | datetime) -> str:
    return day.strftime("%Y%m%d")


def bucket_prefix(location_token: str, day_token: str, department_token: str) -> str:
    return f"{ORG_CODE}/{location_token}/{day_token}/{department_token}/"


def parse_sequence(complaint_number: str | None) -> int | None:
    """Return the numeric suffix of a complaint number, or None if it is not numeric."""
    if not complaint_number:
        return None
    last = complaint_number.split("/")[-1]
    try:
        return int(last)
    except ValueError:
        return None


def format_complaint_number(prefix: str, sequence: int) -> str:
    return f"{prefix}{sequence:0{SEQUENCE_PAD}d}"


def latest_in_bucket(prefix: str) -> str | None:
    """
    Greatest stored complaint number under prefix.

    Ordered by length first so a widened suffix (10000) ranks above 9999.
    """
    return (
        db.session.query(Complaint.complaint_number)
        .filter(Complaint.complaint_number.startswith(prefix, autoescape=True))
        .order_by(
            func.length(Complaint.complaint_number).desc(),
            Complaint.complaint_number.desc(),
        )
        .limit(1)
        .scalar()
    )


def next_sequence(prefix: str) -> int:
    last = latest_in_bucket(prefix)
    if not last:
        return 1
    current = parse_sequence(last)
    if current is None:
        # Legacy/malformed suffix: restart rather than fail the intake
        return 1
    return current + 1


def allocate_complaint_number(location: str, department: str, now: datetime) -> str:
    """
    Compute the next complaint number for the bucket of (location, department, now).

    Does not write anything; callers insert the row while holding
    bucket_lock() for the same prefix.
    """
    prefix = bucket_prefix(sanitize_token(location), date_token(now), sanitize_token(department))
    return format_complaint_number(prefix, next_sequence(prefix))


@contextmanager
def bucket_lock(prefix: str) -> Iterator[None]:
    """
    Serialize allocate-and-insert for one bucket within this process.

    The lock is dropped once its last user leaves, so the registry stays
    bounded by the buckets in use rather than every bucket ever seen.
    """
    with _bucket_locks_guard:
        lock = _bucket_locks.setdefault(prefix, threading.Lock())
        _bucket_users[prefix] = _bucket_users.get(prefix, 0) + 1
    try:
        with lock:
            yield
    finally:
        with _bucket_locks_guard:
            _bucket_users[prefix] -= 1
            if not _bucket_users[prefix]:
                del _bucket_users[prefix]
                del _bucket_locks[prefix]
