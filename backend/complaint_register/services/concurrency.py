# Overview: Service-layer operations for concurrency; retry wrapper for conflicting writes.

from __future__ import annotations

import time

from flask import current_app
from sqlalchemy.exc import IntegrityError, OperationalError

from ..extensions import db


DEFAULT_RETRY_ON = (OperationalError,)


def run_with_retry(
    func,
    *,
    attempts: int = 3,
    backoff_base: float = 0.1,
    retry_on: tuple[type[Exception], ...] = DEFAULT_RETRY_ON,
):
    """
    Execute a DB operation with retry on concurrency-related failures.

    Retries on OperationalError (SQLite "database is locked") by default.
    Callers that re-derive values inside func (complaint numbers) also pass
    IntegrityError so a lost race is retried with fresh data.
    """
    last_exc = None
    for attempt in range(attempts):
        try:
            return func()
        except retry_on as exc:
            db.session.rollback()
            last_exc = exc
            if attempt >= attempts - 1:
                raise
            current_app.logger.warning(
                "Retrying after %s (attempt %d of %d)", type(exc).__name__, attempt + 1, attempts
            )
            time.sleep(backoff_base * (2 ** attempt))
    if last_exc:
        raise last_exc


def is_unique_violation(exc: IntegrityError) -> bool:
    return "UNIQUE" in str(exc.orig).upper()
