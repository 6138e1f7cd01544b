# Overview: Shared query-string parsing for complaint and report routes.

from __future__ import annotations

from datetime import date

from flask import request

from ..models import STATUS_ALL
from ..time_utils import parse_iso_date
from ..validation import ValidationError


def date_arg(name: str) -> date | None:
    raw = request.args.get(name)
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")


def list_filters() -> dict:
    """Filters accepted by list_complaints(), read from the query string."""
    return {
        "status": request.args.get("status", STATUS_ALL),
        "from_date": date_arg("from"),
        "to_date": date_arg("to"),
        "search": request.args.get("search", ""),
    }


def report_period() -> tuple[int, int]:
    year = request.args.get("year", type=int)
    month = request.args.get("month", type=int)
    if year is None or month is None:
        raise ValidationError("year and month are required integers")
    return year, month
