# Overview: Service-layer operations for reporting; monthly complaint summaries.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..extensions import db
from ..models import Complaint, STATUS_COMPLETED, STATUS_PENDING
from ..time_utils import start_of_day
from .complaint_service import normalize_status_filter


class ReportError(Exception):
    """Raised when report generation fails."""
    pass


@dataclass
class MonthlyReport:
    year: int
    month: int
    status: str
    pending_count: int = 0
    completed_count: int = 0
    items: list[Complaint] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def period(self) -> str:
        return f"{self.year}-{self.month:02d}"

    def summary(self) -> str:
        return (
            f"Summary {self.period}: Pending={self.pending_count}  "
            f"Completed={self.completed_count}  Total={self.total}"
        )

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "period": self.period,
            "status": self.status,
            "pending_count": self.pending_count,
            "completed_count": self.completed_count,
            "total": self.total,
            "items": [c.to_dict() for c in self.items],
        }


def month_range(year: int, month: int) -> tuple[date, date]:
    """Return [first day of month, first day of next month)."""
    if not 1 <= month <= 12:
        raise ReportError("month must be between 1 and 12")
    try:
        start = date(year, month, 1)
        end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    except (ValueError, OverflowError) as exc:
        raise ReportError(f"Invalid report period {year}-{month}") from exc
    return start, end


def monthly_report(*, year: int, month: int, status: str | None = "All") -> MonthlyReport:
    """
    Complaints created in the given calendar month, newest first.

    Counts are taken from the returned items, so
    pending_count + completed_count == total whenever every stored status
    is Pending or Completed.
    """
    start, end = month_range(year, month)

    q = db.session.query(Complaint).filter(
        Complaint.created_at >= start_of_day(start),
        Complaint.created_at < start_of_day(end),
    )

    status_value = normalize_status_filter(status)
    if status_value:
        q = q.filter(Complaint.status == status_value)

    items = q.order_by(Complaint.created_at.desc(), Complaint.id.desc()).all()

    return MonthlyReport(
        year=year,
        month=month,
        status=status_value or "All",
        pending_count=sum(1 for c in items if c.status == STATUS_PENDING),
        completed_count=sum(1 for c in items if c.status == STATUS_COMPLETED),
        items=items,
    )
