from __future__ import annotations

from ..extensions import db
from ..time_utils import format_timestamp


STATUS_PENDING = "Pending"
STATUS_COMPLETED = "Completed"
STATUSES = (STATUS_PENDING, STATUS_COMPLETED)

# Filter value meaning "no status restriction"
STATUS_ALL = "All"


class Complaint(db.Model):
    """
    A service complaint raised against a product at a location/department.

    LIFECYCLE:
    1. Pending: created, completed_at is NULL
    2. Completed: completed_at holds the completion time
    A complaint can move back to Pending, which clears completed_at.

    complaint_number is the business key (JIPL/LOC/YYYYMMDD/DEPT/SEQ).
    It is assigned once at creation and never rewritten; callers address
    records by it rather than by the surrogate id.
    """
    __tablename__ = "complaints"
    __table_args__ = (
        db.Index("idx_created", "created_at"),
        db.Index("idx_status", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    complaint_number = db.Column(db.String(128), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False)

    name = db.Column(db.String(255), nullable=False)
    mobile = db.Column(db.String(32), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    department = db.Column(db.String(255), nullable=False)
    product = db.Column(db.String(255), nullable=False)
    serial_number = db.Column(db.String(255), nullable=False)

    status = db.Column(db.String(16), nullable=False, default=STATUS_PENDING)
    completed_at = db.Column(db.DateTime, nullable=True)
    details = db.Column(db.Text, nullable=False, default="", server_default="")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "complaint_number": self.complaint_number,
            "created_at": format_timestamp(self.created_at),
            "name": self.name,
            "mobile": self.mobile,
            "location": self.location,
            "department": self.department,
            "product": self.product,
            "serial_number": self.serial_number,
            "status": self.status,
            "completed_at": format_timestamp(self.completed_at),
            "details": self.details or "",
        }

    def __repr__(self) -> str:
        return f"<Complaint {self.complaint_number} {self.status}>"
