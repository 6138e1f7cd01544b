# backend/complaint_register/routes/system.py
"""
System health endpoint.

Reports database reachability and the size of the complaints table.
"""

import time
from flask import Blueprint, current_app
from ..extensions import db
from ..models import Complaint, STATUS_PENDING

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        complaint_count = db.session.query(Complaint).count()
        pending_count = db.session.query(Complaint).filter_by(status=STATUS_PENDING).count()

        elapsed_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "complaints": complaint_count,
                "pending": pending_count,
            }
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/health")
def health():
    database = check_database_health()
    code = 200 if database["status"] == "healthy" else 503
    return {"status": database["status"], "checks": {"database": database}}, code
