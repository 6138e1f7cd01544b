# Overview: Flask API routes for complaint operations; parses input and returns JSON responses.

# backend/complaint_register/routes/complaints.py
"""
Complaint API routes

Complaint numbers contain slashes (JIPL/LOC/YYYYMMDD/DEPT/SEQ), so routes
that address a single complaint take the number through a path converter.
"""

from flask import Blueprint, request, jsonify, current_app

from ..services import complaint_service
from ..services.complaint_service import ComplaintNumberConflictError
from ..validation import ValidationError
from ._params import list_filters


complaints_bp = Blueprint("complaints", __name__, url_prefix="/api/complaints")

CREATE_FIELDS = ("name", "mobile", "location", "department", "product", "serial_number", "details")
UPDATE_FIELDS = CREATE_FIELDS + ("status", "completed_at")


@complaints_bp.get("")
def list_complaints_route():
    """
    List complaints, newest first.

    Query params:
    - status: All | Pending | Completed (anything else behaves as All)
    - from, to: inclusive YYYY-MM-DD bounds on the creation date
    - search: substring matched against number, name, mobile, location,
      department, product and serial number
    """
    try:
        complaints = complaint_service.list_complaints(**list_filters())
        return jsonify({"complaints": [c.to_dict() for c in complaints]}), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to list complaints")
        return jsonify({"error": "Internal server error"}), 500


@complaints_bp.post("")
def create_complaint_route():
    """Register a new complaint; responds with the generated complaint number."""
    data = request.get_json(silent=True) or {}
    try:
        complaint = complaint_service.create_complaint(
            **{key: data.get(key) for key in CREATE_FIELDS}
        )
        return jsonify({
            "complaint_number": complaint.complaint_number,
            "complaint": complaint.to_dict(),
        }), 201
    except ComplaintNumberConflictError as e:
        return jsonify({"error": str(e)}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create complaint")
        return jsonify({"error": "Internal server error"}), 500


@complaints_bp.post("/toggle/<path:complaint_number>")
def toggle_complaint_route(complaint_number: str):
    """Flip a complaint between Pending and Completed."""
    try:
        complaint = complaint_service.toggle_status(complaint_number)
        if not complaint:
            return jsonify({"error": "Complaint not found"}), 404
        return jsonify({"complaint": complaint.to_dict()}), 200
    except Exception:
        current_app.logger.exception("Failed to toggle complaint status")
        return jsonify({"error": "Internal server error"}), 500


@complaints_bp.get("/<path:complaint_number>")
def get_complaint_route(complaint_number: str):
    complaint = complaint_service.get_complaint(complaint_number)
    if not complaint:
        return jsonify({"error": "Complaint not found"}), 404
    return jsonify({"complaint": complaint.to_dict()}), 200


@complaints_bp.put("/<path:complaint_number>")
def update_complaint_route(complaint_number: str):
    """
    Replace the mutable fields of a complaint.

    The body must carry every field; complaint_number and created_at in the
    body are ignored. 404 when no complaint has this number.
    """
    data = request.get_json(silent=True) or {}
    try:
        updated = complaint_service.update_complaint(
            complaint_number,
            **{key: data.get(key) for key in UPDATE_FIELDS}
        )
        if not updated:
            return jsonify({"error": "Complaint not found"}), 404
        complaint = complaint_service.get_complaint(complaint_number)
        return jsonify({"complaint": complaint.to_dict()}), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update complaint")
        return jsonify({"error": "Internal server error"}), 500
