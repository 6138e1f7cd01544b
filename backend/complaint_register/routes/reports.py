from flask import Blueprint, current_app, jsonify, request

from ..services import reporting_service
from ..validation import ValidationError
from ._params import report_period


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/monthly")
def monthly_report():
    try:
        year, month = report_period()
        report = reporting_service.monthly_report(
            year=year,
            month=month,
            status=request.args.get("status", "All"),
        )
        return jsonify(report.to_dict()), 200
    except (ValidationError, reporting_service.ReportError) as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception:
        current_app.logger.exception("Failed to build monthly report")
        return jsonify({"error": "Internal server error"}), 500
