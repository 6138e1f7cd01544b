# Overview: Flask routes that stream complaint lists and monthly reports as .xlsx, CSV or PDF.

import io

from flask import Blueprint, Response, jsonify, request, send_file, current_app

from ..services import complaint_service, export_service, reporting_service
from ..validation import ValidationError
from ._params import list_filters, report_period


exports_bp = Blueprint("exports", __name__, url_prefix="/api/exports")

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EXPORT_FORMATS = ("xlsx", "csv", "pdf")


def _export_response(items, basename: str, title: str):
    fmt = request.args.get("format", "xlsx").lower()
    if fmt not in EXPORT_FORMATS:
        raise ValidationError("format must be xlsx, csv or pdf")

    if fmt == "csv":
        stream = io.StringIO()
        export_service.export_csv(stream, items)
        return Response(
            stream.getvalue(),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={basename}.csv"},
        )

    if fmt == "pdf":
        buffer = io.BytesIO()
        export_service.export_pdf(buffer, title, items)
        buffer.seek(0)
        return send_file(
            buffer,
            mimetype="application/pdf",
            as_attachment=True,
            download_name=f"{basename}.pdf",
        )

    buffer = io.BytesIO()
    export_service.export_excel(buffer, items)
    buffer.seek(0)
    return send_file(
        buffer,
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=f"{basename}.xlsx",
    )


@exports_bp.get("/complaints")
def export_complaints():
    """Export the filtered complaint list (same filters as GET /api/complaints)."""
    try:
        items = complaint_service.list_complaints(**list_filters())
        return _export_response(items, "complaints_export", "Complaints Export")
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to export complaints")
        return jsonify({"error": "Internal server error"}), 500


@exports_bp.get("/monthly")
def export_monthly_report():
    try:
        year, month = report_period()
        report = reporting_service.monthly_report(
            year=year,
            month=month,
            status=request.args.get("status", "All"),
        )
        return _export_response(report.items, f"monthly_report_{report.period}", f"Monthly Report {report.period}")
    except (ValidationError, reporting_service.ReportError) as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to export monthly report")
        return jsonify({"error": "Internal server error"}), 500
