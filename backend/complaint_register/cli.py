# Overview: Flask CLI command groups for setup, complaint intake, reporting and export.

# backend/complaint_register/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Use: python -m flask --app complaint_register <group> <command> [options]
# - Set COMPLAINTS_DB_PATH to point at a different database file.
#
# System:
# - python -m flask --app complaint_register system init-db
#   Idempotent: create the complaints table and indexes if missing.
#
# Complaints:
# - python -m flask --app complaint_register complaints create --name "Asha" --mobile "98200 12345" \
#       --location "Mumbai / Andheri East" --department Service --product Inverter --serial SN-1
#   Register a complaint and print its number.
# - python -m flask --app complaint_register complaints list --status Pending --from 2024-02-01 --to 2024-02-29
#   List complaints, newest first (also --search TEXT).
# - python -m flask --app complaint_register complaints toggle "JIPL/MUMBAI/20240210/SERVICE/0001"
#   Flip a complaint between Pending and Completed.
# - python -m flask --app complaint_register complaints export --output complaints.xlsx
#   Export the filtered list to .xlsx, .csv or .pdf (by file extension).
#
# Reports:
# - python -m flask --app complaint_register reports monthly --year 2024 --month 2 [--status All] [--output report.xlsx]
#   Print the monthly summary and optionally export its rows.

import os

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import STATUS_ALL, STATUS_COMPLETED, STATUS_PENDING
from .services import complaint_service, export_service, reporting_service
from .validation import ConflictError, ValidationError


STATUS_CHOICES = click.Choice([STATUS_ALL, STATUS_PENDING, STATUS_COMPLETED])


def _print_complaints(complaints):
    if not complaints:
        click.echo("No complaints found.")
        return

    click.echo("\n" + "="*120)
    click.echo(f"{'Complaint No':<42} {'Created At':<20} {'Name':<20} {'Product':<18} {'Status':<10} {'Completed At'}")
    click.echo("="*120)

    for c in complaints:
        row = c.to_dict()
        click.echo(
            f"{row['complaint_number']:<42} {row['created_at']:<20} {row['name'][:20]:<20} "
            f"{row['product'][:18]:<18} {row['status']:<10} {row['completed_at'] or ''}"
        )

    click.echo("="*120 + "\n")


def _write_export(output, items, title):
    extension = os.path.splitext(output)[1].lower()
    if extension == ".csv":
        with open(output, "w", newline="", encoding="utf-8") as fh:
            export_service.export_csv(fh, items)
    elif extension == ".xlsx":
        export_service.export_excel(output, items)
    elif extension == ".pdf":
        export_service.export_pdf(output, title, items)
    else:
        click.echo(f"FAIL Unsupported export type '{extension or output}' (use .xlsx, .csv or .pdf)")
        return
    click.echo(f"PASS Exported {len(items)} complaints to {output}")


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create the complaints table and indexes if they do not exist."""
    db.create_all()
    click.echo(f"PASS Database ready: {db.engine.url}")


@click.group('complaints')
def complaints_group():
    """Complaint intake and maintenance commands."""


@complaints_group.command('create')
@click.option('--name', prompt=True)
@click.option('--mobile', prompt=True)
@click.option('--location', prompt=True)
@click.option('--department', prompt=True)
@click.option('--product', prompt=True)
@click.option('--serial', 'serial_number', prompt='Serial Number')
@click.option('--details', default='', help='Free-text description')
@with_appcontext
def create_complaint_cli(name, mobile, location, department, product, serial_number, details):
    """Register a complaint and print its complaint number."""
    try:
        complaint = complaint_service.create_complaint(
            name=name,
            mobile=mobile,
            location=location,
            department=department,
            product=product,
            serial_number=serial_number,
            details=details,
        )
    except (ValidationError, ConflictError) as e:
        click.echo(f"FAIL {e}")
        return

    click.echo(f"PASS Complaint saved. Complaint No: {complaint.complaint_number}")


@complaints_group.command('list')
@click.option('--status', type=STATUS_CHOICES, default=STATUS_ALL, show_default=True)
@click.option('--from', 'from_date', type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option('--to', 'to_date', type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option('--search', default='')
@with_appcontext
def list_complaints_cli(status, from_date, to_date, search):
    """List complaints, newest first."""
    complaints = complaint_service.list_complaints(
        status=status, from_date=from_date, to_date=to_date, search=search
    )
    _print_complaints(complaints)


@complaints_group.command('toggle')
@click.argument('complaint_number')
@with_appcontext
def toggle_complaint_cli(complaint_number):
    """Flip a complaint between Pending and Completed."""
    complaint = complaint_service.toggle_status(complaint_number)
    if not complaint:
        click.echo(f"FAIL Complaint '{complaint_number}' not found")
        return
    click.echo(f"PASS {complaint.complaint_number} is now {complaint.status}")


@complaints_group.command('export')
@click.option('--output', required=True, help='Target .xlsx, .csv or .pdf file')
@click.option('--status', type=STATUS_CHOICES, default=STATUS_ALL, show_default=True)
@click.option('--from', 'from_date', type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option('--to', 'to_date', type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option('--search', default='')
@with_appcontext
def export_complaints_cli(output, status, from_date, to_date, search):
    """Export the filtered complaint list."""
    complaints = complaint_service.list_complaints(
        status=status, from_date=from_date, to_date=to_date, search=search
    )
    _write_export(output, complaints, "Complaints Export")


@click.group('reports')
def reports_group():
    """Reporting commands."""


@reports_group.command('monthly')
@click.option('--year', type=int, required=True)
@click.option('--month', type=int, required=True)
@click.option('--status', type=STATUS_CHOICES, default=STATUS_ALL, show_default=True)
@click.option('--output', default=None, help='Optional .xlsx, .csv or .pdf export of the report rows')
@with_appcontext
def monthly_report_cli(year, month, status, output):
    """Summarize complaints created in one calendar month."""
    try:
        report = reporting_service.monthly_report(year=year, month=month, status=status)
    except reporting_service.ReportError as e:
        click.echo(f"FAIL {e}")
        return

    click.echo(report.summary())
    _print_complaints(report.items)
    if output:
        _write_export(output, report.items, f"Monthly Report {report.period}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(complaints_group)
    app.cli.add_command(reports_group)
