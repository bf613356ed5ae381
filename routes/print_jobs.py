"""
Print job routes (JSON API).

Handles:
- POST /api/v1/print-jobs               - Record a job (policies -> cost -> store)
- GET  /api/v1/print-jobs               - List jobs by department/user/printer
- GET  /api/v1/print-jobs/stats         - Overall statistics with savings
- GET  /api/v1/print-jobs/by-department - Per-department statistics
- GET  /api/v1/print-jobs/by-user       - Per-user statistics for one department
- GET  /api/v1/print-jobs/by-printer    - Per-printer statistics
- GET  /api/v1/print-jobs/cost-analysis - Savings by category

Window parameters startDate/endDate are ISO-8601. Statistics default to
the current month so far, ending at the next whole minute; the job list
defaults to the last 7 days.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Tuple

from flask import Blueprint, current_app, request
from werkzeug.exceptions import BadRequest

from models.print_job import PrintJobRecord, parse_timestamp
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

print_jobs_bp = Blueprint("print_jobs", __name__, url_prefix="/api/v1/print-jobs")


@print_jobs_bp.route("", methods=["POST"])
def create_print_job():
    """
    Record a print job.

    Body: raw job record (camelCase keys). Responds with the stored record
    and the savings attributable to the policies that fired.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise BadRequest("Request body must be a JSON object")

    try:
        raw_record = PrintJobRecord.from_dict(payload)
    except (TypeError, ValueError) as e:
        raise BadRequest(f"Malformed print job: {e}")

    logger.info(f"Print job submitted: {raw_record.document_name or raw_record.job_id}")

    job_service = current_app.config["JOB_SERVICE"]
    policy = current_app.config["POLICY_CONFIGURATION"]
    stored, savings = job_service.submit_job(raw_record, policy)

    return {"job": stored.to_dict(), "savings": savings.to_dict()}, 201


@print_jobs_bp.route("", methods=["GET"])
def list_print_jobs():
    """List jobs for one department, user or printer (no paging)."""
    now = datetime.now()
    start, end = _window(default_start=now - timedelta(days=7), default_end=now)

    job_service = current_app.config["JOB_SERVICE"]
    jobs = job_service.list_jobs(
        start,
        end,
        department_id=_int_arg("departmentId"),
        user_id=_int_arg("userId"),
        printer_id=_int_arg("printerId"),
    )
    return {"jobs": [job.to_dict() for job in jobs], "count": len(jobs)}


@print_jobs_bp.route("/stats", methods=["GET"])
def overall_statistics():
    """Overall totals, costs and savings for the window."""
    start, end = _statistics_window()
    logger.info(f"Overall statistics requested: {start} ~ {end}")

    snapshot = _statistics_service().overall(start, end)
    return snapshot.to_dict()


@print_jobs_bp.route("/by-department", methods=["GET"])
def department_statistics():
    """Per-department totals for the window."""
    start, end = _statistics_window()
    logger.info(f"Department statistics requested: {start} ~ {end}")

    rows = _statistics_service().by_department(start, end)
    return {"departments": [row.to_dict() for row in rows]}


@print_jobs_bp.route("/by-user", methods=["GET"])
def user_statistics():
    """Per-user totals for one department, highest cost first."""
    department_id = _int_arg("departmentId")
    if department_id is None:
        raise BadRequest("departmentId is required")

    start, end = _statistics_window()
    logger.info(f"User statistics requested: department {department_id}, {start} ~ {end}")

    rows = _statistics_service().by_user(department_id, start, end)
    return {"departmentId": department_id, "users": [row.to_dict() for row in rows]}


@print_jobs_bp.route("/by-printer", methods=["GET"])
def printer_statistics():
    """Per-printer totals for the window, busiest first."""
    start, end = _statistics_window()
    logger.info(f"Printer statistics requested: {start} ~ {end}")

    rows = _statistics_service().by_printer(start, end)
    return {"printers": [row.to_dict() for row in rows]}


@print_jobs_bp.route("/cost-analysis", methods=["GET"])
def cost_analysis():
    """Savings by category, for all departments or one."""
    department_id = _int_arg("departmentId")
    start, end = _statistics_window()
    logger.info(
        f"Cost analysis requested: department {department_id or 'all'}, {start} ~ {end}"
    )

    summary = _statistics_service().cost_analysis(start, end, department_id)
    return summary.to_dict()


# =============================================================================
# HELPERS
# =============================================================================

def _statistics_service():
    return current_app.config["STATISTICS_SERVICE"]


def _statistics_window() -> Tuple[datetime, datetime]:
    now = datetime.now()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    # End on the next minute boundary so repeated default queries share a cache key
    window_end = now.replace(second=0, microsecond=0) + timedelta(minutes=1)
    return _window(default_start=month_start, default_end=window_end)


def _window(default_start: datetime, default_end: datetime) -> Tuple[datetime, datetime]:
    return (
        _datetime_arg("startDate") or default_start,
        _datetime_arg("endDate") or default_end,
    )


def _datetime_arg(name: str) -> Optional[datetime]:
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_timestamp(value)
    except ValueError:
        raise BadRequest(f"{name} must be an ISO-8601 date-time, got {value!r}")


def _int_arg(name: str) -> Optional[int]:
    value = request.args.get(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise BadRequest(f"{name} must be an integer, got {value!r}")
