from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..auth.context import caller_required, current_caller
from ..common.datetime_utils import parse_iso_date
from ..common.http import json_body, ok
from ..container import Container
from ..core.enums import AttendanceStatus
from ..core.exceptions import FieldError, ValidationError
from .model import AttendanceFilter


def _parse_filter() -> AttendanceFilter:
    errors: list[FieldError] = []

    def _date(name: str):
        value = (request.args.get(name) or "").strip()
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            errors.append(FieldError(name, f"{name} must be a valid YYYY-MM-DD date"))
            return None

    status: Optional[AttendanceStatus] = None
    status_s = (request.args.get("status") or "").strip()
    if status_s:
        try:
            status = AttendanceStatus(status_s)
        except ValueError:
            errors.append(FieldError("status", f"Unknown status: {status_s}"))

    criteria = AttendanceFilter(
        employee_id=(request.args.get("employeeId") or "").strip() or None,
        start_date=_date("startDate"),
        end_date=_date("endDate"),
        status=status,
    )
    if errors:
        raise ValidationError("Invalid attendance filter", errors)
    return criteria


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @caller_required
    def attendance_list():
        records = service.list_records(_parse_filter(), current_caller())
        return ok([r.to_dict() for r in records], count=len(records))

    @app.route("/api/attendance/stats/<employee_id>", methods=["GET"], endpoint="attendance_stats")
    @caller_required
    def attendance_stats(employee_id: str):
        return ok(service.stats(employee_id, current_caller()).to_dict())

    @app.route("/api/attendance/<record_id>", methods=["GET"], endpoint="attendance_get")
    @caller_required
    def attendance_get(record_id: str):
        return ok(service.get_record(record_id, current_caller()).to_dict())

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_create")
    @caller_required
    def attendance_create():
        record = service.create_record(json_body(), current_caller())
        return ok(record.to_dict(), status=201)

    @app.route("/api/attendance/<record_id>", methods=["PUT"], endpoint="attendance_update")
    @caller_required
    def attendance_update(record_id: str):
        record = service.update_record(record_id, json_body(), current_caller())
        return ok(record.to_dict())

    @app.route("/api/attendance/<record_id>", methods=["DELETE"], endpoint="attendance_delete")
    @caller_required
    def attendance_delete(record_id: str):
        service.delete_record(record_id, current_caller())
        return ok({}, message="Attendance record deleted successfully")
