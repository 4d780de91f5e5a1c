from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from ..auth.policy import CallerContext, can_manage_records, can_view_employee_data, require, scope_employee_filter
from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.store import DuplicateKeyError
from .model import AttendanceFilter, AttendanceRecord, AttendanceStats
from .repository import AttendanceRepository
from .validation import FIELDS, normalize_attendance, validate_attendance
from .work_hours import derive_work_hours

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Attendance already marked for this date"
NOT_FOUND_MESSAGE = "Attendance record not found"
FORBIDDEN_MESSAGE = "Not authorized to view this data"
ADMIN_ONLY_MESSAGE = "Only admins can change attendance records"


class AttendanceService:
    """Use cases for attendance records: queries, admin writes and per-employee stats."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def list_records(self, criteria: AttendanceFilter, caller: CallerContext) -> Sequence[AttendanceRecord]:
        scoped = replace(criteria, employee_id=scope_employee_filter(caller, criteria.employee_id))
        return self._attendance.list(scoped)

    def get_record(self, record_id: str, caller: Optional[CallerContext] = None) -> AttendanceRecord:
        record = self._attendance.get_by_id(record_id)
        if not record:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        if caller is not None:
            require(can_view_employee_data(caller, record.employee_id), FORBIDDEN_MESSAGE)
        return record

    def create_record(self, data: dict, caller: CallerContext) -> AttendanceRecord:
        require(can_manage_records(caller), ADMIN_ONLY_MESSAGE)

        doc = normalize_attendance(data)
        errors = validate_attendance(doc)
        if errors:
            raise ValidationError("Invalid attendance record", errors)

        existing = self._attendance.get_for_employee_and_date(doc["employeeId"], parse_iso_date(doc["date"]))
        if existing:
            logger.warning("Duplicate attendance for %s on %s", doc["employeeId"], doc["date"])
            raise ConflictError(DUPLICATE_MESSAGE)

        derive_work_hours(doc)
        try:
            record = self._attendance.create(doc)
        except DuplicateKeyError:
            # Lost a race with a concurrent create after the pre-check.
            logger.warning("Duplicate attendance rejected by store for %s on %s", doc["employeeId"], doc["date"])
            raise ConflictError(DUPLICATE_MESSAGE)

        logger.info("Created attendance %s for %s on %s", record.id, record.employee_id, doc["date"])
        return record

    def update_record(self, record_id: str, patch: dict, caller: CallerContext) -> AttendanceRecord:
        require(can_manage_records(caller), ADMIN_ONLY_MESSAGE)

        current = self._attendance.get_raw(record_id)
        if not current:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        changes = normalize_attendance(patch, partial=True)
        merged = {**current, **changes}
        errors = validate_attendance(merged)
        if errors:
            raise ValidationError("Invalid attendance record", errors)

        if "checkIn" in changes or "checkOut" in changes:
            derive_work_hours(merged)

        try:
            record = self._attendance.update(record_id, {k: merged.get(k) for k in FIELDS})
        except DuplicateKeyError:
            raise ConflictError(DUPLICATE_MESSAGE)
        if not record:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        logger.info("Updated attendance %s (%s)", record.id, ", ".join(sorted(changes)) or "no changes")
        return record

    def delete_record(self, record_id: str, caller: CallerContext) -> None:
        require(can_manage_records(caller), ADMIN_ONLY_MESSAGE)

        if not self._attendance.get_by_id(record_id):
            raise NotFoundError(NOT_FOUND_MESSAGE)
        if not self._attendance.delete(record_id):
            raise NotFoundError(NOT_FOUND_MESSAGE)
        logger.info("Deleted attendance %s", record_id)

    def stats(self, employee_id: str, caller: CallerContext) -> AttendanceStats:
        require(can_view_employee_data(caller, employee_id), FORBIDDEN_MESSAGE)

        return AttendanceStats(
            employee_id=employee_id,
            buckets=list(self._attendance.stats_by_status(employee_id)),
            total_records=self._attendance.count_for_employee(employee_id),
        )
