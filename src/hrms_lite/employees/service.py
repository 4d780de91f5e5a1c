from __future__ import annotations

import logging
from typing import Sequence

from ..auth.policy import CallerContext, can_manage_records, can_view_employee_data, require
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.store import DuplicateKeyError
from .model import EmployeeProfile
from .repository import EmployeeRepository
from .validation import FIELDS, normalize_employee, validate_employee

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Employee with this ID or email already exists"
NOT_FOUND_MESSAGE = "Employee not found"
FORBIDDEN_MESSAGE = "Not authorized to view this employee"
ADMIN_ONLY_MESSAGE = "Only admins can manage employees"


class EmployeeService:
    """Use case: manage the employee directory (admin) and self-service profile reads."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list_employees(self, caller: CallerContext) -> Sequence[EmployeeProfile]:
        require(can_manage_records(caller), ADMIN_ONLY_MESSAGE)
        return self._employees.list_newest_first()

    def get_employee(self, employee_pk: str, caller: CallerContext) -> EmployeeProfile:
        # Existence is checked first, so a Forbidden answer confirms the profile exists.
        profile = self._employees.get_by_id(employee_pk)
        if not profile:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        require(can_view_employee_data(caller, profile.employee_id), FORBIDDEN_MESSAGE)
        return profile

    def create_employee(self, data: dict, caller: CallerContext) -> EmployeeProfile:
        require(can_manage_records(caller), ADMIN_ONLY_MESSAGE)

        doc = normalize_employee(data)
        existing = self._employees.find_by_employee_id_or_email(
            employee_id=doc.get("employeeId"),
            email=doc.get("email"),
        )
        if existing:
            logger.warning("Rejected duplicate employee %s / %s", doc.get("employeeId"), doc.get("email"))
            raise ConflictError(DUPLICATE_MESSAGE)

        errors = validate_employee(doc)
        if errors:
            raise ValidationError("Invalid employee profile", errors)

        try:
            profile = self._employees.create(doc)
        except DuplicateKeyError:
            raise ConflictError(DUPLICATE_MESSAGE)

        logger.info("Created employee %s (%s)", profile.employee_id, profile.id)
        return profile

    def update_employee(self, employee_pk: str, patch: dict, caller: CallerContext) -> EmployeeProfile:
        require(can_manage_records(caller), ADMIN_ONLY_MESSAGE)

        current = self._employees.get_raw(employee_pk)
        if not current:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        changes = normalize_employee(patch, partial=True)
        merged = {**current, **changes}
        errors = validate_employee(merged)
        if errors:
            raise ValidationError("Invalid employee profile", errors)

        try:
            profile = self._employees.update(employee_pk, {k: merged.get(k) for k in FIELDS})
        except DuplicateKeyError:
            raise ConflictError(DUPLICATE_MESSAGE)
        if not profile:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        logger.info("Updated employee %s (%s)", profile.employee_id, ", ".join(sorted(changes)) or "no changes")
        return profile

    def delete_employee(self, employee_pk: str, caller: CallerContext) -> None:
        """Remove a profile. Attendance rows that reference it are left alone."""
        require(can_manage_records(caller), ADMIN_ONLY_MESSAGE)

        profile = self._employees.get_by_id(employee_pk)
        if not profile:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        if not self._employees.delete(employee_pk):
            raise NotFoundError(NOT_FOUND_MESSAGE)
        logger.info("Deleted employee %s (%s)", profile.employee_id, profile.id)
