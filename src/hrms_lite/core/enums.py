from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half-day"
    ON_LEAVE = "on-leave"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on-leave"


class EntityKind(str, Enum):
    """Named collections in the document store."""

    ATTENDANCE = "attendance"
    EMPLOYEE = "employees"
