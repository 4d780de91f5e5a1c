from __future__ import annotations

from ..common.datetime_utils import coerce_date, format_date, today
from ..common.validators import (
    optional_text,
    require_enum,
    require_max_length,
    require_min_number,
    require_non_empty,
    require_pattern,
    strip_strings,
)
from ..core.constants import EMAIL_PATTERN, MAX_KEY_LENGTH
from ..core.enums import EmployeeStatus
from ..core.exceptions import FieldError

FIELDS = (
    "employeeId",
    "name",
    "email",
    "department",
    "position",
    "joinDate",
    "phone",
    "address",
    "salary",
    "status",
    "linkedUserId",
)
TRIMMED = ("employeeId", "name", "email", "department", "position", "phone", "address")
REQUIRED = (
    ("employeeId", "employee ID"),
    ("name", "employee name"),
    ("email", "email"),
    ("department", "department"),
    ("position", "position"),
)


def normalize_employee(data: dict, *, partial: bool = False) -> dict:
    """Keep known fields, trim strings, lowercase the email.

    Without ``partial`` the creation defaults are applied too
    (``status=active``, ``joinDate`` = today).
    """
    doc = {k: data[k] for k in FIELDS if k in data}
    strip_strings(doc, TRIMMED)

    if isinstance(doc.get("email"), str):
        doc["email"] = doc["email"].lower()

    if "joinDate" in doc and doc["joinDate"] is not None:
        parsed = coerce_date(doc["joinDate"])
        if parsed is not None:
            doc["joinDate"] = format_date(parsed)

    if not partial:
        doc.setdefault("status", EmployeeStatus.ACTIVE.value)
        if not doc.get("joinDate"):
            doc["joinDate"] = format_date(today())
    return doc


def validate_employee(doc: dict) -> list[FieldError]:
    """Field-level problems of a complete profile document (empty when valid)."""
    errors: list[FieldError] = []

    values = {name: require_non_empty(doc, name, errors, label=label) for name, label in REQUIRED}
    require_pattern(values["email"], "email", EMAIL_PATTERN, errors, message="Please add a valid email")
    require_max_length(values["employeeId"], "employeeId", MAX_KEY_LENGTH, errors)
    require_max_length(values["email"], "email", MAX_KEY_LENGTH, errors)

    if doc.get("joinDate") is not None and coerce_date(doc["joinDate"]) is None:
        errors.append(FieldError("joinDate", "joinDate must be a valid YYYY-MM-DD date"))

    optional_text(doc, "phone", errors)
    optional_text(doc, "address", errors)
    optional_text(doc, "linkedUserId", errors)
    require_min_number(doc.get("salary"), "salary", 0, errors)
    require_enum(doc.get("status"), "status", EmployeeStatus, errors)
    return errors
