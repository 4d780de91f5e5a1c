from __future__ import annotations

from ..common.datetime_utils import coerce_date, format_date, parse_clock_time
from ..common.validators import (
    optional_text,
    require_enum,
    require_max_length,
    require_min_number,
    require_non_empty,
    strip_strings,
)
from ..core.constants import MAX_KEY_LENGTH
from ..core.enums import AttendanceStatus
from ..core.exceptions import FieldError

FIELDS = ("employeeId", "employeeName", "date", "checkIn", "checkOut", "status", "workHours", "notes")
TRIMMED = ("employeeId", "employeeName", "checkIn", "checkOut", "notes")


def normalize_attendance(data: dict, *, partial: bool = False) -> dict:
    """Keep known fields, trim strings and store ``date`` as YYYY-MM-DD.

    With ``partial`` the result only carries the keys present in ``data``
    (update patches); otherwise defaults are filled in.
    """
    doc = {k: data[k] for k in FIELDS if k in data}
    strip_strings(doc, TRIMMED)

    for name in ("checkIn", "checkOut", "notes"):
        if doc.get(name) == "":
            doc[name] = None

    if "date" in doc:
        parsed = coerce_date(doc["date"])
        if parsed is not None:
            doc["date"] = format_date(parsed)

    if not partial:
        doc.setdefault("status", AttendanceStatus.ABSENT.value)
        doc.setdefault("workHours", 0)
    return doc


def validate_attendance(doc: dict) -> list[FieldError]:
    """Field-level problems of a complete attendance document (empty when valid)."""
    errors: list[FieldError] = []

    employee_id = require_non_empty(doc, "employeeId", errors, label="employee ID")
    require_max_length(employee_id, "employeeId", MAX_KEY_LENGTH, errors)
    require_non_empty(doc, "employeeName", errors, label="employee name")

    raw_date = doc.get("date")
    if raw_date is None or raw_date == "":
        errors.append(FieldError("date", "Please add date"))
    elif coerce_date(raw_date) is None:
        errors.append(FieldError("date", "date must be a valid YYYY-MM-DD date"))

    check_in = optional_text(doc, "checkIn", errors)
    check_out = optional_text(doc, "checkOut", errors)
    start = parse_clock_time(check_in) if check_in else None
    end = parse_clock_time(check_out) if check_out else None
    if check_in and start is None:
        errors.append(FieldError("checkIn", "checkIn must be a HH:MM time"))
    if check_out and end is None:
        errors.append(FieldError("checkOut", "checkOut must be a HH:MM time"))
    if start is not None and end is not None and end < start:
        errors.append(FieldError("checkOut", "checkOut cannot be earlier than checkIn"))

    require_enum(doc.get("status"), "status", AttendanceStatus, errors)
    require_min_number(doc.get("workHours"), "workHours", 0, errors)
    optional_text(doc, "notes", errors)
    return errors
