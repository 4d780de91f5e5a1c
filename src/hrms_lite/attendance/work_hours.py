"""Derived ``workHours`` field.

Called explicitly by the attendance service on create and on updates that
touch either clock time; nothing recomputes it behind the caller's back.
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from ..common.datetime_utils import parse_clock_time
from ..core.constants import WORK_HOURS_PRECISION


def compute_work_hours(check_in: str, check_out: str) -> float:
    """Hours between two same-day clock times, rounded half-up to 2 decimals.

    Returns a negative number when check-out is earlier than check-in;
    the validator rejects such records.
    """
    start = parse_clock_time(check_in)
    end = parse_clock_time(check_out)
    if start is None or end is None:
        raise ValueError(f"Invalid clock time: {check_in!r} / {check_out!r}")

    anchor = datetime(1970, 1, 1)
    delta = datetime.combine(anchor, end) - datetime.combine(anchor, start)
    hours = Decimal(int(delta.total_seconds())) / Decimal(3600)
    # Half-up: 7m30s is 0.13.
    return float(hours.quantize(Decimal(1).scaleb(-WORK_HOURS_PRECISION), rounding=ROUND_HALF_UP))


def derive_work_hours(doc: dict) -> dict:
    """Set ``workHours`` on a document when both clock times are present and parseable.

    Otherwise the document keeps whatever ``workHours`` it already had.
    """
    check_in = doc.get("checkIn")
    check_out = doc.get("checkOut")
    if not check_in or not check_out:
        return doc
    if parse_clock_time(check_in) is None or parse_clock_time(check_out) is None:
        return doc

    doc["workHours"] = compute_work_hours(check_in, check_out)
    return doc
