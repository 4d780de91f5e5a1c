from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import Optional

from ..core.constants import CLOCK_FORMATS, CLOCK_PATTERN, DATE_FORMAT

_CLOCK_RE = re.compile(CLOCK_PATTERN)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    A full ISO timestamp is accepted too; only its calendar day is kept.
    """
    value = value.strip()
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def coerce_date(value) -> Optional[date]:
    """Accept date/datetime/str and return a date, or None when unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return parse_iso_date(value)
        except ValueError:
            return None
    return None


def parse_clock_time(value) -> Optional[time]:
    """Parse zero-padded HH:MM or HH:MM:SS, returning None for anything else (non-strings included)."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not _CLOCK_RE.match(value):
        return None
    for fmt in CLOCK_FORMATS:
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    return None


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch it easily.
    """
    return datetime.now(timezone.utc)


def today() -> date:
    return now_utc().date()
