from __future__ import annotations

import re
from enum import Enum
from typing import Any, Optional, Type

from ..core.exceptions import FieldError


def require_non_empty(data: dict, field_name: str, errors: list[FieldError], *, label: str) -> Optional[str]:
    value = data.get(field_name)
    if not isinstance(value, str) or not value.strip():
        errors.append(FieldError(field_name, f"Please add {label}"))
        return None
    return value.strip()


def optional_text(data: dict, field_name: str, errors: list[FieldError]) -> Optional[str]:
    value = data.get(field_name)
    if value is None:
        return None
    if not isinstance(value, str):
        errors.append(FieldError(field_name, f"{field_name} must be a string"))
        return None
    return value.strip()


def require_max_length(value: Optional[str], field_name: str, maximum: int, errors: list[FieldError]) -> None:
    if value is not None and len(value) > maximum:
        errors.append(FieldError(field_name, f"{field_name} must be at most {maximum} characters"))


def require_pattern(value: Optional[str], field_name: str, pattern: str, errors: list[FieldError], *, message: str) -> None:
    if value is not None and not re.match(pattern, value):
        errors.append(FieldError(field_name, message))


def require_enum(value: Any, field_name: str, enum_cls: Type[Enum], errors: list[FieldError]) -> None:
    allowed = [m.value for m in enum_cls]
    if value not in allowed:
        errors.append(FieldError(field_name, f"{field_name} must be one of: {', '.join(allowed)}"))


def require_min_number(value: Any, field_name: str, minimum: float, errors: list[FieldError]) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors.append(FieldError(field_name, f"{field_name} must be a number"))
    elif value < minimum:
        errors.append(FieldError(field_name, f"{field_name} must be at least {minimum:g}"))


def strip_strings(data: dict, fields: tuple[str, ...]) -> dict:
    """Trim the listed string fields in place, mirroring a `trim` column option."""
    for name in fields:
        value = data.get(name)
        if isinstance(value, str):
            data[name] = value.strip()
    return data
