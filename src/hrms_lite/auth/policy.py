"""Authorization policy.

Every rule takes the caller context (and, where relevant, the target
employee id) and answers allow/deny. Services call these and decide what
to raise, so the narrowing and Forbidden rules live in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


@dataclass(frozen=True)
class CallerContext:
    """Resolved identity of the requester, supplied by the auth layer."""

    role: str
    employee_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


def can_manage_records(caller: CallerContext) -> bool:
    """Create/update/delete of attendance and profiles, and the full directory listing."""
    return caller.is_admin


def can_view_employee_data(caller: CallerContext, employee_id: Optional[str]) -> bool:
    # Any non-admin role is limited to its own employee id, not only "employee".
    if caller.is_admin:
        return True
    return caller.employee_id is not None and caller.employee_id == employee_id


def scope_employee_filter(caller: CallerContext, requested: Optional[str]) -> Optional[str]:
    """Employee filter to apply for a listing.

    Admins get what they asked for; everybody else is narrowed to their own
    id whatever they supplied.
    """
    if caller.is_admin:
        return requested
    return caller.employee_id or ""


def require(allowed: bool, message: str = "Not authorized to access this resource") -> None:
    if not allowed:
        raise AuthorizationError(message)
