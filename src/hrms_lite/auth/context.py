from __future__ import annotations

from functools import wraps

from flask import g, session

from ..core.exceptions import AuthenticationError
from .policy import CallerContext


def current_caller() -> CallerContext:
    """Caller resolved by the authentication layer and stored in the session."""
    caller = g.get("caller")
    if caller is None:
        raise AuthenticationError("Not authorized, no caller in session")
    return caller


def caller_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        role = session.get("role")
        if not role:
            raise AuthenticationError("Not authorized, no caller in session")
        g.caller = CallerContext(role=str(role), employee_id=session.get("employee_id"))
        return view(*args, **kwargs)

    return wrapper
