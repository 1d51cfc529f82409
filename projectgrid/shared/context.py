"""Request context management using contextvars.

Async-safe storage for request-scoped data: the request ID (set by
RequestIDMiddleware, read by the logging filter) and the authenticated
user ID (set by the bearer-token dependency).

Usage:
    set_request_id("3f2a...")
    set_current_user_id(user.id)
    get_request_context().request_id
"""

from contextvars import ContextVar
from dataclasses import dataclass

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_current_user_id: ContextVar[str | None] = ContextVar("current_user_id", default=None)


@dataclass(frozen=True)
class RequestContext:
    """Immutable snapshot of the current request context."""

    request_id: str | None
    user_id: str | None


def set_request_id(request_id: str | None) -> None:
    """Set the request ID for the current task."""
    _request_id.set(request_id)


def get_request_id() -> str | None:
    """Return the current request ID, or None outside a request."""
    return _request_id.get()


def set_current_user_id(user_id: str | None) -> None:
    """Set the authenticated user for the current task.

    Raises:
        ValueError: If user_id is an empty string.
    """
    if user_id is not None and not user_id:
        raise ValueError("user_id must be a non-empty string or None")
    _current_user_id.set(user_id)


def get_current_user_id() -> str | None:
    """Return the authenticated user ID, or None if not authenticated."""
    return _current_user_id.get()


def clear_request_context() -> None:
    """Reset request ID and user."""
    _request_id.set(None)
    _current_user_id.set(None)


def get_request_context() -> RequestContext:
    """Return a snapshot of the current request context."""
    return RequestContext(
        request_id=_request_id.get(),
        user_id=_current_user_id.get(),
    )
