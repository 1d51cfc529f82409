"""Shared utilities: request context, telemetry, and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from projectgrid.shared.context import (
    RequestContext,
    clear_request_context,
    get_current_user_id,
    get_request_context,
    get_request_id,
    set_current_user_id,
    set_request_id,
)
from projectgrid.shared.utils import (
    ensure_utc,
    from_timestamp_utc,
    generate_cuid,
    utc_now,
)

__all__ = [
    "RequestContext",
    "clear_request_context",
    "get_current_user_id",
    "get_request_context",
    "get_request_id",
    "set_current_user_id",
    "set_request_id",
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "from_timestamp_utc",
]
