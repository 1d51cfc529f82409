"""Shared utilities: datetime and generators."""

from projectgrid.shared.utils.datetime import (
    ensure_utc,
    from_timestamp_utc,
    to_timestamp,
    utc_now,
)
from projectgrid.shared.utils.generators import (
    generate_cuid,
    generate_one_time_code,
)

__all__ = [
    "generate_cuid",
    "generate_one_time_code",
    "utc_now",
    "ensure_utc",
    "from_timestamp_utc",
    "to_timestamp",
]
