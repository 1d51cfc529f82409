"""Timezone-aware UTC helpers.

Stored and compared timestamps (token expiry, last login, created/updated)
are always aware UTC datetimes; never call datetime.utcnow().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalise a value read from the store: naive is taken as UTC, aware is converted."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def from_timestamp_utc(seconds: float) -> datetime:
    """Epoch seconds (e.g. a JWT ``exp``) to an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=UTC)


def to_timestamp(value: datetime) -> int:
    """Whole epoch seconds, as used for JWT ``iat``/``exp``. Naive input is taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp())
