"""Firestore REST typed values <-> plain Python values.

Entities are flattened to dicts of str/int/float/bool/None, UTC datetimes,
enums (stored by value), lists and nested dicts before they reach here.
"""

import base64
import re
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Callable

# Firestore returns up to nanoseconds; datetime keeps microseconds.
_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def encode_value(value: Any) -> dict:
    """Wrap one Python value in its Firestore type tag."""
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return {"nullValue": None}
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        as_utc = value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)
        return {"timestampValue": as_utc.strftime(_TIMESTAMP_FORMAT)}
    if isinstance(value, bytes):
        return {"bytesValue": base64.b64encode(value).decode("ascii")}
    if isinstance(value, dict):
        return {"mapValue": {"fields": _encode_fields(value)}}
    if isinstance(value, list | tuple):
        return {"arrayValue": {"values": [encode_value(item) for item in value]}}
    raise TypeError(f"Cannot store {type(value).__name__} in Firestore")


def _encode_fields(data: dict[str, Any]) -> dict[str, dict]:
    return {key: encode_value(item) for key, item in data.items()}


def _parse_timestamp(raw: str) -> datetime:
    return datetime.fromisoformat(_EXTRA_FRACTION.sub(r"\1", raw.replace("Z", "+00:00")))


_DECODERS: dict[str, Callable[[Any], Any]] = {
    "nullValue": lambda _: None,
    "booleanValue": bool,
    "integerValue": int,
    "doubleValue": float,
    "stringValue": str,
    "timestampValue": _parse_timestamp,
    "bytesValue": base64.b64decode,
    "arrayValue": lambda raw: [decode_value(item) for item in raw.get("values") or []],
    "mapValue": lambda raw: _decode_fields(raw.get("fields")),
}


def decode_value(typed: dict) -> Any:
    """Unwrap one Firestore typed value; unknown types decode to None."""
    for tag, decoder in _DECODERS.items():
        if tag in typed:
            return decoder(typed[tag])
    return None


def _decode_fields(fields: dict | None) -> dict[str, Any]:
    return {key: decode_value(item) for key, item in (fields or {}).items()}


def encode_document(data: dict[str, Any]) -> dict:
    """Request body for a document write: {"fields": {...}}."""
    return {"fields": _encode_fields(data)}


def decode_document(document: dict | None) -> dict[str, Any]:
    """Field values of a REST document; {} for a missing or empty document."""
    if not document:
        return {}
    return _decode_fields(document.get("fields"))
