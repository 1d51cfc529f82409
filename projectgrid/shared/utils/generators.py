"""Identifier and code generation for account and workspace records."""

import secrets

from cuid2 import cuid_wrapper

_next_cuid = cuid_wrapper()

ONE_TIME_CODE_DIGITS = 6


def generate_cuid() -> str:
    """Return a new CUID2, used as the Firestore document ID for users,
    verification tokens, workspaces and projects."""
    return str(_next_cuid())


def generate_one_time_code(digits: int = ONE_TIME_CODE_DIGITS) -> str:
    """Numeric code for 2FA emails; leading zeros are kept ("004271")."""
    if digits < 1:
        raise ValueError("digits must be positive")
    return "".join(secrets.choice("0123456789") for _ in range(digits))
