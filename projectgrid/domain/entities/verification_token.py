"""Verification token domain entity.

A stored, short-lived token tied to one user and one purpose. At most one
unexpired record exists per (user_id, purpose); expired records are
deleted before a replacement is issued, and records are deleted once
consumed.
"""

from dataclasses import dataclass
from datetime import datetime

from projectgrid.domain.enums import TokenPurpose
from projectgrid.domain.exceptions import ValidationException


@dataclass
class VerificationTokenEntity:
    id: str
    user_id: str
    token: str
    purpose: TokenPurpose
    expires_at: datetime
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValidationException("User ID is required", field="user_id")
        if not self.token:
            raise ValidationException("Token is required", field="token")
        if self.purpose not in (TokenPurpose.EMAIL_VERIFICATION, TokenPurpose.PASSWORD_RESET):
            raise ValidationException(
                f"Purpose {self.purpose.value!r} is not stored", field="purpose"
            )

    def is_expired(self, now: datetime) -> bool:
        """True once the wall clock reaches expires_at."""
        return self.expires_at <= now

    def is_active(self, now: datetime) -> bool:
        return not self.is_expired(now)
