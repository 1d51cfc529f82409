"""User domain entity.

Represents a registered account, independent of persistence. The
password is only ever held as a bcrypt hash; a pending email one-time
code is only ever held as a SHA-256 hash.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from projectgrid.domain.exceptions import (
    AlreadyVerifiedException,
    ValidationException,
)


class PendingCodeState(str, Enum):
    """State of the pending email one-time code at a given instant."""

    NONE = "none"
    EXPIRED = "expired"
    ACTIVE = "active"


@dataclass
class UserEntity:
    """Domain entity for a user account.

    Lifecycle: created unverified; is_email_verified flips to True exactly
    once via mark_email_verified(). Validation runs on construction.
    """

    id: str
    email: str
    name: str
    password_hash: str
    is_email_verified: bool = False
    last_login: datetime | None = None
    is_two_factor_enabled: bool = False
    two_factor_code_hash: str | None = None
    two_factor_code_expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate user business rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("User ID is required", field="id")
        if not self.email or self.email != self.email.strip().lower():
            raise ValidationException("Email must be normalized", field="email")
        if not self.name or not self.name.strip():
            raise ValidationException("Name is required", field="name")
        if not self.password_hash:
            raise ValidationException("Password hash is required", field="password_hash")

    def mark_email_verified(self, now: datetime) -> None:
        """Flip the verified flag.

        Raises:
            AlreadyVerifiedException: If the email is already verified.
        """
        if self.is_email_verified:
            raise AlreadyVerifiedException()
        self.is_email_verified = True
        self.updated_at = now

    def record_login(self, now: datetime) -> None:
        self.last_login = now
        self.updated_at = now

    def change_password_hash(self, password_hash: str, now: datetime) -> None:
        if not password_hash:
            raise ValidationException("Password hash is required", field="password_hash")
        self.password_hash = password_hash
        self.updated_at = now

    def rename(self, name: str, now: datetime) -> None:
        name = (name or "").strip()
        if not name:
            raise ValidationException("Name is required", field="name")
        self.name = name
        self.updated_at = now

    def set_pending_code(self, code_hash: str, expires_at: datetime) -> None:
        """Store the hash of a freshly issued one-time code."""
        self.two_factor_code_hash = code_hash
        self.two_factor_code_expires_at = expires_at

    def clear_pending_code(self) -> None:
        self.two_factor_code_hash = None
        self.two_factor_code_expires_at = None

    def pending_code_state(self, now: datetime) -> PendingCodeState:
        if not self.two_factor_code_hash or self.two_factor_code_expires_at is None:
            return PendingCodeState.NONE
        if self.two_factor_code_expires_at <= now:
            return PendingCodeState.EXPIRED
        return PendingCodeState.ACTIVE

    def set_two_factor(self, enabled: bool, now: datetime) -> None:
        self.is_two_factor_enabled = enabled
        if not enabled:
            self.clear_pending_code()
        self.updated_at = now
