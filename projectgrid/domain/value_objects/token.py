"""Signed-token value objects: decoded claims and verification failures."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from projectgrid.domain.enums import TokenPurpose


class TokenFailureReason(str, Enum):
    INVALID = "invalid"
    EXPIRED = "expired"
    WRONG_PURPOSE = "wrong_purpose"


@dataclass(frozen=True)
class TokenClaims:
    """Claims carried by a verified token."""

    subject: str
    purpose: TokenPurpose
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenFailure:
    """Why a token did not verify. Returned, never raised."""

    reason: TokenFailureReason

    @property
    def expired(self) -> bool:
        return self.reason is TokenFailureReason.EXPIRED
