"""Service interfaces (ports) for the application layer.

Protocols define contracts for application collaborators (DIP).
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from projectgrid.domain.enums import TokenPurpose
    from projectgrid.domain.value_objects.token import TokenClaims, TokenFailure


class ITokenIssuer(Protocol):
    """Protocol for signed, time-limited tokens carrying subject and purpose."""

    def issue(self, subject_user_id: str, purpose: TokenPurpose, ttl: timedelta) -> str:
        """Mint a token valid for ttl."""

    def verify(
        self, token: str, purpose: TokenPurpose | None = None
    ) -> TokenClaims | TokenFailure:
        """Return claims, or a failure (invalid, expired, wrong purpose). Never raises."""


class IPasswordHasher(Protocol):
    """Protocol for password hashing (blocking; call via asyncio.to_thread)."""

    dummy_hash: str

    def hash(self, password: str) -> str:
        """Return a salted hash of password."""

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Return True if the password matches the hash."""

    def hash_code(self, code: str) -> str:
        """Return a digest of a short-lived one-time code."""

    def verify_code(self, code: str, code_hash: str) -> bool:
        """Constant-time comparison of a code against its digest."""


class INotificationService(Protocol):
    """Protocol for outbound email delivery."""

    async def send(self, to_address: str, subject: str, html_body: str) -> bool:
        """Deliver an HTML email. Returns False on failure; does not raise."""
