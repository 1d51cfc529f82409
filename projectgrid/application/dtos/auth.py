"""DTOs for account lifecycle results.

Login has three successful outcomes; callers branch on the type.
"""

from dataclasses import dataclass, field
from datetime import timedelta

from projectgrid.application.dtos.user import UserProfile


@dataclass(frozen=True)
class AccountPolicy:
    """Token lifetimes and the registration block list, fixed at construction."""

    email_verification_ttl: timedelta = timedelta(hours=1)
    password_reset_ttl: timedelta = timedelta(minutes=10)
    login_ttl: timedelta = timedelta(days=7)
    two_factor_ttl: timedelta = timedelta(minutes=5)
    blocked_email_domains: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class SessionIssued:
    """Credentials accepted; a login token was minted."""

    token: str
    user: UserProfile


@dataclass(frozen=True)
class VerificationResent:
    """User is unverified; a fresh verification email went out instead of a session."""

    user_id: str


@dataclass(frozen=True)
class TwoFactorChallenge:
    """Credentials accepted; an emailed code must be confirmed with otp_token."""

    user_id: str
    otp_token: str


LoginResult = SessionIssued | VerificationResent | TwoFactorChallenge
