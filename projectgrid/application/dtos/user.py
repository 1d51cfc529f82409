"""DTOs for user use cases (no dependency on persistence)."""

from dataclasses import dataclass
from datetime import datetime

from projectgrid.domain.entities.user import UserEntity


@dataclass(frozen=True)
class UserProfile:
    """User read-model returned by the account flows. No password or code hash."""

    id: str
    name: str
    email: str
    is_email_verified: bool
    is_two_factor_enabled: bool
    last_login: datetime | None
    created_at: datetime | None

    @classmethod
    def from_entity(cls, user: UserEntity) -> "UserProfile":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            is_email_verified=user.is_email_verified,
            is_two_factor_enabled=user.is_two_factor_enabled,
            last_login=user.last_login,
            created_at=user.created_at,
        )
