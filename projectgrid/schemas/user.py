"""User API schemas."""

from datetime import datetime

from pydantic import Field

from projectgrid.schemas.common import CamelModel


class UserSummary(CamelModel):
    """Name and email only (registration response)."""

    name: str
    email: str


class UserResponse(CamelModel):
    """User profile (no password or code hash)."""

    id: str
    name: str
    email: str
    is_email_verified: bool
    is_two_factor_enabled: bool = False
    last_login: datetime | None = None
    created_at: datetime | None = None


class UpdateProfileRequest(CamelModel):
    name: str = Field(..., min_length=3, max_length=100)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, description="New password (min 8 characters)")
    confirm_password: str = Field(..., min_length=1)


class TwoFactorPreferenceRequest(CamelModel):
    enable_2fa: bool = Field(..., alias="enable2FA")


class TwoFactorPreferenceResponse(CamelModel):
    message: str
    requires_otp: bool = False


class VerifyTwoFactorRequest(CamelModel):
    otp: str = Field(..., min_length=1, max_length=12)


class MessageWithUserResponse(CamelModel):
    message: str
    user: UserResponse
