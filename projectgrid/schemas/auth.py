"""Auth API schemas."""

from pydantic import EmailStr, Field, field_validator

from projectgrid.schemas.common import CamelModel
from projectgrid.schemas.user import UserResponse, UserSummary


class RegisterRequest(CamelModel):
    """Request body for public registration."""

    name: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Name must be at least 3 characters")
        return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class VerifyEmailRequest(CamelModel):
    token: str = Field(..., min_length=1, description="Token from the verification link")


class ResetPasswordRequest(CamelModel):
    """Request body for POST /auth/reset-password-request."""

    email: EmailStr


class ConfirmResetPasswordRequest(CamelModel):
    """Request body for POST /auth/reset-password."""

    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, description="New password (min 8 characters)")
    confirm_password: str = Field(..., min_length=1)


class VerifyLoginOtpRequest(CamelModel):
    otp: str = Field(..., min_length=1, max_length=12)
    otp_token: str = Field(..., min_length=1)


class RegisterResponse(CamelModel):
    message: str
    user: UserSummary


class LoginResponse(CamelModel):
    """Session token response."""

    message: str
    token: str
    user: UserResponse


class TwoFactorChallengeResponse(CamelModel):
    message: str
    requires_otp: bool = True
    otp_token: str
    user_id: str
