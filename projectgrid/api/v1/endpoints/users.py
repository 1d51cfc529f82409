"""Users API: the authenticated user's profile, password and 2FA preference."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from projectgrid.api.v1.dependencies import CurrentUser, get_user_service
from projectgrid.application.dtos.user import UserProfile
from projectgrid.application.services.user_service import UserService
from projectgrid.core.limiter import limit_auth, limit_writes
from projectgrid.schemas.common import MessageResponse
from projectgrid.schemas.user import (
    ChangePasswordRequest,
    MessageWithUserResponse,
    TwoFactorPreferenceRequest,
    TwoFactorPreferenceResponse,
    UpdateProfileRequest,
    UserResponse,
    VerifyTwoFactorRequest,
)

router = APIRouter()

UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: CurrentUser) -> UserResponse:
    """Return the currently authenticated user. Requires Authorization: Bearer <token>."""
    return UserResponse.model_validate(UserProfile.from_entity(current_user))


@router.put("/profile", response_model=UserResponse)
@limit_writes
async def update_profile(
    request: Request,
    body: UpdateProfileRequest,
    current_user: CurrentUser,
    users: UserServiceDep,
) -> UserResponse:
    profile = await users.update_profile(current_user.id, body.name)
    return UserResponse.model_validate(profile)


@router.put("/change-password", response_model=MessageResponse)
@limit_auth
async def change_password(
    request: Request,
    body: ChangePasswordRequest,
    current_user: CurrentUser,
    users: UserServiceDep,
) -> MessageResponse:
    """Change password; 403 when the current password is wrong."""
    await users.change_password(
        current_user.id,
        body.current_password,
        body.new_password,
        body.confirm_password,
    )
    return MessageResponse(message="Password updated successfully")


@router.post("/2fa-preference", response_model=TwoFactorPreferenceResponse)
@limit_auth
async def set_two_factor_preference(
    request: Request,
    body: TwoFactorPreferenceRequest,
    current_user: CurrentUser,
    users: UserServiceDep,
) -> TwoFactorPreferenceResponse:
    """Enabling emails a code to confirm at /verify-otp-2fa; disabling is immediate."""
    code_sent = await users.set_two_factor_preference(current_user.id, body.enable_2fa)
    if code_sent:
        return TwoFactorPreferenceResponse(
            message="OTP sent to your email", requires_otp=True
        )
    return TwoFactorPreferenceResponse(message="2FA disabled successfully")


@router.post("/verify-otp-2fa", response_model=MessageWithUserResponse)
@limit_auth
async def verify_two_factor(
    request: Request,
    body: VerifyTwoFactorRequest,
    current_user: CurrentUser,
    users: UserServiceDep,
) -> MessageWithUserResponse:
    profile = await users.confirm_two_factor(current_user.id, body.otp)
    return MessageWithUserResponse(
        message="2FA enabled successfully",
        user=UserResponse.model_validate(profile),
    )
