"""Auth API: register, login (with optional emailed second factor), email
verification and password reset.

Uses only injected dependencies; flow rules live in AccountService and
domain exceptions are mapped to responses by the central handlers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from projectgrid.api.v1.dependencies import get_account_service
from projectgrid.application.dtos.auth import (
    SessionIssued,
    TwoFactorChallenge,
    VerificationResent,
)
from projectgrid.application.services.account_service import AccountService
from projectgrid.core.limiter import limit_auth
from projectgrid.schemas.auth import (
    ConfirmResetPasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    TwoFactorChallengeResponse,
    VerifyEmailRequest,
    VerifyLoginOtpRequest,
)
from projectgrid.schemas.common import MessageResponse
from projectgrid.schemas.user import MessageWithUserResponse, UserResponse, UserSummary

router = APIRouter()

AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]

VERIFICATION_SENT = "Verification email sent. Please check your inbox."


def _session_response(result: SessionIssued) -> LoginResponse:
    return LoginResponse(
        message="Login successful",
        token=result.token,
        user=UserResponse.model_validate(result.user),
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
@limit_auth
async def register(
    request: Request,
    body: RegisterRequest,
    accounts: AccountServiceDep,
) -> RegisterResponse:
    """Create an unverified account and email a verification link (public endpoint)."""
    user = await accounts.register(body.name, body.email, body.password)
    return RegisterResponse(
        message=VERIFICATION_SENT,
        user=UserSummary(name=user.name, email=user.email),
    )


@router.post(
    "/login",
    response_model=LoginResponse | TwoFactorChallengeResponse | MessageResponse,
)
@limit_auth
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    accounts: AccountServiceDep,
):
    """Authenticate with email and password.

    200 with a session token; 200 with requiresOtp when 2FA is enabled;
    201 when the account is unverified and a fresh verification email was sent.
    """
    result = await accounts.login(body.email, body.password)
    if isinstance(result, VerificationResent):
        response.status_code = 201
        return MessageResponse(message=VERIFICATION_SENT)
    if isinstance(result, TwoFactorChallenge):
        return TwoFactorChallengeResponse(
            message="OTP sent to your email",
            otp_token=result.otp_token,
            user_id=result.user_id,
        )
    return _session_response(result)


@router.post("/verify-otp", response_model=LoginResponse)
@limit_auth
async def verify_login_otp(
    request: Request,
    body: VerifyLoginOtpRequest,
    accounts: AccountServiceDep,
) -> LoginResponse:
    """Second login step: exchange the emailed code and otpToken for a session."""
    result = await accounts.verify_login_otp(body.otp, body.otp_token)
    return _session_response(result)


@router.post("/verify-email", response_model=MessageWithUserResponse)
@limit_auth
async def verify_email(
    request: Request,
    body: VerifyEmailRequest,
    accounts: AccountServiceDep,
) -> MessageWithUserResponse:
    user = await accounts.verify_email(body.token)
    return MessageWithUserResponse(
        message="Email verified successfully",
        user=UserResponse.model_validate(user),
    )


@router.post("/reset-password-request", response_model=MessageResponse)
@limit_auth
async def reset_password_request(
    request: Request,
    body: ResetPasswordRequest,
    accounts: AccountServiceDep,
) -> MessageResponse:
    await accounts.request_password_reset(body.email)
    return MessageResponse(message="A password reset link has been sent to your email.")


@router.post("/reset-password", response_model=MessageWithUserResponse)
@limit_auth
async def reset_password(
    request: Request,
    body: ConfirmResetPasswordRequest,
    accounts: AccountServiceDep,
) -> MessageWithUserResponse:
    user = await accounts.confirm_password_reset(
        body.token, body.new_password, body.confirm_password
    )
    return MessageWithUserResponse(
        message="Password reset successfully",
        user=UserResponse.model_validate(user),
    )
