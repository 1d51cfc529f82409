"""Pydantic request/response schemas for the API."""

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
from projectgrid.schemas.common import ErrorResponse, MessageResponse
from projectgrid.schemas.health import HealthResponse, ReadinessResponse
from projectgrid.schemas.project import ProjectCreateRequest, ProjectResponse
from projectgrid.schemas.task import (
    CommentResponse,
    TaskCreateRequest,
    TaskResponse,
    WorkspaceStatsResponse,
)
from projectgrid.schemas.user import UserResponse
from projectgrid.schemas.workspace import WorkspaceCreateRequest, WorkspaceResponse

__all__ = [
    "CommentResponse",
    "ConfirmResetPasswordRequest",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "ProjectCreateRequest",
    "ProjectResponse",
    "ReadinessResponse",
    "RegisterRequest",
    "RegisterResponse",
    "ResetPasswordRequest",
    "TaskCreateRequest",
    "TaskResponse",
    "TwoFactorChallengeResponse",
    "UserResponse",
    "VerifyEmailRequest",
    "VerifyLoginOtpRequest",
    "WorkspaceCreateRequest",
    "WorkspaceResponse",
    "WorkspaceStatsResponse",
]
