"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for repositories and application services.
Settings are read here and handed to the token issuer, password hasher,
mail sender and account policy at construction; routes depend only on
these dependencies, not on infrastructure directly.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from projectgrid.application.dtos.auth import AccountPolicy
from projectgrid.application.interfaces.services import INotificationService
from projectgrid.application.services.account_emails import AccountEmailRenderer
from projectgrid.application.services.account_service import AccountService
from projectgrid.application.services.activity_service import ActivityLogService
from projectgrid.application.services.one_time_code import OneTimeCodeService
from projectgrid.application.services.task_service import TaskService
from projectgrid.application.services.user_service import UserService
from projectgrid.application.services.workspace_service import WorkspaceService
from projectgrid.application.services.workspace_stats_service import WorkspaceStatsService
from projectgrid.core.config import get_settings
from projectgrid.domain.entities.user import UserEntity
from projectgrid.domain.enums import TokenPurpose
from projectgrid.domain.value_objects.token import TokenFailure
from projectgrid.infrastructure.firebase._rest_client import FirestoreRESTClient
from projectgrid.infrastructure.firebase.client import get_firestore_client
from projectgrid.infrastructure.firebase.repositories import (
    FirestoreActivityRepository,
    FirestoreCommentRepository,
    FirestoreProjectRepository,
    FirestoreTaskRepository,
    FirestoreUserRepository,
    FirestoreVerificationTokenRepository,
    FirestoreWorkspaceRepository,
)
from projectgrid.infrastructure.security.jwt import JWTTokenIssuer
from projectgrid.infrastructure.security.password import BcryptPasswordHasher
from projectgrid.infrastructure.services.notification_service import (
    build_notification_service,
)
from projectgrid.shared.context import set_current_user_id

# --- stateless collaborators (built once per process from settings) ---


@lru_cache
def get_token_issuer() -> JWTTokenIssuer:
    """Token issuer bound to SECRET_KEY and ALGORITHM (composition root)."""
    settings = get_settings()
    return JWTTokenIssuer(settings.secret_key.get_secret_value(), settings.algorithm)


@lru_cache
def get_password_hasher() -> BcryptPasswordHasher:
    settings = get_settings()
    return BcryptPasswordHasher(
        rounds=settings.bcrypt_rounds,
        code_key=settings.secret_key.get_secret_value(),
    )


@lru_cache
def get_notification_service() -> INotificationService:
    """Mail sender selected by MAIL_BACKEND."""
    return build_notification_service(get_settings())


@lru_cache
def get_email_renderer() -> AccountEmailRenderer:
    return AccountEmailRenderer(get_settings().frontend_url)


def get_account_policy() -> AccountPolicy:
    settings = get_settings()
    return AccountPolicy(
        email_verification_ttl=timedelta(minutes=settings.email_verification_ttl_minutes),
        password_reset_ttl=timedelta(minutes=settings.password_reset_ttl_minutes),
        login_ttl=timedelta(days=settings.login_token_ttl_days),
        two_factor_ttl=timedelta(minutes=settings.two_factor_ttl_minutes),
        blocked_email_domains=settings.blocked_domains,
    )


# --- Firestore-backed repositories ---


def _get_firestore_client_or_raise() -> FirestoreRESTClient:
    """Return Firestore client or raise HTTPException 503 with standard message."""
    client = get_firestore_client()
    if not client:
        raise HTTPException(
            status_code=503,
            detail="Firestore not configured (set FIREBASE_SERVICE_ACCOUNT_KEY or PATH)",
        )
    return client


FirestoreDep = Annotated[FirestoreRESTClient, Depends(_get_firestore_client_or_raise)]


async def get_user_repo(client: FirestoreDep) -> FirestoreUserRepository:
    return FirestoreUserRepository(client)


async def get_token_repo(client: FirestoreDep) -> FirestoreVerificationTokenRepository:
    return FirestoreVerificationTokenRepository(client)


async def get_workspace_repo(client: FirestoreDep) -> FirestoreWorkspaceRepository:
    return FirestoreWorkspaceRepository(client)


async def get_project_repo(client: FirestoreDep) -> FirestoreProjectRepository:
    return FirestoreProjectRepository(client)


async def get_task_repo(client: FirestoreDep) -> FirestoreTaskRepository:
    return FirestoreTaskRepository(client)


async def get_comment_repo(client: FirestoreDep) -> FirestoreCommentRepository:
    return FirestoreCommentRepository(client)


async def get_activity_repo(client: FirestoreDep) -> FirestoreActivityRepository:
    return FirestoreActivityRepository(client)


# --- application services ---


async def get_account_service(
    user_repo: Annotated[FirestoreUserRepository, Depends(get_user_repo)],
    token_repo: Annotated[FirestoreVerificationTokenRepository, Depends(get_token_repo)],
    issuer: Annotated[JWTTokenIssuer, Depends(get_token_issuer)],
    hasher: Annotated[BcryptPasswordHasher, Depends(get_password_hasher)],
    notifier: Annotated[INotificationService, Depends(get_notification_service)],
    renderer: Annotated[AccountEmailRenderer, Depends(get_email_renderer)],
    policy: Annotated[AccountPolicy, Depends(get_account_policy)],
) -> AccountService:
    """Account lifecycle orchestrator (composition root)."""
    return AccountService(
        user_repo=user_repo,
        token_repo=token_repo,
        token_issuer=issuer,
        hasher=hasher,
        notifier=notifier,
        renderer=renderer,
        policy=policy,
    )


async def get_user_service(
    user_repo: Annotated[FirestoreUserRepository, Depends(get_user_repo)],
    hasher: Annotated[BcryptPasswordHasher, Depends(get_password_hasher)],
    notifier: Annotated[INotificationService, Depends(get_notification_service)],
    renderer: Annotated[AccountEmailRenderer, Depends(get_email_renderer)],
    policy: Annotated[AccountPolicy, Depends(get_account_policy)],
) -> UserService:
    codes = OneTimeCodeService(user_repo, hasher, notifier, renderer, policy.two_factor_ttl)
    return UserService(user_repo=user_repo, hasher=hasher, codes=codes)


async def get_activity_service(
    activity_repo: Annotated[FirestoreActivityRepository, Depends(get_activity_repo)],
) -> ActivityLogService:
    return ActivityLogService(activity_repo)


async def get_workspace_service(
    workspace_repo: Annotated[FirestoreWorkspaceRepository, Depends(get_workspace_repo)],
    project_repo: Annotated[FirestoreProjectRepository, Depends(get_project_repo)],
    activity: Annotated[ActivityLogService, Depends(get_activity_service)],
) -> WorkspaceService:
    return WorkspaceService(
        workspace_repo=workspace_repo, project_repo=project_repo, activity=activity
    )


async def get_task_service(
    task_repo: Annotated[FirestoreTaskRepository, Depends(get_task_repo)],
    project_repo: Annotated[FirestoreProjectRepository, Depends(get_project_repo)],
    workspace_repo: Annotated[FirestoreWorkspaceRepository, Depends(get_workspace_repo)],
    comment_repo: Annotated[FirestoreCommentRepository, Depends(get_comment_repo)],
    activity: Annotated[ActivityLogService, Depends(get_activity_service)],
) -> TaskService:
    return TaskService(
        task_repo=task_repo,
        project_repo=project_repo,
        workspace_repo=workspace_repo,
        comment_repo=comment_repo,
        activity=activity,
    )


async def get_workspace_stats_service(
    workspace_repo: Annotated[FirestoreWorkspaceRepository, Depends(get_workspace_repo)],
    project_repo: Annotated[FirestoreProjectRepository, Depends(get_project_repo)],
    task_repo: Annotated[FirestoreTaskRepository, Depends(get_task_repo)],
) -> WorkspaceStatsService:
    return WorkspaceStatsService(workspace_repo, project_repo, task_repo)


# --- bearer authentication ---

_http_bearer = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"}
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    issuer: Annotated[JWTTokenIssuer, Depends(get_token_issuer)],
    user_repo: Annotated[FirestoreUserRepository, Depends(get_user_repo)],
) -> UserEntity:
    """Return the user named by a login token; raise 401 if missing or invalid.

    Requires Authorization: Bearer <token>. Tokens minted for any other
    purpose (verification, reset, 2FA) are rejected.
    """
    if not credentials:
        raise _unauthorized("Not authenticated")
    result = issuer.verify(credentials.credentials, TokenPurpose.LOGIN)
    if isinstance(result, TokenFailure):
        raise _unauthorized("Token expired" if result.expired else "Invalid token")
    user = await user_repo.get_by_id(result.subject)
    if user is None:
        raise _unauthorized("Invalid token")
    set_current_user_id(user.id)
    return user


CurrentUser = Annotated[UserEntity, Depends(get_current_user)]
