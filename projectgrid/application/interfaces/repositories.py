"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from projectgrid.domain.entities import (
        ActivityEntity,
        CommentEntity,
        ProjectEntity,
        TaskEntity,
        UserEntity,
        VerificationTokenEntity,
        WorkspaceEntity,
    )
    from projectgrid.domain.enums import TokenPurpose


class IUserRepository(Protocol):
    """Protocol for the credential store."""

    async def get_by_id(self, user_id: str) -> UserEntity | None:
        """Return user by ID."""

    async def get_by_email(self, email: str) -> UserEntity | None:
        """Return user by normalized email."""

    async def create(self, user: UserEntity) -> UserEntity:
        """Persist a new user.

        Raises DuplicateEmailException when the email is already taken,
        including when a concurrent registration wins the race.
        """

    async def save(self, user: UserEntity) -> None:
        """Overwrite an existing user record."""


class IVerificationTokenRepository(Protocol):
    """Protocol for the verification token store."""

    async def find_by_user_and_purpose(
        self, user_id: str, purpose: TokenPurpose
    ) -> VerificationTokenEntity | None:
        """Return the stored token for (user, purpose), expired or not."""

    async def find_by_user_and_token(
        self, user_id: str, token: str
    ) -> VerificationTokenEntity | None:
        """Return the record holding exactly this token string for the user."""

    async def add(self, record: VerificationTokenEntity) -> None:
        """Persist a new token record."""

    async def delete(self, record_id: str) -> None:
        """Delete a token record. Idempotent."""


class IWorkspaceRepository(Protocol):
    async def create(self, workspace: WorkspaceEntity) -> WorkspaceEntity:
        """Persist a new workspace."""

    async def get_by_id(self, workspace_id: str) -> WorkspaceEntity | None:
        """Return workspace by ID."""

    async def list_for_member(self, user_id: str) -> list[WorkspaceEntity]:
        """Return workspaces the user belongs to, newest first."""

    async def save(self, workspace: WorkspaceEntity) -> None:
        """Overwrite an existing workspace record."""


class IProjectRepository(Protocol):
    async def create(self, project: ProjectEntity) -> ProjectEntity:
        """Persist a new project."""

    async def get_by_id(self, project_id: str) -> ProjectEntity | None:
        """Return project by ID."""

    async def list_by_workspace(
        self, workspace_id: str, include_archived: bool = False
    ) -> list[ProjectEntity]:
        """Return projects in the workspace, newest first."""


class ITaskRepository(Protocol):
    async def create(self, task: TaskEntity) -> TaskEntity:
        """Persist a new task."""

    async def get_by_id(self, task_id: str) -> TaskEntity | None:
        """Return task by ID."""

    async def save(self, task: TaskEntity) -> None:
        """Overwrite an existing task record."""

    async def list_by_project(
        self, project_id: str, include_archived: bool = False
    ) -> list[TaskEntity]:
        """Return tasks in the project, newest first."""

    async def list_by_workspace(self, workspace_id: str) -> list[TaskEntity]:
        """Return every task in the workspace, archived included, newest first."""

    async def list_for_assignee(self, user_id: str) -> list[TaskEntity]:
        """Return non-archived tasks assigned to the user, newest first."""


class ICommentRepository(Protocol):
    async def create(self, comment: CommentEntity) -> CommentEntity:
        """Persist a new comment."""

    async def get_by_id(self, comment_id: str) -> CommentEntity | None:
        """Return comment by ID."""

    async def save(self, comment: CommentEntity) -> None:
        """Overwrite an existing comment."""

    async def delete(self, comment_id: str) -> None:
        """Delete a comment. Idempotent."""

    async def list_by_task(self, task_id: str) -> list[CommentEntity]:
        """Return comments on the task, newest first."""


class IActivityRepository(Protocol):
    async def add(self, activity: ActivityEntity) -> None:
        """Append an activity record."""

    async def list_by_resource(self, resource_id: str) -> list[ActivityEntity]:
        """Return activity for a resource, newest first."""
