"""Workspace and project use cases with role-based membership checks."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from projectgrid.application.dtos.workspace import WorkspaceProjects
from projectgrid.application.interfaces.repositories import (
    IProjectRepository,
    IWorkspaceRepository,
)
from projectgrid.application.services.activity_service import ActivityLogService
from projectgrid.domain.entities.project import ProjectEntity, ProjectMember
from projectgrid.domain.entities.workspace import WorkspaceEntity
from projectgrid.domain.enums import (
    ActivityAction,
    ActivityResourceType,
    ProjectMemberRole,
    ProjectPriority,
    ProjectStatus,
)
from projectgrid.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
)
from projectgrid.shared.telemetry.logging import get_logger
from projectgrid.shared.utils.datetime import utc_now
from projectgrid.shared.utils.generators import generate_cuid

logger = get_logger(__name__)


class WorkspaceService:
    """Workspaces the caller belongs to, and the projects inside them.

    A workspace the caller is not a member of is reported as not found on
    reads, so its existence is not revealed.
    """

    def __init__(
        self,
        workspace_repo: IWorkspaceRepository,
        project_repo: IProjectRepository,
        clock: Callable[[], datetime] = utc_now,
        activity: ActivityLogService | None = None,
    ) -> None:
        self._workspaces = workspace_repo
        self._projects = project_repo
        self._clock = clock
        self._activity = activity

    async def _record(
        self,
        user_id: str,
        action: ActivityAction,
        resource_type: ActivityResourceType,
        resource_id: str,
        description: str,
    ) -> None:
        if self._activity is not None:
            await self._activity.record(
                user_id, action, resource_type, resource_id, description
            )

    async def _get_for_member(self, workspace_id: str, user_id: str) -> WorkspaceEntity:
        workspace = await self._workspaces.get_by_id(workspace_id)
        if workspace is None or not workspace.is_member(user_id):
            raise ResourceNotFoundException("Workspace", workspace_id)
        return workspace

    async def create_workspace(
        self,
        user_id: str,
        name: str,
        description: str = "",
        color: str | None = None,
    ) -> WorkspaceEntity:
        workspace = WorkspaceEntity.create(
            workspace_id=generate_cuid(),
            name=name,
            owner_id=user_id,
            now=self._clock(),
            description=description,
            color=color,
        )
        await self._workspaces.create(workspace)
        await self._record(
            user_id,
            ActivityAction.CREATED_WORKSPACE,
            ActivityResourceType.WORKSPACE,
            workspace.id,
            f'created workspace "{workspace.name}"',
        )
        logger.info("Workspace %s created by user %s", workspace.id, user_id)
        return workspace

    async def list_workspaces(self, user_id: str) -> list[WorkspaceEntity]:
        return await self._workspaces.list_for_member(user_id)

    async def get_workspace(self, workspace_id: str, user_id: str) -> WorkspaceEntity:
        return await self._get_for_member(workspace_id, user_id)

    async def update_workspace(
        self,
        workspace_id: str,
        user_id: str,
        name: str | None = None,
        description: str | None = None,
        color: str | None = None,
    ) -> WorkspaceEntity:
        """Partial update; owner or admin only.

        Raises:
            ResourceNotFoundException: Workspace absent or caller not a member.
            AuthorizationException: Caller is a member without owner/admin role.
        """
        workspace = await self._get_for_member(workspace_id, user_id)
        if not workspace.can_manage(user_id):
            raise AuthorizationException(resource="workspace", action="update")
        if name is not None:
            workspace.name = name.strip()
        if description is not None:
            workspace.description = description
        if color is not None:
            workspace.color = color
        workspace.validate()
        workspace.updated_at = self._clock()
        await self._workspaces.save(workspace)
        await self._record(
            user_id,
            ActivityAction.UPDATED_WORKSPACE,
            ActivityResourceType.WORKSPACE,
            workspace.id,
            f'updated workspace "{workspace.name}"',
        )
        return workspace

    async def list_projects(self, workspace_id: str, user_id: str) -> WorkspaceProjects:
        workspace = await self._get_for_member(workspace_id, user_id)
        projects = await self._projects.list_by_workspace(workspace_id)
        return WorkspaceProjects(workspace=workspace, projects=projects)

    async def create_project(
        self,
        workspace_id: str,
        user_id: str,
        title: str,
        description: str = "",
        status: ProjectStatus = ProjectStatus.BACKLOG,
        priority: ProjectPriority = ProjectPriority.MEDIUM,
        start_date: datetime | None = None,
        due_date: datetime | None = None,
        members: list[ProjectMember] | None = None,
    ) -> ProjectEntity:
        """Create a project in a workspace the caller belongs to.

        Raises:
            ResourceNotFoundException: Workspace does not exist.
            AuthorizationException: Caller is not a workspace member.
            ValidationException: Due date before start date.
        """
        workspace = await self._workspaces.get_by_id(workspace_id)
        if workspace is None:
            raise ResourceNotFoundException("Workspace", workspace_id)
        if not workspace.is_member(user_id):
            raise AuthorizationException(
                message="You are not a member of this workspace"
            )
        project_members = list(members or [])
        if all(m.user_id != user_id for m in project_members):
            project_members.insert(0, ProjectMember(user_id, ProjectMemberRole.MANAGER))
        now = self._clock()
        project = ProjectEntity(
            id=generate_cuid(),
            workspace_id=workspace_id,
            title=title.strip(),
            created_by=user_id,
            description=description or "",
            status=status,
            priority=priority,
            start_date=start_date,
            due_date=due_date,
            members=project_members,
            created_at=now,
            updated_at=now,
        )
        await self._projects.create(project)
        await self._record(
            user_id,
            ActivityAction.CREATED_PROJECT,
            ActivityResourceType.PROJECT,
            project.id,
            f'created project "{project.title}"',
        )
        logger.info("Project %s created in workspace %s", project.id, workspace_id)
        return project
