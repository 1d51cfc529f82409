"""Workspaces API: membership-scoped workspaces, their projects and dashboard."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from projectgrid.api.v1.dependencies import (
    CurrentUser,
    get_workspace_service,
    get_workspace_stats_service,
)
from projectgrid.application.services.workspace_service import WorkspaceService
from projectgrid.application.services.workspace_stats_service import WorkspaceStatsService
from projectgrid.core.limiter import limit_writes
from projectgrid.domain.entities.project import ProjectMember
from projectgrid.schemas.project import (
    ProjectCreateRequest,
    ProjectResponse,
    WorkspaceProjectsResponse,
)
from projectgrid.schemas.task import (
    ChartSliceResponse,
    ProductivityResponse,
    StatsCounts,
    TaskResponse,
    TaskTrendResponse,
    WorkspaceStatsResponse,
)
from projectgrid.schemas.workspace import (
    WorkspaceCreateRequest,
    WorkspaceResponse,
    WorkspaceUpdateRequest,
)

router = APIRouter()

WorkspaceServiceDep = Annotated[WorkspaceService, Depends(get_workspace_service)]
StatsServiceDep = Annotated[WorkspaceStatsService, Depends(get_workspace_stats_service)]


@router.post("", response_model=WorkspaceResponse, status_code=201)
@limit_writes
async def create_workspace(
    request: Request,
    body: WorkspaceCreateRequest,
    current_user: CurrentUser,
    workspaces: WorkspaceServiceDep,
) -> WorkspaceResponse:
    """Create a workspace; the caller becomes its owner."""
    workspace = await workspaces.create_workspace(
        current_user.id, body.name, body.description, body.color
    )
    return WorkspaceResponse.model_validate(workspace)


@router.get("", response_model=list[WorkspaceResponse])
async def list_workspaces(
    current_user: CurrentUser,
    workspaces: WorkspaceServiceDep,
) -> list[WorkspaceResponse]:
    """Workspaces the caller belongs to, newest first."""
    items = await workspaces.list_workspaces(current_user.id)
    return [WorkspaceResponse.model_validate(w) for w in items]


@router.get("/{workspace_id}", response_model=WorkspaceResponse)
async def get_workspace(
    workspace_id: str,
    current_user: CurrentUser,
    workspaces: WorkspaceServiceDep,
) -> WorkspaceResponse:
    workspace = await workspaces.get_workspace(workspace_id, current_user.id)
    return WorkspaceResponse.model_validate(workspace)


@router.put("/{workspace_id}", response_model=WorkspaceResponse)
@limit_writes
async def update_workspace(
    request: Request,
    workspace_id: str,
    body: WorkspaceUpdateRequest,
    current_user: CurrentUser,
    workspaces: WorkspaceServiceDep,
) -> WorkspaceResponse:
    """Partial update (owner or admin only)."""
    workspace = await workspaces.update_workspace(
        workspace_id,
        current_user.id,
        name=body.name,
        description=body.description,
        color=body.color,
    )
    return WorkspaceResponse.model_validate(workspace)


@router.get("/{workspace_id}/projects", response_model=WorkspaceProjectsResponse)
async def list_projects(
    workspace_id: str,
    current_user: CurrentUser,
    workspaces: WorkspaceServiceDep,
) -> WorkspaceProjectsResponse:
    result = await workspaces.list_projects(workspace_id, current_user.id)
    return WorkspaceProjectsResponse(
        workspace=WorkspaceResponse.model_validate(result.workspace),
        projects=[ProjectResponse.model_validate(p) for p in result.projects],
    )


@router.post("/{workspace_id}/projects", response_model=ProjectResponse, status_code=201)
@limit_writes
async def create_project(
    request: Request,
    workspace_id: str,
    body: ProjectCreateRequest,
    current_user: CurrentUser,
    workspaces: WorkspaceServiceDep,
) -> ProjectResponse:
    project = await workspaces.create_project(
        workspace_id,
        current_user.id,
        title=body.title,
        description=body.description,
        status=body.status,
        priority=body.priority,
        start_date=body.start_date,
        due_date=body.due_date,
        members=[ProjectMember(m.user_id, m.role) for m in body.members],
    )
    return ProjectResponse.model_validate(project)


@router.get("/{workspace_id}/stats", response_model=WorkspaceStatsResponse)
async def workspace_stats(
    workspace_id: str,
    current_user: CurrentUser,
    stats_service: StatsServiceDep,
) -> WorkspaceStatsResponse:
    """Dashboard counts, seven-day task trends and chart distributions."""
    stats = await stats_service.get_stats(workspace_id, current_user.id)
    return WorkspaceStatsResponse(
        stats=StatsCounts.model_validate(stats),
        task_trends_data=[TaskTrendResponse.model_validate(d) for d in stats.task_trends],
        project_status_data=[ChartSliceResponse.model_validate(s) for s in stats.project_status],
        task_priority_data=[ChartSliceResponse.model_validate(s) for s in stats.task_priority],
        workspace_productivity_data=[
            ProductivityResponse.model_validate(p) for p in stats.productivity
        ],
        upcoming_tasks=[TaskResponse.model_validate(t) for t in stats.upcoming_tasks],
        recent_projects=[ProjectResponse.model_validate(p) for p in stats.recent_projects],
    )
