"""Projects API: project details and the tasks inside a project."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from projectgrid.api.v1.dependencies import CurrentUser, get_task_service
from projectgrid.application.services.task_service import TaskService
from projectgrid.core.limiter import limit_writes
from projectgrid.schemas.project import ProjectResponse
from projectgrid.schemas.task import ProjectTasksResponse, TaskCreateRequest, TaskResponse

router = APIRouter()

TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> ProjectResponse:
    project = await tasks.get_project(project_id, current_user.id)
    return ProjectResponse.model_validate(project)


@router.get("/{project_id}/tasks", response_model=ProjectTasksResponse)
async def list_project_tasks(
    project_id: str,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> ProjectTasksResponse:
    """The project and its non-archived tasks, newest first."""
    result = await tasks.list_project_tasks(project_id, current_user.id)
    return ProjectTasksResponse(
        project=ProjectResponse.model_validate(result.project),
        tasks=[TaskResponse.model_validate(t) for t in result.tasks],
    )


@router.post("/{project_id}/tasks", response_model=TaskResponse, status_code=201)
@limit_writes
async def create_task(
    request: Request,
    project_id: str,
    body: TaskCreateRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> TaskResponse:
    """Create a task; the caller must belong to the project's workspace."""
    task = await tasks.create_task(
        project_id,
        current_user.id,
        title=body.title,
        description=body.description,
        status=body.status,
        priority=body.priority,
        due_date=body.due_date,
        assignees=body.assignees,
    )
    return TaskResponse.model_validate(task)
