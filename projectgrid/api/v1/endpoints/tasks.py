"""Tasks API: field updates, subtasks, comments, watching, archiving, activity.

Fixed paths (/my-tasks, /archived) are declared before /{task_id}.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from projectgrid.api.v1.dependencies import CurrentUser, get_task_service
from projectgrid.application.services.task_service import TaskService
from projectgrid.core.limiter import limit_writes
from projectgrid.schemas.common import MessageResponse
from projectgrid.schemas.project import ProjectResponse
from projectgrid.schemas.task import (
    ActivityResponse,
    ArchivedTasksResponse,
    CommentRequest,
    CommentResponse,
    SubtaskCreateRequest,
    SubtaskUpdateRequest,
    TaskAssigneesRequest,
    TaskDescriptionRequest,
    TaskDetailsResponse,
    TaskPriorityRequest,
    TaskResponse,
    TaskStatusRequest,
    TaskTitleRequest,
)

router = APIRouter()

TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]


@router.get("/my-tasks", response_model=list[TaskResponse])
async def my_tasks(current_user: CurrentUser, tasks: TaskServiceDep) -> list[TaskResponse]:
    """Non-archived tasks assigned to the caller, newest first."""
    items = await tasks.list_my_tasks(current_user.id)
    return [TaskResponse.model_validate(t) for t in items]


@router.get("/archived", response_model=ArchivedTasksResponse)
async def archived_tasks(
    current_user: CurrentUser,
    tasks: TaskServiceDep,
    workspace_id: Annotated[str, Query(alias="workspaceId", min_length=1)],
) -> ArchivedTasksResponse:
    items = await tasks.list_archived(workspace_id, current_user.id)
    return ArchivedTasksResponse(tasks=[TaskResponse.model_validate(t) for t in items])


@router.get("/{task_id}", response_model=TaskDetailsResponse)
async def get_task(
    task_id: str, current_user: CurrentUser, tasks: TaskServiceDep
) -> TaskDetailsResponse:
    result = await tasks.get_task(task_id, current_user.id)
    return TaskDetailsResponse(
        task=TaskResponse.model_validate(result.task),
        project=ProjectResponse.model_validate(result.project),
    )


@router.put("/{task_id}/title", response_model=TaskResponse)
@limit_writes
async def update_title(
    request: Request,
    task_id: str,
    body: TaskTitleRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> TaskResponse:
    task = await tasks.update_title(task_id, current_user.id, body.title)
    return TaskResponse.model_validate(task)


@router.put("/{task_id}/description", response_model=TaskResponse)
@limit_writes
async def update_description(
    request: Request,
    task_id: str,
    body: TaskDescriptionRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> TaskResponse:
    task = await tasks.update_description(task_id, current_user.id, body.description)
    return TaskResponse.model_validate(task)


@router.put("/{task_id}/status", response_model=TaskResponse)
@limit_writes
async def update_status(
    request: Request,
    task_id: str,
    body: TaskStatusRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> TaskResponse:
    task = await tasks.update_status(task_id, current_user.id, body.status)
    return TaskResponse.model_validate(task)


@router.put("/{task_id}/priority", response_model=TaskResponse)
@limit_writes
async def update_priority(
    request: Request,
    task_id: str,
    body: TaskPriorityRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> TaskResponse:
    task = await tasks.update_priority(task_id, current_user.id, body.priority)
    return TaskResponse.model_validate(task)


@router.put("/{task_id}/assignees", response_model=TaskResponse)
@limit_writes
async def update_assignees(
    request: Request,
    task_id: str,
    body: TaskAssigneesRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> TaskResponse:
    task = await tasks.update_assignees(task_id, current_user.id, body.assignees)
    return TaskResponse.model_validate(task)


@router.post("/{task_id}/subtasks", response_model=TaskResponse, status_code=201)
@limit_writes
async def add_subtask(
    request: Request,
    task_id: str,
    body: SubtaskCreateRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> TaskResponse:
    task = await tasks.add_subtask(task_id, current_user.id, body.title)
    return TaskResponse.model_validate(task)


@router.put("/{task_id}/subtasks/{subtask_id}", response_model=TaskResponse)
@limit_writes
async def update_subtask(
    request: Request,
    task_id: str,
    subtask_id: str,
    body: SubtaskUpdateRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> TaskResponse:
    task = await tasks.update_subtask(task_id, subtask_id, current_user.id, body.completed)
    return TaskResponse.model_validate(task)


@router.get("/{task_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    task_id: str, current_user: CurrentUser, tasks: TaskServiceDep
) -> list[CommentResponse]:
    """Comments on the task, newest first."""
    items = await tasks.list_comments(task_id, current_user.id)
    return [CommentResponse.model_validate(c) for c in items]


@router.post("/{task_id}/comments", response_model=CommentResponse, status_code=201)
@limit_writes
async def add_comment(
    request: Request,
    task_id: str,
    body: CommentRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> CommentResponse:
    comment = await tasks.add_comment(task_id, current_user.id, body.text)
    return CommentResponse.model_validate(comment)


@router.put("/{task_id}/comments/{comment_id}", response_model=CommentResponse)
@limit_writes
async def update_comment(
    request: Request,
    task_id: str,
    comment_id: str,
    body: CommentRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> CommentResponse:
    comment = await tasks.update_comment(task_id, comment_id, current_user.id, body.text)
    return CommentResponse.model_validate(comment)


@router.delete("/{task_id}/comments/{comment_id}", response_model=MessageResponse)
@limit_writes
async def delete_comment(
    request: Request,
    task_id: str,
    comment_id: str,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
) -> MessageResponse:
    await tasks.delete_comment(task_id, comment_id, current_user.id)
    return MessageResponse(message="Your comment is deleted!")


@router.post("/{task_id}/watch", response_model=TaskResponse)
@limit_writes
async def toggle_watch(
    request: Request, task_id: str, current_user: CurrentUser, tasks: TaskServiceDep
) -> TaskResponse:
    """Start watching the task, or stop if already watching."""
    task = await tasks.toggle_watch(task_id, current_user.id)
    return TaskResponse.model_validate(task)


@router.post("/{task_id}/archive", response_model=TaskResponse)
@limit_writes
async def toggle_archive(
    request: Request, task_id: str, current_user: CurrentUser, tasks: TaskServiceDep
) -> TaskResponse:
    """Archive the task, or unarchive it if already archived."""
    task = await tasks.toggle_archive(task_id, current_user.id)
    return TaskResponse.model_validate(task)


@router.get("/{task_id}/activity", response_model=list[ActivityResponse])
async def task_activity(
    task_id: str, current_user: CurrentUser, tasks: TaskServiceDep
) -> list[ActivityResponse]:
    """Activity recorded against the task, newest first."""
    items = await tasks.list_activity(task_id, current_user.id)
    return [ActivityResponse.model_validate(a) for a in items]
