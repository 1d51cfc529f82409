"""Task, comment, activity and workspace dashboard schemas."""

from datetime import date, datetime

from pydantic import Field, field_validator

from projectgrid.domain.enums import (
    ActivityAction,
    ActivityResourceType,
    ProjectPriority,
    TaskStatus,
)
from projectgrid.schemas.common import CamelModel
from projectgrid.schemas.project import ProjectResponse
from projectgrid.shared.utils.datetime import ensure_utc


class TaskCreateRequest(CamelModel):
    """Request body for POST /projects/{id}/tasks."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    status: TaskStatus = TaskStatus.TODO
    priority: ProjectPriority = ProjectPriority.MEDIUM
    due_date: datetime | None = None
    assignees: list[str] = Field(default_factory=list)

    @field_validator("due_date")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)


class TaskTitleRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)


class TaskDescriptionRequest(CamelModel):
    description: str = Field(..., max_length=5000)


class TaskStatusRequest(CamelModel):
    status: TaskStatus


class TaskPriorityRequest(CamelModel):
    priority: ProjectPriority


class TaskAssigneesRequest(CamelModel):
    assignees: list[str]


class SubtaskCreateRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)


class SubtaskUpdateRequest(CamelModel):
    completed: bool


class CommentRequest(CamelModel):
    text: str = Field(..., min_length=1, max_length=5000)


class SubtaskResponse(CamelModel):
    id: str
    title: str
    completed: bool = False
    created_at: datetime | None = None


class TaskResponse(CamelModel):
    id: str
    project_id: str
    workspace_id: str
    title: str
    description: str = ""
    status: TaskStatus
    priority: ProjectPriority
    due_date: datetime | None = None
    assignees: list[str] = Field(default_factory=list)
    watchers: list[str] = Field(default_factory=list)
    subtasks: list[SubtaskResponse] = Field(default_factory=list)
    is_archived: bool = False
    completed_at: datetime | None = None
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TaskDetailsResponse(CamelModel):
    task: TaskResponse
    project: ProjectResponse


class ProjectTasksResponse(CamelModel):
    project: ProjectResponse
    tasks: list[TaskResponse]


class ArchivedTasksResponse(CamelModel):
    tasks: list[TaskResponse]


class CommentResponse(CamelModel):
    id: str
    task_id: str
    author_id: str
    text: str
    is_edited: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ActivityResponse(CamelModel):
    id: str
    user_id: str
    action: ActivityAction
    resource_type: ActivityResourceType
    resource_id: str
    description: str = ""
    created_at: datetime | None = None


class StatsCounts(CamelModel):
    total_projects: int
    total_tasks: int
    total_project_in_progress: int
    total_task_completed: int
    total_task_to_do: int
    total_task_in_progress: int


class TaskTrendResponse(CamelModel):
    name: str
    day: date
    completed: int
    in_progress: int
    to_do: int


class ChartSliceResponse(CamelModel):
    name: str
    value: int
    color: str


class ProductivityResponse(CamelModel):
    name: str
    completed: int
    total: int


class WorkspaceStatsResponse(CamelModel):
    """Body of GET /workspaces/{id}/stats."""

    stats: StatsCounts
    task_trends_data: list[TaskTrendResponse]
    project_status_data: list[ChartSliceResponse]
    task_priority_data: list[ChartSliceResponse]
    workspace_productivity_data: list[ProductivityResponse]
    upcoming_tasks: list[TaskResponse]
    recent_projects: list[ProjectResponse]
