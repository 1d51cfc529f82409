"""Project API schemas."""

from datetime import datetime

from pydantic import Field, field_validator, model_validator

from projectgrid.domain.enums import ProjectMemberRole, ProjectPriority, ProjectStatus
from projectgrid.schemas.common import CamelModel
from projectgrid.schemas.workspace import WorkspaceResponse
from projectgrid.shared.utils.datetime import ensure_utc


class ProjectMemberSchema(CamelModel):
    user_id: str = Field(..., min_length=1)
    role: ProjectMemberRole = ProjectMemberRole.CONTRIBUTOR


class ProjectCreateRequest(CamelModel):
    """Request body for POST /workspaces/{id}/projects."""

    title: str = Field(..., min_length=3, max_length=120)
    description: str = Field(default="", max_length=2000)
    status: ProjectStatus = ProjectStatus.BACKLOG
    priority: ProjectPriority = ProjectPriority.MEDIUM
    start_date: datetime
    due_date: datetime
    members: list[ProjectMemberSchema] = Field(default_factory=list)

    @field_validator("start_date", "due_date")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode="after")
    def due_after_start(self) -> "ProjectCreateRequest":
        if self.due_date < self.start_date:
            raise ValueError("Due date must not be before start date")
        return self


class ProjectResponse(CamelModel):
    id: str
    workspace_id: str
    title: str
    description: str = ""
    status: ProjectStatus
    priority: ProjectPriority
    start_date: datetime | None = None
    due_date: datetime | None = None
    progress: int = 0
    members: list[ProjectMemberSchema] = Field(default_factory=list)
    is_archived: bool = False
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class WorkspaceProjectsResponse(CamelModel):
    workspace: WorkspaceResponse
    projects: list[ProjectResponse]
