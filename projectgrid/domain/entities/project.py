"""Project domain entity."""

from dataclasses import dataclass, field
from datetime import datetime

from projectgrid.domain.enums import ProjectMemberRole, ProjectPriority, ProjectStatus
from projectgrid.domain.exceptions import ValidationException


@dataclass
class ProjectMember:
    user_id: str
    role: ProjectMemberRole = ProjectMemberRole.CONTRIBUTOR


@dataclass
class ProjectEntity:
    """Domain entity for a project inside a workspace.

    Validation runs on construction: title required, progress within
    0..100, due date not before start date.
    """

    id: str
    workspace_id: str
    title: str
    created_by: str
    description: str = ""
    status: ProjectStatus = ProjectStatus.BACKLOG
    priority: ProjectPriority = ProjectPriority.MEDIUM
    start_date: datetime | None = None
    due_date: datetime | None = None
    progress: int = 0
    members: list[ProjectMember] = field(default_factory=list)
    is_archived: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not self.workspace_id:
            raise ValidationException("Workspace ID is required", field="workspace_id")
        if not self.title or not self.title.strip():
            raise ValidationException("Project title is required", field="title")
        if not 0 <= self.progress <= 100:
            raise ValidationException("Progress must be between 0 and 100", field="progress")
        if self.start_date and self.due_date and self.due_date < self.start_date:
            raise ValidationException(
                "Due date must not be before start date", field="due_date"
            )

    def is_member(self, user_id: str) -> bool:
        return any(m.user_id == user_id for m in self.members)

    def is_manager(self, user_id: str) -> bool:
        return any(
            m.user_id == user_id and m.role is ProjectMemberRole.MANAGER for m in self.members
        )
