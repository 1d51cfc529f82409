"""Task domain entity with embedded subtasks."""

from dataclasses import dataclass, field
from datetime import datetime

from projectgrid.domain.enums import ProjectPriority, TaskStatus
from projectgrid.domain.exceptions import ValidationException


@dataclass
class Subtask:
    id: str
    title: str
    completed: bool = False
    created_at: datetime | None = None


@dataclass
class TaskEntity:
    """A unit of work inside a project.

    workspace_id is denormalized from the project so tasks can be queried
    per workspace without a join.
    """

    id: str
    project_id: str
    workspace_id: str
    title: str
    created_by: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: ProjectPriority = ProjectPriority.MEDIUM
    due_date: datetime | None = None
    assignees: list[str] = field(default_factory=list)
    watchers: list[str] = field(default_factory=list)
    subtasks: list[Subtask] = field(default_factory=list)
    is_archived: bool = False
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not self.project_id:
            raise ValidationException("Project ID is required", field="project_id")
        if not self.title or not self.title.strip():
            raise ValidationException("Task title is required", field="title")

    def subtask(self, subtask_id: str) -> Subtask | None:
        return next((s for s in self.subtasks if s.id == subtask_id), None)

    def toggle_watcher(self, user_id: str) -> bool:
        """Add or remove user_id from watchers; True when now watching."""
        if user_id in self.watchers:
            self.watchers.remove(user_id)
            return False
        self.watchers.append(user_id)
        return True
