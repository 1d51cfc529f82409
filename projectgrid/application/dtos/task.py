"""DTOs for task and workspace statistics use cases."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from projectgrid.domain.entities import ProjectEntity, TaskEntity


@dataclass(frozen=True)
class TaskDetails:
    """A task together with the project it belongs to."""

    task: TaskEntity
    project: ProjectEntity


@dataclass(frozen=True)
class ProjectTasks:
    """A project and its non-archived tasks, newest first."""

    project: ProjectEntity
    tasks: list[TaskEntity]


@dataclass
class TaskTrendDay:
    name: str
    day: date
    completed: int = 0
    in_progress: int = 0
    to_do: int = 0


@dataclass
class ChartSlice:
    name: str
    value: int
    color: str


@dataclass
class ProjectProductivity:
    name: str
    completed: int
    total: int


@dataclass
class WorkspaceStats:
    """Dashboard figures for one workspace.

    Counts cover every project in the workspace; task counts include
    archived tasks except in productivity, which counts only live
    completed tasks.
    """

    total_projects: int
    total_tasks: int
    total_project_in_progress: int
    total_task_completed: int
    total_task_to_do: int
    total_task_in_progress: int
    task_trends: list[TaskTrendDay] = field(default_factory=list)
    project_status: list[ChartSlice] = field(default_factory=list)
    task_priority: list[ChartSlice] = field(default_factory=list)
    productivity: list[ProjectProductivity] = field(default_factory=list)
    upcoming_tasks: list[TaskEntity] = field(default_factory=list)
    recent_projects: list[ProjectEntity] = field(default_factory=list)
