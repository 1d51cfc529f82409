"""Workspace dashboard: counts, seven-day trends and chart distributions."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from datetime import datetime, timedelta

from projectgrid.application.dtos.task import (
    ChartSlice,
    ProjectProductivity,
    TaskTrendDay,
    WorkspaceStats,
)
from projectgrid.application.interfaces.repositories import (
    IProjectRepository,
    ITaskRepository,
    IWorkspaceRepository,
)
from projectgrid.domain.entities.task import TaskEntity
from projectgrid.domain.enums import ProjectPriority, ProjectStatus, TaskStatus
from projectgrid.domain.exceptions import ResourceNotFoundException
from projectgrid.shared.telemetry.tracing import traced
from projectgrid.shared.utils.datetime import utc_now

TREND_DAYS = 7
UPCOMING_WINDOW = timedelta(days=7)
RECENT_PROJECTS = 5

# (label, statuses counted, chart color)
_PROJECT_STATUS_SLICES = (
    ("Completed", (ProjectStatus.COMPLETED,), "#10b981"),
    ("In Progress", (ProjectStatus.IN_PROGRESS,), "#3b82f6"),
    ("Planning", (ProjectStatus.BACKLOG, ProjectStatus.TODO), "#f59e0b"),
)
_PRIORITY_SLICES = (
    ("High", ProjectPriority.HIGH, "#ef4444"),
    ("Medium", ProjectPriority.MEDIUM, "#f59e0b"),
    ("Low", ProjectPriority.LOW, "#6b7280"),
)


class WorkspaceStatsService:
    """Aggregate figures for one workspace dashboard."""

    def __init__(
        self,
        workspace_repo: IWorkspaceRepository,
        project_repo: IProjectRepository,
        task_repo: ITaskRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._workspaces = workspace_repo
        self._projects = project_repo
        self._tasks = task_repo
        self._clock = clock

    def _trends(self, tasks: list[TaskEntity], now: datetime) -> list[TaskTrendDay]:
        today = now.date()
        days = [today - timedelta(days=offset) for offset in range(TREND_DAYS - 1, -1, -1)]
        by_day = {d: TaskTrendDay(name=d.strftime("%a"), day=d) for d in days}
        for task in tasks:
            if task.updated_at is None:
                continue
            bucket = by_day.get(task.updated_at.date())
            if bucket is None:
                continue
            if task.status is TaskStatus.COMPLETED:
                bucket.completed += 1
            elif task.status is TaskStatus.IN_PROGRESS:
                bucket.in_progress += 1
            elif task.status is TaskStatus.TODO:
                bucket.to_do += 1
        return list(by_day.values())

    @traced("workspace.stats")
    async def get_stats(self, workspace_id: str, user_id: str) -> WorkspaceStats:
        """Dashboard for a workspace the caller belongs to.

        Raises:
            ResourceNotFoundException: Workspace absent or caller not a member.
        """
        workspace = await self._workspaces.get_by_id(workspace_id)
        if workspace is None or not workspace.is_member(user_id):
            raise ResourceNotFoundException("Workspace", workspace_id)
        now = self._clock()
        projects = await self._projects.list_by_workspace(workspace_id, include_archived=True)
        tasks = await self._tasks.list_by_workspace(workspace_id)
        task_status = Counter(t.status for t in tasks)
        project_status = Counter(p.status for p in projects)
        task_priority = Counter(t.priority for t in tasks)

        upcoming = sorted(
            (
                t
                for t in tasks
                if t.due_date is not None
                and not t.is_archived
                and t.status is not TaskStatus.COMPLETED
                and now < t.due_date <= now + UPCOMING_WINDOW
            ),
            key=lambda t: t.due_date,
        )
        productivity = []
        for project in projects:
            project_tasks = [t for t in tasks if t.project_id == project.id]
            done = [
                t
                for t in project_tasks
                if t.status is TaskStatus.COMPLETED and not t.is_archived
            ]
            productivity.append(
                ProjectProductivity(
                    name=project.title, completed=len(done), total=len(project_tasks)
                )
            )

        return WorkspaceStats(
            total_projects=len(projects),
            total_tasks=len(tasks),
            total_project_in_progress=project_status[ProjectStatus.IN_PROGRESS],
            total_task_completed=task_status[TaskStatus.COMPLETED],
            total_task_to_do=task_status[TaskStatus.TODO],
            total_task_in_progress=task_status[TaskStatus.IN_PROGRESS],
            task_trends=self._trends(tasks, now),
            project_status=[
                ChartSlice(label, sum(project_status[s] for s in statuses), color)
                for label, statuses, color in _PROJECT_STATUS_SLICES
            ],
            task_priority=[
                ChartSlice(label, task_priority[priority], color)
                for label, priority, color in _PRIORITY_SLICES
            ],
            productivity=productivity,
            upcoming_tasks=upcoming,
            recent_projects=projects[:RECENT_PROJECTS],
        )
