"""Task use cases: tasks, subtasks, comments, watchers and archiving.

Reads need workspace membership and report a foreign task as not found.
Changes need project membership and answer 403 otherwise. Every change
is written to the activity log against the task.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from projectgrid.application.dtos.task import ProjectTasks, TaskDetails
from projectgrid.application.interfaces.repositories import (
    ICommentRepository,
    IProjectRepository,
    ITaskRepository,
    IWorkspaceRepository,
)
from projectgrid.application.services.activity_service import ActivityLogService
from projectgrid.domain.entities.activity import ActivityEntity
from projectgrid.domain.entities.comment import CommentEntity
from projectgrid.domain.entities.project import ProjectEntity
from projectgrid.domain.entities.task import Subtask, TaskEntity
from projectgrid.domain.enums import (
    ActivityAction,
    ActivityResourceType,
    ProjectPriority,
    TaskStatus,
)
from projectgrid.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from projectgrid.shared.telemetry.logging import get_logger
from projectgrid.shared.telemetry.tracing import traced
from projectgrid.shared.utils.datetime import utc_now
from projectgrid.shared.utils.generators import generate_cuid

logger = get_logger(__name__)

_EXCERPT_LENGTH = 50


def _excerpt(text: str) -> str:
    text = text.strip()
    if len(text) <= _EXCERPT_LENGTH:
        return text
    return text[:_EXCERPT_LENGTH] + "..."


class TaskService:
    def __init__(
        self,
        task_repo: ITaskRepository,
        project_repo: IProjectRepository,
        workspace_repo: IWorkspaceRepository,
        comment_repo: ICommentRepository,
        activity: ActivityLogService,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._tasks = task_repo
        self._projects = project_repo
        self._workspaces = workspace_repo
        self._comments = comment_repo
        self._activity = activity
        self._clock = clock

    # --- access ---

    async def _project(self, project_id: str) -> ProjectEntity:
        project = await self._projects.get_by_id(project_id)
        if project is None:
            raise ResourceNotFoundException("Project", project_id)
        return project

    async def _readable_project(self, project_id: str, user_id: str) -> ProjectEntity:
        project = await self._project(project_id)
        workspace = await self._workspaces.get_by_id(project.workspace_id)
        if workspace is None or not workspace.is_member(user_id):
            raise ResourceNotFoundException("Project", project_id)
        return project

    async def _task(self, task_id: str) -> TaskEntity:
        task = await self._tasks.get_by_id(task_id)
        if task is None:
            raise ResourceNotFoundException("Task", task_id)
        return task

    async def _readable_task(
        self, task_id: str, user_id: str
    ) -> tuple[TaskEntity, ProjectEntity]:
        task = await self._task(task_id)
        project = await self._project(task.project_id)
        workspace = await self._workspaces.get_by_id(project.workspace_id)
        if workspace is None or not workspace.is_member(user_id):
            raise ResourceNotFoundException("Task", task_id)
        return task, project

    async def _editable_task(
        self, task_id: str, user_id: str
    ) -> tuple[TaskEntity, ProjectEntity]:
        task = await self._task(task_id)
        project = await self._project(task.project_id)
        if not project.is_member(user_id):
            raise AuthorizationException(message="You are not a member of this project")
        return task, project

    async def _check_assignees(self, workspace_id: str, assignees: list[str]) -> list[str]:
        unique = list(dict.fromkeys(assignees))
        if not unique:
            return unique
        workspace = await self._workspaces.get_by_id(workspace_id)
        outsiders = [a for a in unique if workspace is None or not workspace.is_member(a)]
        if outsiders:
            raise ValidationException(
                "Assignees must be members of the workspace", field="assignees"
            )
        return unique

    async def _commit(
        self, task: TaskEntity, user_id: str, action: ActivityAction, description: str
    ) -> TaskEntity:
        task.updated_at = self._clock()
        await self._tasks.save(task)
        await self._activity.record(
            user_id, action, ActivityResourceType.TASK, task.id, description
        )
        return task

    # --- tasks ---

    @traced("task.create")
    async def create_task(
        self,
        project_id: str,
        user_id: str,
        title: str,
        description: str = "",
        status: TaskStatus = TaskStatus.TODO,
        priority: ProjectPriority = ProjectPriority.MEDIUM,
        due_date: datetime | None = None,
        assignees: list[str] | None = None,
    ) -> TaskEntity:
        """Create a task in a project of a workspace the caller belongs to.

        Raises:
            ResourceNotFoundException: Project or its workspace does not exist.
            AuthorizationException: Caller is not a workspace member.
            ValidationException: Blank title, or an assignee outside the workspace.
        """
        project = await self._project(project_id)
        workspace = await self._workspaces.get_by_id(project.workspace_id)
        if workspace is None:
            raise ResourceNotFoundException("Workspace", project.workspace_id)
        if not workspace.is_member(user_id):
            raise AuthorizationException(message="You are not a member of this workspace")
        now = self._clock()
        task = TaskEntity(
            id=generate_cuid(),
            project_id=project.id,
            workspace_id=project.workspace_id,
            title=title.strip(),
            created_by=user_id,
            description=description or "",
            status=status,
            priority=priority,
            due_date=due_date,
            assignees=await self._check_assignees(project.workspace_id, assignees or []),
            completed_at=now if status is TaskStatus.COMPLETED else None,
            created_at=now,
            updated_at=now,
        )
        await self._tasks.create(task)
        await self._activity.record(
            user_id,
            ActivityAction.CREATED_TASK,
            ActivityResourceType.TASK,
            task.id,
            f'created task "{task.title}"',
        )
        logger.info("Task %s created in project %s", task.id, project.id)
        return task

    async def get_task(self, task_id: str, user_id: str) -> TaskDetails:
        task, project = await self._readable_task(task_id, user_id)
        return TaskDetails(task=task, project=project)

    async def get_project(self, project_id: str, user_id: str) -> ProjectEntity:
        return await self._readable_project(project_id, user_id)

    async def list_project_tasks(self, project_id: str, user_id: str) -> ProjectTasks:
        project = await self._readable_project(project_id, user_id)
        tasks = await self._tasks.list_by_project(project_id)
        return ProjectTasks(project=project, tasks=tasks)

    async def list_my_tasks(self, user_id: str) -> list[TaskEntity]:
        return await self._tasks.list_for_assignee(user_id)

    async def list_archived(self, workspace_id: str, user_id: str) -> list[TaskEntity]:
        workspace = await self._workspaces.get_by_id(workspace_id)
        if workspace is None or not workspace.is_member(user_id):
            raise ResourceNotFoundException("Workspace", workspace_id)
        tasks = await self._tasks.list_by_workspace(workspace_id)
        return [t for t in tasks if t.is_archived]

    async def update_title(self, task_id: str, user_id: str, title: str) -> TaskEntity:
        task, _ = await self._editable_task(task_id, user_id)
        old = task.title
        task.title = title.strip()
        task.validate()
        return await self._commit(
            task,
            user_id,
            ActivityAction.UPDATED_TASK,
            f'updated task title from "{old}" to "{task.title}"',
        )

    async def update_description(
        self, task_id: str, user_id: str, description: str
    ) -> TaskEntity:
        task, _ = await self._editable_task(task_id, user_id)
        old = task.description
        task.description = description
        return await self._commit(
            task,
            user_id,
            ActivityAction.UPDATED_TASK,
            f'updated task description from "{_excerpt(old)}" to "{_excerpt(description)}"',
        )

    @traced("task.update_status")
    async def update_status(
        self, task_id: str, user_id: str, status: TaskStatus
    ) -> TaskEntity:
        """Change status; moving to Completed stamps completed_at and logs completion."""
        task, _ = await self._editable_task(task_id, user_id)
        old = task.status
        task.status = status
        if status is TaskStatus.COMPLETED:
            if old is not TaskStatus.COMPLETED:
                task.completed_at = self._clock()
            action = ActivityAction.COMPLETED_TASK
        else:
            task.completed_at = None
            action = ActivityAction.UPDATED_TASK
        return await self._commit(
            task, user_id, action,
            f'updated task status from "{old.value}" to "{status.value}"',
        )

    async def update_priority(
        self, task_id: str, user_id: str, priority: ProjectPriority
    ) -> TaskEntity:
        task, _ = await self._editable_task(task_id, user_id)
        old = task.priority
        task.priority = priority
        return await self._commit(
            task,
            user_id,
            ActivityAction.UPDATED_TASK,
            f'updated task priority from "{old.value}" to "{priority.value}"',
        )

    async def update_assignees(
        self, task_id: str, user_id: str, assignees: list[str]
    ) -> TaskEntity:
        task, _ = await self._editable_task(task_id, user_id)
        old_count = len(task.assignees)
        task.assignees = await self._check_assignees(task.workspace_id, assignees)
        return await self._commit(
            task,
            user_id,
            ActivityAction.UPDATED_TASK,
            f"updated task assignees from {old_count} to {len(task.assignees)}",
        )

    async def toggle_watch(self, task_id: str, user_id: str) -> TaskEntity:
        task, _ = await self._editable_task(task_id, user_id)
        watching = task.toggle_watcher(user_id)
        verb = "started watching" if watching else "stopped watching"
        return await self._commit(
            task, user_id, ActivityAction.WATCHED_TASK, f'{verb} task "{task.title}"'
        )

    async def toggle_archive(self, task_id: str, user_id: str) -> TaskEntity:
        task, _ = await self._editable_task(task_id, user_id)
        task.is_archived = not task.is_archived
        verb = "archived" if task.is_archived else "unarchived"
        return await self._commit(
            task, user_id, ActivityAction.ARCHIVED_TASK, f'{verb} task "{task.title}"'
        )

    # --- subtasks ---

    async def add_subtask(self, task_id: str, user_id: str, title: str) -> TaskEntity:
        task, _ = await self._editable_task(task_id, user_id)
        title = title.strip()
        if not title:
            raise ValidationException("Subtask title is required", field="title")
        task.subtasks.append(Subtask(id=generate_cuid(), title=title, created_at=self._clock()))
        return await self._commit(
            task, user_id, ActivityAction.CREATED_SUBTASK, f'created subtask "{title}"'
        )

    async def update_subtask(
        self, task_id: str, subtask_id: str, user_id: str, completed: bool
    ) -> TaskEntity:
        task, _ = await self._editable_task(task_id, user_id)
        subtask = task.subtask(subtask_id)
        if subtask is None:
            raise ResourceNotFoundException("Subtask", subtask_id)
        subtask.completed = completed
        state = "completed" if completed else "incomplete"
        return await self._commit(
            task,
            user_id,
            ActivityAction.UPDATED_SUBTASK,
            f'marked subtask "{subtask.title}" as {state}',
        )

    # --- comments ---

    async def list_comments(self, task_id: str, user_id: str) -> list[CommentEntity]:
        await self._readable_task(task_id, user_id)
        return await self._comments.list_by_task(task_id)

    async def add_comment(self, task_id: str, user_id: str, text: str) -> CommentEntity:
        task, _ = await self._editable_task(task_id, user_id)
        now = self._clock()
        comment = CommentEntity(
            id=generate_cuid(),
            task_id=task.id,
            author_id=user_id,
            text=text.strip(),
            created_at=now,
            updated_at=now,
        )
        await self._comments.create(comment)
        await self._activity.record(
            user_id,
            ActivityAction.ADDED_COMMENT,
            ActivityResourceType.TASK,
            task.id,
            f'added comment "{_excerpt(comment.text)}"',
        )
        return comment

    async def _comment_on(self, task_id: str, comment_id: str) -> CommentEntity:
        comment = await self._comments.get_by_id(comment_id)
        if comment is None or comment.task_id != task_id:
            raise ResourceNotFoundException("Comment", comment_id)
        return comment

    async def update_comment(
        self, task_id: str, comment_id: str, user_id: str, text: str
    ) -> CommentEntity:
        """Edit a comment; only its author may.

        Raises:
            ResourceNotFoundException: Task or comment absent, or comment on another task.
            AuthorizationException: Caller is not a project member, or not the author.
        """
        await self._editable_task(task_id, user_id)
        comment = await self._comment_on(task_id, comment_id)
        if comment.author_id != user_id:
            raise AuthorizationException(resource="comment", action="update")
        comment.text = text.strip()
        if not comment.text:
            raise ValidationException("Comment text is required", field="text")
        comment.is_edited = True
        comment.updated_at = self._clock()
        await self._comments.save(comment)
        await self._activity.record(
            user_id,
            ActivityAction.UPDATED_COMMENT,
            ActivityResourceType.TASK,
            task_id,
            f'updated comment "{_excerpt(comment.text)}"',
        )
        return comment

    async def delete_comment(self, task_id: str, comment_id: str, user_id: str) -> None:
        """Delete a comment; its author or a project manager may."""
        _, project = await self._editable_task(task_id, user_id)
        comment = await self._comment_on(task_id, comment_id)
        if comment.author_id != user_id and not project.is_manager(user_id):
            raise AuthorizationException(resource="comment", action="delete")
        await self._comments.delete(comment.id)
        await self._activity.record(
            user_id,
            ActivityAction.DELETED_COMMENT,
            ActivityResourceType.TASK,
            task_id,
            f'deleted comment "{_excerpt(comment.text)}"',
        )

    # --- activity ---

    async def list_activity(self, task_id: str, user_id: str) -> list[ActivityEntity]:
        await self._readable_task(task_id, user_id)
        return await self._activity.list_for_resource(task_id)
