"""Tests for TaskService access rules, subtasks, comments and the activity log."""

from datetime import timedelta

import pytest

from projectgrid.application.services.activity_service import ActivityLogService
from projectgrid.application.services.task_service import TaskService
from projectgrid.application.services.workspace_service import WorkspaceService
from projectgrid.domain.entities import ProjectMember, WorkspaceMember
from projectgrid.domain.enums import (
    ProjectMemberRole,
    ProjectPriority,
    TaskStatus,
    WorkspaceRole,
)
from projectgrid.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.fakes import (
    FakeClock,
    InMemoryActivityRepository,
    InMemoryCommentRepository,
    InMemoryProjectRepository,
    InMemoryTaskRepository,
    InMemoryWorkspaceRepository,
)

OWNER = "u1"
BYSTANDER = "u2"  # workspace member, not on the project
CONTRIBUTOR = "u3"
OUTSIDER = "u9"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def workspaces() -> InMemoryWorkspaceRepository:
    return InMemoryWorkspaceRepository()


@pytest.fixture
def projects() -> InMemoryProjectRepository:
    return InMemoryProjectRepository()


@pytest.fixture
def tasks() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def comments() -> InMemoryCommentRepository:
    return InMemoryCommentRepository()


@pytest.fixture
def activities() -> InMemoryActivityRepository:
    return InMemoryActivityRepository()


@pytest.fixture
def service(workspaces, projects, tasks, comments, activities, clock) -> TaskService:
    activity = ActivityLogService(activities, clock=clock)
    return TaskService(tasks, projects, workspaces, comments, activity, clock=clock)


@pytest.fixture
async def project(workspaces, projects, clock):
    setup = WorkspaceService(workspaces, projects, clock=clock)
    ws = await setup.create_workspace(OWNER, "Team")
    workspaces.workspaces[ws.id].members.extend(
        [
            WorkspaceMember(BYSTANDER, WorkspaceRole.MEMBER),
            WorkspaceMember(CONTRIBUTOR, WorkspaceRole.MEMBER),
        ]
    )
    return await setup.create_project(
        ws.id,
        OWNER,
        title="Launch",
        members=[ProjectMember(CONTRIBUTOR, ProjectMemberRole.CONTRIBUTOR)],
    )


async def test_create_task_records_activity(service: TaskService, project, activities) -> None:
    task = await service.create_task(
        project.id,
        OWNER,
        title=" Write copy ",
        priority=ProjectPriority.HIGH,
        assignees=[CONTRIBUTOR, CONTRIBUTOR],
    )

    assert task.title == "Write copy"
    assert task.workspace_id == project.workspace_id
    assert task.assignees == [CONTRIBUTOR]
    assert task.status is TaskStatus.TODO
    assert activities.actions(task.id) == ["created_task"]


async def test_create_task_access(service: TaskService, project) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.create_task("missing", OWNER, title="X")
    with pytest.raises(AuthorizationException):
        await service.create_task(project.id, OUTSIDER, title="X")
    # Workspace membership is enough to create.
    task = await service.create_task(project.id, BYSTANDER, title="From a bystander")
    assert task.created_by == BYSTANDER


async def test_assignees_must_belong_to_workspace(service: TaskService, project) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await service.create_task(project.id, OWNER, title="X", assignees=[OUTSIDER])
    assert exc_info.value.details["field"] == "assignees"


async def test_reads_hide_task_from_outsiders(service: TaskService, project) -> None:
    task = await service.create_task(project.id, OWNER, title="Secret")

    details = await service.get_task(task.id, BYSTANDER)
    assert details.project.id == project.id
    with pytest.raises(ResourceNotFoundException):
        await service.get_task(task.id, OUTSIDER)
    with pytest.raises(ResourceNotFoundException):
        await service.list_comments(task.id, OUTSIDER)
    with pytest.raises(ResourceNotFoundException):
        await service.get_project(project.id, OUTSIDER)


async def test_changes_require_project_membership(service: TaskService, project) -> None:
    task = await service.create_task(project.id, OWNER, title="Draft")

    with pytest.raises(AuthorizationException) as exc_info:
        await service.update_title(task.id, BYSTANDER, "Hijacked")
    assert exc_info.value.message == "You are not a member of this project"
    with pytest.raises(AuthorizationException):
        await service.add_subtask(task.id, BYSTANDER, "Step")
    with pytest.raises(ResourceNotFoundException):
        await service.update_title("missing", OWNER, "X")

    updated = await service.update_title(task.id, CONTRIBUTOR, "Final")
    assert updated.title == "Final"


async def test_status_completion_stamps_and_clears(
    service: TaskService, project, tasks, activities, clock
) -> None:
    task = await service.create_task(project.id, OWNER, title="Ship")
    clock.advance(hours=1)

    done = await service.update_status(task.id, OWNER, TaskStatus.COMPLETED)
    assert done.completed_at == clock.now
    assert tasks.tasks[task.id].updated_at == clock.now

    reopened = await service.update_status(task.id, OWNER, TaskStatus.IN_PROGRESS)
    assert reopened.completed_at is None
    assert activities.actions(task.id) == ["created_task", "completed_task", "updated_task"]


async def test_field_updates_describe_change(service: TaskService, project, clock) -> None:
    task = await service.create_task(project.id, OWNER, title="Ship")
    clock.advance(minutes=1)
    await service.update_priority(task.id, OWNER, ProjectPriority.LOW)
    clock.advance(minutes=1)
    await service.update_description(task.id, OWNER, "x" * 80)
    clock.advance(minutes=1)
    await service.update_assignees(task.id, OWNER, [OWNER, CONTRIBUTOR])

    history = await service.list_activity(task.id, OWNER)

    assert history[0].description == "updated task assignees from 0 to 2"
    assert history[1].description.endswith('"' + "x" * 50 + '..."')
    assert history[2].description == 'updated task priority from "medium" to "low"'


async def test_blank_title_rejected(service: TaskService, project) -> None:
    task = await service.create_task(project.id, OWNER, title="Ship")
    with pytest.raises(ValidationException):
        await service.update_title(task.id, OWNER, "   ")


async def test_subtasks(service: TaskService, project, activities) -> None:
    task = await service.create_task(project.id, OWNER, title="Ship")

    with_sub = await service.add_subtask(task.id, CONTRIBUTOR, " Write tests ")
    (subtask,) = with_sub.subtasks
    assert subtask.title == "Write tests"
    assert subtask.completed is False

    toggled = await service.update_subtask(task.id, subtask.id, CONTRIBUTOR, True)
    assert toggled.subtasks[0].completed is True
    with pytest.raises(ResourceNotFoundException):
        await service.update_subtask(task.id, "missing", CONTRIBUTOR, True)
    with pytest.raises(AuthorizationException):
        await service.update_subtask(task.id, subtask.id, BYSTANDER, False)
    assert activities.actions(task.id)[-2:] == ["created_subtask", "updated_subtask"]


async def test_comments_newest_first_and_author_edits(
    service: TaskService, project, clock
) -> None:
    task = await service.create_task(project.id, OWNER, title="Ship")
    first = await service.add_comment(task.id, OWNER, "First")
    clock.advance(minutes=1)
    second = await service.add_comment(task.id, CONTRIBUTOR, "Second")

    listed = await service.list_comments(task.id, BYSTANDER)
    assert [c.id for c in listed] == [second.id, first.id]

    with pytest.raises(AuthorizationException):
        await service.update_comment(task.id, first.id, CONTRIBUTOR, "Not mine")
    edited = await service.update_comment(task.id, first.id, OWNER, " Edited ")
    assert edited.text == "Edited"
    assert edited.is_edited is True


async def test_comment_must_belong_to_task(service: TaskService, project) -> None:
    task = await service.create_task(project.id, OWNER, title="One")
    other = await service.create_task(project.id, OWNER, title="Two")
    comment = await service.add_comment(task.id, OWNER, "Hello")

    with pytest.raises(ResourceNotFoundException):
        await service.update_comment(other.id, comment.id, OWNER, "Moved")
    with pytest.raises(ResourceNotFoundException):
        await service.delete_comment(other.id, comment.id, OWNER)


async def test_delete_comment_author_or_manager(
    service: TaskService, project, comments
) -> None:
    task = await service.create_task(project.id, OWNER, title="Ship")
    by_owner = await service.add_comment(task.id, OWNER, "Owner note")
    by_contributor = await service.add_comment(task.id, CONTRIBUTOR, "Contributor note")

    with pytest.raises(AuthorizationException):
        await service.delete_comment(task.id, by_owner.id, CONTRIBUTOR)
    # OWNER created the project and is its manager.
    await service.delete_comment(task.id, by_contributor.id, OWNER)
    await service.delete_comment(task.id, by_owner.id, OWNER)
    assert comments.comments == {}


async def test_watch_and_archive_toggle(service: TaskService, project, activities, clock) -> None:
    task = await service.create_task(project.id, OWNER, title="Ship")

    clock.advance(minutes=1)
    assert (await service.toggle_watch(task.id, CONTRIBUTOR)).watchers == [CONTRIBUTOR]
    clock.advance(minutes=1)
    assert (await service.toggle_watch(task.id, CONTRIBUTOR)).watchers == []
    clock.advance(minutes=1)
    archived = await service.toggle_archive(task.id, OWNER)
    assert archived.is_archived is True

    history = await service.list_activity(task.id, OWNER)
    assert history[0].description == 'archived task "Ship"'
    assert [a.description for a in history[1:3]] == [
        'stopped watching task "Ship"',
        'started watching task "Ship"',
    ]


async def test_my_tasks_and_archived(service: TaskService, project, clock) -> None:
    mine = await service.create_task(project.id, OWNER, title="Mine", assignees=[CONTRIBUTOR])
    clock.advance(minutes=1)
    newer = await service.create_task(project.id, OWNER, title="Newer", assignees=[CONTRIBUTOR])
    await service.create_task(project.id, OWNER, title="Unassigned")
    gone = await service.create_task(project.id, OWNER, title="Gone", assignees=[CONTRIBUTOR])
    await service.toggle_archive(gone.id, OWNER)

    assert [t.id for t in await service.list_my_tasks(CONTRIBUTOR)] == [newer.id, mine.id]
    archived = await service.list_archived(project.workspace_id, BYSTANDER)
    assert [t.id for t in archived] == [gone.id]
    with pytest.raises(ResourceNotFoundException):
        await service.list_archived(project.workspace_id, OUTSIDER)


async def test_project_tasks_skip_archived(service: TaskService, project) -> None:
    live = await service.create_task(project.id, OWNER, title="Live")
    old = await service.create_task(project.id, OWNER, title="Old")
    await service.toggle_archive(old.id, OWNER)

    result = await service.list_project_tasks(project.id, BYSTANDER)

    assert result.project.id == project.id
    assert [t.id for t in result.tasks] == [live.id]


async def test_due_date_kept(service: TaskService, project, clock) -> None:
    due = clock.now + timedelta(days=3)
    task = await service.create_task(project.id, OWNER, title="Dated", due_date=due)
    assert (await service.get_task(task.id, OWNER)).task.due_date == due
