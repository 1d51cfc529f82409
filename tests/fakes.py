"""In-memory stand-ins for the stores, the mail sender and the clock.

Records are deep-copied on the way in and out so tests only observe what
a service explicitly saved.
"""

from __future__ import annotations

import copy
import re
from datetime import datetime, timedelta, timezone

from projectgrid.domain.entities import (
    ActivityEntity,
    CommentEntity,
    ProjectEntity,
    TaskEntity,
    UserEntity,
    VerificationTokenEntity,
    WorkspaceEntity,
)
from projectgrid.domain.enums import TokenPurpose
from projectgrid.domain.exceptions import DuplicateEmailException


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class InMemoryUserRepository:
    def __init__(self) -> None:
        self.users: dict[str, UserEntity] = {}

    async def get_by_id(self, user_id: str) -> UserEntity | None:
        user = self.users.get(user_id)
        return copy.deepcopy(user) if user else None

    async def get_by_email(self, email: str) -> UserEntity | None:
        for user in self.users.values():
            if user.email == email:
                return copy.deepcopy(user)
        return None

    async def create(self, user: UserEntity) -> UserEntity:
        if any(u.email == user.email for u in self.users.values()):
            raise DuplicateEmailException()
        self.users[user.id] = copy.deepcopy(user)
        return user

    async def save(self, user: UserEntity) -> None:
        self.users[user.id] = copy.deepcopy(user)

    def only(self) -> UserEntity:
        (user,) = self.users.values()
        return user


class InMemoryTokenRepository:
    def __init__(self) -> None:
        self.records: dict[str, VerificationTokenEntity] = {}

    async def find_by_user_and_purpose(
        self, user_id: str, purpose: TokenPurpose
    ) -> VerificationTokenEntity | None:
        for record in self.records.values():
            if record.user_id == user_id and record.purpose is purpose:
                return copy.deepcopy(record)
        return None

    async def find_by_user_and_token(
        self, user_id: str, token: str
    ) -> VerificationTokenEntity | None:
        for record in self.records.values():
            if record.user_id == user_id and record.token == token:
                return copy.deepcopy(record)
        return None

    async def add(self, record: VerificationTokenEntity) -> None:
        self.records[record.id] = copy.deepcopy(record)

    async def delete(self, record_id: str) -> None:
        self.records.pop(record_id, None)

    def for_user(
        self, user_id: str, purpose: TokenPurpose | None = None
    ) -> list[VerificationTokenEntity]:
        return [
            r
            for r in self.records.values()
            if r.user_id == user_id and (purpose is None or r.purpose is purpose)
        ]


class InMemoryWorkspaceRepository:
    def __init__(self) -> None:
        self.workspaces: dict[str, WorkspaceEntity] = {}

    async def create(self, workspace: WorkspaceEntity) -> WorkspaceEntity:
        self.workspaces[workspace.id] = copy.deepcopy(workspace)
        return workspace

    async def get_by_id(self, workspace_id: str) -> WorkspaceEntity | None:
        workspace = self.workspaces.get(workspace_id)
        return copy.deepcopy(workspace) if workspace else None

    async def list_for_member(self, user_id: str) -> list[WorkspaceEntity]:
        found = [copy.deepcopy(w) for w in self.workspaces.values() if w.is_member(user_id)]
        return sorted(found, key=lambda w: w.created_at, reverse=True)

    async def save(self, workspace: WorkspaceEntity) -> None:
        self.workspaces[workspace.id] = copy.deepcopy(workspace)


class InMemoryProjectRepository:
    def __init__(self) -> None:
        self.projects: dict[str, ProjectEntity] = {}

    async def create(self, project: ProjectEntity) -> ProjectEntity:
        self.projects[project.id] = copy.deepcopy(project)
        return project

    async def get_by_id(self, project_id: str) -> ProjectEntity | None:
        project = self.projects.get(project_id)
        return copy.deepcopy(project) if project else None

    async def list_by_workspace(
        self, workspace_id: str, include_archived: bool = False
    ) -> list[ProjectEntity]:
        found = [
            copy.deepcopy(p)
            for p in self.projects.values()
            if p.workspace_id == workspace_id and (include_archived or not p.is_archived)
        ]
        return sorted(found, key=lambda p: p.created_at, reverse=True)


class InMemoryTaskRepository:
    def __init__(self) -> None:
        self.tasks: dict[str, TaskEntity] = {}

    def _newest_first(self, keep) -> list[TaskEntity]:
        found = [copy.deepcopy(t) for t in self.tasks.values() if keep(t)]
        return sorted(found, key=lambda t: t.created_at, reverse=True)

    async def create(self, task: TaskEntity) -> TaskEntity:
        self.tasks[task.id] = copy.deepcopy(task)
        return task

    async def get_by_id(self, task_id: str) -> TaskEntity | None:
        task = self.tasks.get(task_id)
        return copy.deepcopy(task) if task else None

    async def save(self, task: TaskEntity) -> None:
        self.tasks[task.id] = copy.deepcopy(task)

    async def list_by_project(
        self, project_id: str, include_archived: bool = False
    ) -> list[TaskEntity]:
        return self._newest_first(
            lambda t: t.project_id == project_id and (include_archived or not t.is_archived)
        )

    async def list_by_workspace(self, workspace_id: str) -> list[TaskEntity]:
        return self._newest_first(lambda t: t.workspace_id == workspace_id)

    async def list_for_assignee(self, user_id: str) -> list[TaskEntity]:
        return self._newest_first(lambda t: user_id in t.assignees and not t.is_archived)


class InMemoryCommentRepository:
    def __init__(self) -> None:
        self.comments: dict[str, CommentEntity] = {}

    async def create(self, comment: CommentEntity) -> CommentEntity:
        self.comments[comment.id] = copy.deepcopy(comment)
        return comment

    async def get_by_id(self, comment_id: str) -> CommentEntity | None:
        comment = self.comments.get(comment_id)
        return copy.deepcopy(comment) if comment else None

    async def save(self, comment: CommentEntity) -> None:
        self.comments[comment.id] = copy.deepcopy(comment)

    async def delete(self, comment_id: str) -> None:
        self.comments.pop(comment_id, None)

    async def list_by_task(self, task_id: str) -> list[CommentEntity]:
        found = [copy.deepcopy(c) for c in self.comments.values() if c.task_id == task_id]
        return sorted(found, key=lambda c: c.created_at, reverse=True)


class InMemoryActivityRepository:
    def __init__(self) -> None:
        self.activities: list[ActivityEntity] = []

    async def add(self, activity: ActivityEntity) -> None:
        self.activities.append(copy.deepcopy(activity))

    async def list_by_resource(self, resource_id: str) -> list[ActivityEntity]:
        found = [copy.deepcopy(a) for a in self.activities if a.resource_id == resource_id]
        return sorted(found, key=lambda a: a.created_at, reverse=True)

    def actions(self, resource_id: str) -> list[str]:
        """Recorded action values for a resource, oldest first."""
        return [a.action.value for a in self.activities if a.resource_id == resource_id]


class RecordingNotificationService:
    """Keeps every message; set fail=True to simulate delivery failure."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[str, str, str]] = []

    async def send(self, to_address: str, subject: str, html_body: str) -> bool:
        if self.fail:
            return False
        self.sent.append((to_address, subject, html_body))
        return True

    @property
    def last_body(self) -> str:
        return self.sent[-1][2]


class PlainHasher:
    """Reversible stand-in for bcrypt so service tests stay fast."""

    dummy_hash = "hashed:"

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return hashed_password == f"hashed:{plain_password}"

    def hash_code(self, code: str) -> str:
        return f"code:{code}"

    def verify_code(self, code: str, code_hash: str) -> bool:
        return code_hash == f"code:{code}"


_TOKEN_RE = re.compile(r"token=([\w\-.]+)")
_CODE_RE = re.compile(r"<strong>(\d+)</strong>")


def token_from(html_body: str) -> str:
    """Token embedded in an emailed verification or reset link."""
    match = _TOKEN_RE.search(html_body)
    assert match, "no token link in email body"
    return match.group(1)


def code_from(html_body: str) -> str:
    """One-time code shown in a 2FA email."""
    match = _CODE_RE.search(html_body)
    assert match, "no code in email body"
    return match.group(1)
