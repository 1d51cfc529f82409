"""Tests for the Firestore REST repositories against an in-memory HTTP backend.

The backend is an httpx.MockTransport that understands the handful of REST
calls the client makes: get, patch (overwrite), create-with-id, delete and
runQuery with EQUAL / ARRAY_CONTAINS filters.
"""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from projectgrid.domain.entities import (
    ActivityEntity,
    CommentEntity,
    ProjectEntity,
    Subtask,
    TaskEntity,
    UserEntity,
    VerificationTokenEntity,
    WorkspaceEntity,
)
from projectgrid.domain.enums import (
    ActivityAction,
    ActivityResourceType,
    ProjectPriority,
    TaskStatus,
    TokenPurpose,
)
from projectgrid.domain.exceptions import DuplicateEmailException
from projectgrid.infrastructure.firebase._rest_client import FirestoreRESTClient
from projectgrid.infrastructure.firebase._rest_encoding import decode_document
from projectgrid.infrastructure.firebase.repositories import (
    FirestoreActivityRepository,
    FirestoreCommentRepository,
    FirestoreProjectRepository,
    FirestoreTaskRepository,
    FirestoreUserRepository,
    FirestoreVerificationTokenRepository,
    FirestoreWorkspaceRepository,
)

BASE = "https://firestore.test/v1"
PREFIX = "/v1/projects/demo/databases/(default)/documents/"
QUERY_PATH = "/v1/projects/demo/databases/(default)/documents:runQuery"
NOW = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


class FakeFirestore:
    """Document store behind a MockTransport; records every request."""

    def __init__(self) -> None:
        self.docs: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.fail_patch_for: str | None = None

    def _document(self, path: str) -> dict:
        return {"name": f"projects/demo/databases/(default)/documents/{path}", "fields": self.docs[path]}

    def _matches(self, fields: dict, flt: dict) -> bool:
        if "compositeFilter" in flt:
            return all(self._matches(fields, f) for f in flt["compositeFilter"]["filters"])
        ff = flt["fieldFilter"]
        data = decode_document({"fields": fields})
        value = decode_document({"fields": {"v": ff["value"]}})["v"]
        actual = data.get(ff["field"]["fieldPath"])
        if ff["op"] == "EQUAL":
            return actual == value
        if ff["op"] == "ARRAY_CONTAINS":
            return value in (actual or [])
        raise AssertionError(f"unsupported op {ff['op']}")

    def _run_query(self, body: dict) -> httpx.Response:
        query = body["structuredQuery"]
        collection = query["from"][0]["collectionId"]
        hits = [
            {"document": self._document(path)}
            for path, fields in self.docs.items()
            if path.rsplit("/", 1)[0] == collection
            and ("where" not in query or self._matches(fields, query["where"]))
        ]
        return httpx.Response(200, json=hits[: query.get("limit")] or [{"readTime": "x"}])

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        if request.method == "POST" and path == QUERY_PATH:
            return self._run_query(body)
        assert path.startswith(PREFIX), path
        path = path[len(PREFIX):]
        if request.method == "POST":
            full = f"{path}/{request.url.params['documentId']}"
            if full in self.docs:
                return httpx.Response(409, json={"error": "ALREADY_EXISTS"})
            self.docs[full] = body["fields"]
            return httpx.Response(200, json=self._document(full))
        if request.method == "PATCH":
            if self.fail_patch_for and path.startswith(self.fail_patch_for):
                return httpx.Response(500, json={"error": "INTERNAL"})
            self.docs[path] = body["fields"]
            return httpx.Response(200, json=self._document(path))
        if request.method == "GET":
            if path not in self.docs:
                return httpx.Response(404, json={"error": "NOT_FOUND"})
            return httpx.Response(200, json=self._document(path))
        if request.method == "DELETE":
            self.docs.pop(path, None)
            return httpx.Response(200, json={})
        raise AssertionError(f"unexpected {request.method}")


@pytest.fixture
def backend() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
async def client(backend: FakeFirestore):
    http = httpx.AsyncClient(transport=httpx.MockTransport(backend.handler))
    yield FirestoreRESTClient("demo", None, http_client=http, base_url=BASE)
    await http.aclose()


def _user(user_id: str = "u1", email: str = "ann@x.com") -> UserEntity:
    return UserEntity(
        id=user_id,
        email=email,
        name="Ann",
        password_hash="$2b$04$hash",
        created_at=NOW,
        updated_at=NOW,
    )


async def test_no_credentials_sends_no_authorization(client, backend: FakeFirestore) -> None:
    repo = FirestoreUserRepository(client)
    assert await repo.get_by_id("missing") is None
    assert "authorization" not in backend.requests[0].headers


async def test_user_round_trip(client) -> None:
    repo = FirestoreUserRepository(client)
    user = _user()
    user.set_pending_code("digest", NOW + timedelta(minutes=5))
    await repo.create(user)

    by_email = await repo.get_by_email("ann@x.com")

    assert by_email == user
    assert by_email.created_at.tzinfo is not None
    assert await repo.get_by_email("other@x.com") is None


async def test_user_save_overwrites(client) -> None:
    repo = FirestoreUserRepository(client)
    user = _user()
    await repo.create(user)
    user.mark_email_verified(NOW)
    user.record_login(NOW)
    await repo.save(user)
    stored = await repo.get_by_id("u1")
    assert stored.is_email_verified is True
    assert stored.last_login == NOW


async def test_duplicate_email_rejected_by_index(client, backend: FakeFirestore) -> None:
    """A second user with the same email loses at the index; its user doc is never written."""
    repo = FirestoreUserRepository(client)
    await repo.create(_user("u1"))
    with pytest.raises(DuplicateEmailException):
        await repo.create(_user("u2"))
    assert "users/u2" not in backend.docs


async def test_failed_user_write_releases_email(client, backend: FakeFirestore) -> None:
    repo = FirestoreUserRepository(client)
    backend.fail_patch_for = "users/"
    with pytest.raises(httpx.HTTPStatusError):
        await repo.create(_user())
    assert "user_emails/ann@x.com" not in backend.docs


async def test_token_lookups(client, backend: FakeFirestore) -> None:
    repo = FirestoreVerificationTokenRepository(client)
    verify = VerificationTokenEntity(
        id="t1",
        user_id="u1",
        token="tok-verify",
        purpose=TokenPurpose.EMAIL_VERIFICATION,
        expires_at=NOW + timedelta(hours=1),
        created_at=NOW,
    )
    reset = VerificationTokenEntity(
        id="t2",
        user_id="u1",
        token="tok-reset",
        purpose=TokenPurpose.PASSWORD_RESET,
        expires_at=NOW + timedelta(minutes=10),
        created_at=NOW,
    )
    await repo.add(verify)
    await repo.add(reset)

    assert await repo.find_by_user_and_purpose("u1", TokenPurpose.PASSWORD_RESET) == reset
    assert await repo.find_by_user_and_token("u1", "tok-verify") == verify
    assert await repo.find_by_user_and_token("u2", "tok-verify") is None

    query = json.loads(backend.requests[-1].content)["structuredQuery"]
    assert query["where"]["compositeFilter"]["op"] == "AND"
    assert len(query["where"]["compositeFilter"]["filters"]) == 2

    await repo.delete("t1")
    await repo.delete("t1")
    assert await repo.find_by_user_and_purpose("u1", TokenPurpose.EMAIL_VERIFICATION) is None


async def test_workspaces_for_member_newest_first(client) -> None:
    repo = FirestoreWorkspaceRepository(client)
    older = WorkspaceEntity.create("w1", "Old", "u1", NOW)
    newer = WorkspaceEntity.create("w2", "New", "u1", NOW + timedelta(days=1))
    foreign = WorkspaceEntity.create("w3", "Other", "u2", NOW)
    for ws in (older, newer, foreign):
        await repo.create(ws)

    listed = await repo.list_for_member("u1")

    assert [w.id for w in listed] == ["w2", "w1"]
    assert listed[0] == newer
    assert await repo.get_by_id("nope") is None


async def test_projects_exclude_archived(client) -> None:
    repo = FirestoreProjectRepository(client)
    live = ProjectEntity(
        id="p1",
        workspace_id="w1",
        title="Live",
        created_by="u1",
        start_date=NOW,
        due_date=NOW + timedelta(days=3),
        created_at=NOW,
    )
    archived = ProjectEntity(
        id="p2", workspace_id="w1", title="Old", created_by="u1", is_archived=True, created_at=NOW
    )
    other = ProjectEntity(id="p3", workspace_id="w2", title="Else", created_by="u1", created_at=NOW)
    for project in (live, archived, other):
        await repo.create(project)

    assert await repo.list_by_workspace("w1") == [live]
    assert {p.id for p in await repo.list_by_workspace("w1", include_archived=True)} == {"p1", "p2"}
    assert await repo.get_by_id("p1") == live
    assert await repo.get_by_id("nope") is None


def _task(task_id: str, **overrides) -> TaskEntity:
    fields = {
        "id": task_id,
        "project_id": "p1",
        "workspace_id": "w1",
        "title": f"Task {task_id}",
        "created_by": "u1",
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return TaskEntity(**fields)


async def test_task_round_trip_with_subtasks(client) -> None:
    repo = FirestoreTaskRepository(client)
    task = _task(
        "t1",
        status=TaskStatus.IN_PROGRESS,
        priority=ProjectPriority.HIGH,
        due_date=NOW + timedelta(days=2),
        assignees=["u2"],
        watchers=["u1"],
        subtasks=[Subtask(id="s1", title="Step", completed=True, created_at=NOW)],
    )
    await repo.create(task)

    assert await repo.get_by_id("t1") == task
    assert await repo.get_by_id("nope") is None


async def test_task_queries(client, backend: FakeFirestore) -> None:
    repo = FirestoreTaskRepository(client)
    older = _task("t1", assignees=["u2"])
    newer = _task("t2", assignees=["u2"], created_at=NOW + timedelta(hours=1))
    archived = _task("t3", assignees=["u2"], is_archived=True)
    elsewhere = _task("t4", project_id="p2", workspace_id="w2", assignees=["u3"])
    for task in (older, newer, archived, elsewhere):
        await repo.create(task)

    assert [t.id for t in await repo.list_by_project("p1")] == ["t2", "t1"]
    assert {t.id for t in await repo.list_by_project("p1", include_archived=True)} == {
        "t1",
        "t2",
        "t3",
    }
    assert [t.id for t in await repo.list_for_assignee("u2")] == ["t2", "t1"]
    query = json.loads(backend.requests[-1].content)["structuredQuery"]
    assert query["where"]["compositeFilter"]["filters"][0]["fieldFilter"]["op"] == "ARRAY_CONTAINS"
    assert {t.id for t in await repo.list_by_workspace("w1")} == {"t1", "t2", "t3"}


async def test_task_save_overwrites(client) -> None:
    repo = FirestoreTaskRepository(client)
    task = _task("t1")
    await repo.create(task)
    task.status = TaskStatus.COMPLETED
    task.completed_at = NOW
    await repo.save(task)
    stored = await repo.get_by_id("t1")
    assert stored.status is TaskStatus.COMPLETED
    assert stored.completed_at == NOW


async def test_comments_by_task_and_delete(client) -> None:
    repo = FirestoreCommentRepository(client)
    first = CommentEntity(id="c1", task_id="t1", author_id="u1", text="First", created_at=NOW)
    second = CommentEntity(
        id="c2", task_id="t1", author_id="u2", text="Second", created_at=NOW + timedelta(minutes=1)
    )
    other = CommentEntity(id="c3", task_id="t2", author_id="u1", text="Other", created_at=NOW)
    for comment in (first, second, other):
        await repo.create(comment)

    assert [c.id for c in await repo.list_by_task("t1")] == ["c2", "c1"]
    second.text = "Edited"
    second.is_edited = True
    await repo.save(second)
    assert (await repo.get_by_id("c2")).is_edited is True

    await repo.delete("c1")
    await repo.delete("c1")
    assert await repo.get_by_id("c1") is None


async def test_activity_by_resource_newest_first(client) -> None:
    repo = FirestoreActivityRepository(client)
    created = ActivityEntity(
        id="a1",
        user_id="u1",
        action=ActivityAction.CREATED_TASK,
        resource_type=ActivityResourceType.TASK,
        resource_id="t1",
        description='created task "Ship"',
        created_at=NOW,
    )
    completed = ActivityEntity(
        id="a2",
        user_id="u1",
        action=ActivityAction.COMPLETED_TASK,
        resource_type=ActivityResourceType.TASK,
        resource_id="t1",
        created_at=NOW + timedelta(minutes=5),
    )
    await repo.add(created)
    await repo.add(completed)

    assert await repo.list_by_resource("t1") == [completed, created]
    assert await repo.list_by_resource("t2") == []
