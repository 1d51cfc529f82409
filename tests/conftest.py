"""Pytest configuration and fixtures for projectgrid.

Environment is set before projectgrid.main is imported so that settings
(secret, fast bcrypt, rate limiting off) are read from it. HTTP tests run
against the ASGI app with the Firestore repositories and the mail sender
replaced by in-memory fakes through dependency_overrides.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-projectgrid")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("MAIL_BACKEND", "log")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["TELEMETRY_ENABLED"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from projectgrid.api.v1.dependencies import (  # noqa: E402
    get_activity_repo,
    get_comment_repo,
    get_notification_service,
    get_project_repo,
    get_task_repo,
    get_token_repo,
    get_user_repo,
    get_workspace_repo,
)
from projectgrid.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from projectgrid.main import app  # noqa: E402
from tests.fakes import (  # noqa: E402
    InMemoryActivityRepository,
    InMemoryCommentRepository,
    InMemoryProjectRepository,
    InMemoryTaskRepository,
    InMemoryTokenRepository,
    InMemoryUserRepository,
    InMemoryWorkspaceRepository,
    RecordingNotificationService,
    token_from,
)


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def token_repo() -> InMemoryTokenRepository:
    return InMemoryTokenRepository()


@pytest.fixture
def notifier() -> RecordingNotificationService:
    return RecordingNotificationService()


@pytest.fixture
def workspace_repo() -> InMemoryWorkspaceRepository:
    return InMemoryWorkspaceRepository()


@pytest.fixture
def project_repo() -> InMemoryProjectRepository:
    return InMemoryProjectRepository()


@pytest.fixture
def task_repo() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def comment_repo() -> InMemoryCommentRepository:
    return InMemoryCommentRepository()


@pytest.fixture
def activity_repo() -> InMemoryActivityRepository:
    return InMemoryActivityRepository()


@pytest.fixture
async def client(
    user_repo: InMemoryUserRepository,
    token_repo: InMemoryTokenRepository,
    notifier: RecordingNotificationService,
    workspace_repo: InMemoryWorkspaceRepository,
    project_repo: InMemoryProjectRepository,
    task_repo: InMemoryTaskRepository,
    comment_repo: InMemoryCommentRepository,
    activity_repo: InMemoryActivityRepository,
) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with in-memory stores."""
    app.dependency_overrides[get_user_repo] = lambda: user_repo
    app.dependency_overrides[get_token_repo] = lambda: token_repo
    app.dependency_overrides[get_notification_service] = lambda: notifier
    app.dependency_overrides[get_workspace_repo] = lambda: workspace_repo
    app.dependency_overrides[get_project_repo] = lambda: project_repo
    app.dependency_overrides[get_task_repo] = lambda: task_repo
    app.dependency_overrides[get_comment_repo] = lambda: comment_repo
    app.dependency_overrides[get_activity_repo] = lambda: activity_repo
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def register_user(client: AsyncClient, notifier: RecordingNotificationService):
    """Register and verify an account through the API; returns its login token."""

    async def _register(
        email: str = "ann@example.com",
        password: str = "longpassword1",
        name: str = "Ann",
    ) -> str:
        resp = await client.post(
            "/api/v1/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        resp = await client.post(
            "/api/v1/auth/verify-email", json={"token": token_from(notifier.last_body)}
        )
        assert resp.status_code == 200, resp.text
        resp = await client.post(
            "/api/v1/auth/login", json={"email": email, "password": password}
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["token"]

    return _register


@pytest.fixture
async def auth_headers(register_user) -> dict[str, str]:
    """Authorization header for a freshly registered, verified user."""
    token = await register_user()
    return {"Authorization": f"Bearer {token}"}
