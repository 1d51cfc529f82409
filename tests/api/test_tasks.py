"""API tests for /api/v1/projects/{id}/tasks, /api/v1/tasks and workspace stats."""

from httpx import AsyncClient

WORKSPACES = "/api/v1/workspaces"
PROJECTS = "/api/v1/projects"
TASKS = "/api/v1/tasks"
DATES = {"startDate": "2025-01-01T00:00:00Z", "dueDate": "2025-02-01T00:00:00Z"}


async def _project(client: AsyncClient, headers: dict[str, str]) -> dict:
    ws = (await client.post(WORKSPACES, headers=headers, json={"name": "Team"})).json()
    response = await client.post(
        f"{WORKSPACES}/{ws['id']}/projects", headers=headers, json={"title": "Launch", **DATES}
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _task(client: AsyncClient, headers: dict[str, str], project_id: str, **body) -> dict:
    response = await client.post(
        f"{PROJECTS}/{project_id}/tasks", headers=headers, json={"title": "Ship", **body}
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _bob(register_user) -> dict[str, str]:
    token = await register_user(email="bob@example.com", name="Bob")
    return {"Authorization": f"Bearer {token}"}


async def test_create_and_read_task(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    project = await _project(client, auth_headers)
    task = await _task(
        client,
        auth_headers,
        project["id"],
        description="All of it",
        priority="high",
        dueDate="2025-01-15T00:00:00Z",
    )
    assert task["projectId"] == project["id"]
    assert task["workspaceId"] == project["workspaceId"]
    assert task["status"] == "To Do"
    assert task["isArchived"] is False

    details = await client.get(f"{TASKS}/{task['id']}", headers=auth_headers)
    assert details.status_code == 200
    assert details.json()["project"]["id"] == project["id"]
    assert details.json()["task"]["priority"] == "high"

    listing = await client.get(f"{PROJECTS}/{project['id']}/tasks", headers=auth_headers)
    assert [t["id"] for t in listing.json()["tasks"]] == [task["id"]]
    fetched = await client.get(f"{PROJECTS}/{project['id']}", headers=auth_headers)
    assert fetched.json()["title"] == "Launch"


async def test_outsiders(
    client: AsyncClient, auth_headers: dict[str, str], register_user
) -> None:
    project = await _project(client, auth_headers)
    task = await _task(client, auth_headers, project["id"])
    bob = await _bob(register_user)

    assert (await client.get(f"{TASKS}/{task['id']}", headers=bob)).status_code == 404
    assert (await client.get(f"{PROJECTS}/{project['id']}", headers=bob)).status_code == 404
    create = await client.post(
        f"{PROJECTS}/{project['id']}/tasks", headers=bob, json={"title": "Mine"}
    )
    assert create.status_code == 403
    assert create.json()["error"] == "PERMISSION_DENIED"
    rename = await client.put(f"{TASKS}/{task['id']}/title", headers=bob, json={"title": "X"})
    assert rename.status_code == 403
    assert (await client.get(f"{TASKS}/missing", headers=auth_headers)).status_code == 404
    assert (await client.get(f"{TASKS}/{task['id']}")).status_code == 401


async def test_field_updates(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    project = await _project(client, auth_headers)
    task = await _task(client, auth_headers, project["id"])
    url = f"{TASKS}/{task['id']}"

    renamed = await client.put(f"{url}/title", headers=auth_headers, json={"title": "Go"})
    assert renamed.json()["title"] == "Go"
    done = await client.put(f"{url}/status", headers=auth_headers, json={"status": "Completed"})
    assert done.json()["completedAt"] is not None
    bad = await client.put(f"{url}/status", headers=auth_headers, json={"status": "Nope"})
    assert bad.status_code == 400
    priority = await client.put(f"{url}/priority", headers=auth_headers, json={"priority": "low"})
    assert priority.json()["priority"] == "low"
    described = await client.put(
        f"{url}/description", headers=auth_headers, json={"description": "Details"}
    )
    assert described.json()["description"] == "Details"
    me = task["createdBy"]
    assigned = await client.put(f"{url}/assignees", headers=auth_headers, json={"assignees": [me]})
    assert assigned.json()["assignees"] == [me]
    stranger = await client.put(
        f"{url}/assignees", headers=auth_headers, json={"assignees": ["nobody"]}
    )
    assert stranger.status_code == 400

    mine = await client.get(f"{TASKS}/my-tasks", headers=auth_headers)
    assert [t["id"] for t in mine.json()] == [task["id"]]


async def test_subtasks(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    project = await _project(client, auth_headers)
    task = await _task(client, auth_headers, project["id"])

    added = await client.post(
        f"{TASKS}/{task['id']}/subtasks", headers=auth_headers, json={"title": "Step one"}
    )
    assert added.status_code == 201
    (subtask,) = added.json()["subtasks"]
    assert subtask["completed"] is False

    toggled = await client.put(
        f"{TASKS}/{task['id']}/subtasks/{subtask['id']}",
        headers=auth_headers,
        json={"completed": True},
    )
    assert toggled.json()["subtasks"][0]["completed"] is True
    missing = await client.put(
        f"{TASKS}/{task['id']}/subtasks/nope", headers=auth_headers, json={"completed": True}
    )
    assert missing.status_code == 404


async def test_comments(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    project = await _project(client, auth_headers)
    task = await _task(client, auth_headers, project["id"])
    url = f"{TASKS}/{task['id']}/comments"

    created = await client.post(url, headers=auth_headers, json={"text": "Looks good"})
    assert created.status_code == 201
    comment = created.json()
    assert comment["isEdited"] is False

    edited = await client.put(
        f"{url}/{comment['id']}", headers=auth_headers, json={"text": "Looks great"}
    )
    assert edited.json()["isEdited"] is True
    listed = await client.get(url, headers=auth_headers)
    assert [c["text"] for c in listed.json()] == ["Looks great"]
    assert (await client.post(url, headers=auth_headers, json={"text": ""})).status_code == 400

    deleted = await client.delete(f"{url}/{comment['id']}", headers=auth_headers)
    assert deleted.json() == {"message": "Your comment is deleted!"}
    assert (await client.get(url, headers=auth_headers)).json() == []


async def test_watch_archive_and_activity(
    client: AsyncClient, auth_headers: dict[str, str]
) -> None:
    project = await _project(client, auth_headers)
    task = await _task(client, auth_headers, project["id"])
    url = f"{TASKS}/{task['id']}"

    watched = await client.post(f"{url}/watch", headers=auth_headers)
    assert watched.json()["watchers"] == [task["createdBy"]]
    archived = await client.post(f"{url}/archive", headers=auth_headers)
    assert archived.json()["isArchived"] is True

    listing = await client.get(
        f"{TASKS}/archived", headers=auth_headers, params={"workspaceId": project["workspaceId"]}
    )
    assert [t["id"] for t in listing.json()["tasks"]] == [task["id"]]
    assert (await client.get(f"{TASKS}/archived", headers=auth_headers)).status_code == 400
    live = await client.get(f"{PROJECTS}/{project['id']}/tasks", headers=auth_headers)
    assert live.json()["tasks"] == []

    activity = (await client.get(f"{url}/activity", headers=auth_headers)).json()
    assert {a["action"] for a in activity} == {"created_task", "watched_task", "archived_task"}
    assert all(a["resourceType"] == "Task" for a in activity)


async def test_workspace_stats(
    client: AsyncClient, auth_headers: dict[str, str], register_user
) -> None:
    project = await _project(client, auth_headers)
    await _task(client, auth_headers, project["id"], status="In Progress")
    url = f"{WORKSPACES}/{project['workspaceId']}/stats"

    response = await client.get(url, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["stats"]["totalProjects"] == 1
    assert body["stats"]["totalTasks"] == 1
    assert body["stats"]["totalTaskInProgress"] == 1
    assert len(body["taskTrendsData"]) == 7
    assert body["taskTrendsData"][-1]["inProgress"] == 1
    assert [s["name"] for s in body["taskPriorityData"]] == ["High", "Medium", "Low"]
    assert body["workspaceProductivityData"] == [{"name": "Launch", "completed": 0, "total": 1}]
    assert [p["id"] for p in body["recentProjects"]] == [project["id"]]

    bob = await _bob(register_user)
    assert (await client.get(url, headers=bob)).status_code == 404
