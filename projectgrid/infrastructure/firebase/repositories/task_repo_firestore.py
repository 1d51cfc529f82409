"""Firestore-backed task repository.

Subtasks are embedded in the task document; assignees are a flat array
so "my tasks" is a single array-contains query.
"""

from __future__ import annotations

from typing import Any

from projectgrid.domain.entities.task import Subtask, TaskEntity
from projectgrid.domain.enums import ProjectPriority, TaskStatus
from projectgrid.infrastructure.firebase._rest_client import FirestoreRESTClient, Query
from projectgrid.infrastructure.firebase.collections import COLLECTION_TASKS
from projectgrid.shared.utils.datetime import ensure_utc

_MAX_TASKS_PER_QUERY = 2000


def _to_doc(task: TaskEntity) -> dict[str, Any]:
    return {
        "project_id": task.project_id,
        "workspace_id": task.workspace_id,
        "title": task.title,
        "description": task.description,
        "status": task.status.value,
        "priority": task.priority.value,
        "due_date": task.due_date,
        "assignees": list(task.assignees),
        "watchers": list(task.watchers),
        "subtasks": [
            {
                "id": s.id,
                "title": s.title,
                "completed": s.completed,
                "created_at": s.created_at,
            }
            for s in task.subtasks
        ],
        "is_archived": task.is_archived,
        "completed_at": task.completed_at,
        "created_by": task.created_by,
        "created_at": task.created_at,
        "updated_at": task.updated_at,
    }


def _to_entity(doc_id: str, data: dict) -> TaskEntity:
    return TaskEntity(
        id=doc_id,
        project_id=data.get("project_id", ""),
        workspace_id=data.get("workspace_id", ""),
        title=data.get("title", ""),
        created_by=data.get("created_by", ""),
        description=data.get("description") or "",
        status=TaskStatus(data.get("status", TaskStatus.TODO.value)),
        priority=ProjectPriority(data.get("priority", ProjectPriority.MEDIUM.value)),
        due_date=ensure_utc(data.get("due_date")),
        assignees=list(data.get("assignees") or []),
        watchers=list(data.get("watchers") or []),
        subtasks=[
            Subtask(
                id=s.get("id", ""),
                title=s.get("title", ""),
                completed=bool(s.get("completed", False)),
                created_at=ensure_utc(s.get("created_at")),
            )
            for s in data.get("subtasks") or []
        ],
        is_archived=bool(data.get("is_archived", False)),
        completed_at=ensure_utc(data.get("completed_at")),
        created_at=ensure_utc(data.get("created_at")),
        updated_at=ensure_utc(data.get("updated_at")),
    )


class FirestoreTaskRepository:
    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_TASKS)

    async def _newest_first(self, q: Query) -> list[TaskEntity]:
        q = q.limit(_MAX_TASKS_PER_QUERY)
        results = [_to_entity(s.id, s.to_dict()) async for s in q.stream()]
        results.sort(key=lambda t: t.created_at.timestamp() if t.created_at else 0, reverse=True)
        return results

    async def create(self, task: TaskEntity) -> TaskEntity:
        await self._coll.document(task.id).set(_to_doc(task))
        return task

    async def get_by_id(self, task_id: str) -> TaskEntity | None:
        doc = await self._coll.document(task_id).get()
        if not doc:
            return None
        return _to_entity(doc.id, doc.to_dict())

    async def save(self, task: TaskEntity) -> None:
        await self._coll.document(task.id).set(_to_doc(task))

    async def list_by_project(
        self, project_id: str, include_archived: bool = False
    ) -> list[TaskEntity]:
        q = self._coll.where("project_id", "==", project_id)
        if not include_archived:
            q = q.where("is_archived", "==", False)
        return await self._newest_first(q)

    async def list_by_workspace(self, workspace_id: str) -> list[TaskEntity]:
        return await self._newest_first(self._coll.where("workspace_id", "==", workspace_id))

    async def list_for_assignee(self, user_id: str) -> list[TaskEntity]:
        q = self._coll.where("assignees", "array-contains", user_id).where(
            "is_archived", "==", False
        )
        return await self._newest_first(q)
