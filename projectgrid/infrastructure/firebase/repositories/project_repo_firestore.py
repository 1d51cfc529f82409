"""Firestore-backed project repository."""

from __future__ import annotations

from typing import Any

from projectgrid.domain.entities.project import ProjectEntity, ProjectMember
from projectgrid.domain.enums import ProjectMemberRole, ProjectPriority, ProjectStatus
from projectgrid.infrastructure.firebase._rest_client import FirestoreRESTClient
from projectgrid.infrastructure.firebase.collections import COLLECTION_PROJECTS
from projectgrid.shared.utils.datetime import ensure_utc

_MAX_PROJECTS_PER_WORKSPACE = 1000


def _to_doc(project: ProjectEntity) -> dict[str, Any]:
    return {
        "workspace_id": project.workspace_id,
        "title": project.title,
        "description": project.description,
        "status": project.status.value,
        "priority": project.priority.value,
        "start_date": project.start_date,
        "due_date": project.due_date,
        "progress": project.progress,
        "members": [{"user_id": m.user_id, "role": m.role.value} for m in project.members],
        "is_archived": project.is_archived,
        "created_by": project.created_by,
        "created_at": project.created_at,
        "updated_at": project.updated_at,
    }


def _to_entity(doc_id: str, data: dict) -> ProjectEntity:
    return ProjectEntity(
        id=doc_id,
        workspace_id=data.get("workspace_id", ""),
        title=data.get("title", ""),
        created_by=data.get("created_by", ""),
        description=data.get("description") or "",
        status=ProjectStatus(data.get("status", ProjectStatus.BACKLOG.value)),
        priority=ProjectPriority(data.get("priority", ProjectPriority.MEDIUM.value)),
        start_date=ensure_utc(data.get("start_date")),
        due_date=ensure_utc(data.get("due_date")),
        progress=int(data.get("progress", 0)),
        members=[
            ProjectMember(
                user_id=m.get("user_id", ""),
                role=ProjectMemberRole(m.get("role", ProjectMemberRole.CONTRIBUTOR.value)),
            )
            for m in data.get("members") or []
        ],
        is_archived=bool(data.get("is_archived", False)),
        created_at=ensure_utc(data.get("created_at")),
        updated_at=ensure_utc(data.get("updated_at")),
    )


class FirestoreProjectRepository:
    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_PROJECTS)

    async def create(self, project: ProjectEntity) -> ProjectEntity:
        await self._coll.document(project.id).set(_to_doc(project))
        return project

    async def get_by_id(self, project_id: str) -> ProjectEntity | None:
        doc = await self._coll.document(project_id).get()
        if not doc:
            return None
        return _to_entity(doc.id, doc.to_dict())

    async def list_by_workspace(
        self, workspace_id: str, include_archived: bool = False
    ) -> list[ProjectEntity]:
        """Projects in a workspace, newest first."""
        q = self._coll.where("workspace_id", "==", workspace_id)
        if not include_archived:
            q = q.where("is_archived", "==", False)
        q = q.limit(_MAX_PROJECTS_PER_WORKSPACE)
        results = [_to_entity(s.id, s.to_dict()) async for s in q.stream()]
        results.sort(key=lambda p: p.created_at.timestamp() if p.created_at else 0, reverse=True)
        return results
