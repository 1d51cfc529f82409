"""Firestore-backed workspace repository.

Members are stored as an array of maps plus a flat ``member_ids`` array
so membership can be queried with array-contains.
"""

from __future__ import annotations

from typing import Any

from projectgrid.domain.entities.workspace import (
    DEFAULT_WORKSPACE_COLOR,
    WorkspaceEntity,
    WorkspaceMember,
)
from projectgrid.domain.enums import WorkspaceRole
from projectgrid.infrastructure.firebase._rest_client import FirestoreRESTClient
from projectgrid.infrastructure.firebase.collections import COLLECTION_WORKSPACES
from projectgrid.shared.utils.datetime import ensure_utc

_MAX_WORKSPACES_PER_USER = 500


def _to_doc(workspace: WorkspaceEntity) -> dict[str, Any]:
    return {
        "name": workspace.name,
        "description": workspace.description,
        "color": workspace.color,
        "owner_id": workspace.owner_id,
        "members": [
            {"user_id": m.user_id, "role": m.role.value, "joined_at": m.joined_at}
            for m in workspace.members
        ],
        "member_ids": workspace.member_ids,
        "created_at": workspace.created_at,
        "updated_at": workspace.updated_at,
    }


def _to_entity(doc_id: str, data: dict) -> WorkspaceEntity:
    return WorkspaceEntity(
        id=doc_id,
        name=data.get("name", ""),
        owner_id=data.get("owner_id", ""),
        description=data.get("description") or "",
        color=data.get("color") or DEFAULT_WORKSPACE_COLOR,
        members=[
            WorkspaceMember(
                user_id=m.get("user_id", ""),
                role=WorkspaceRole(m.get("role", WorkspaceRole.MEMBER.value)),
                joined_at=ensure_utc(m.get("joined_at")),
            )
            for m in data.get("members") or []
        ],
        created_at=ensure_utc(data.get("created_at")),
        updated_at=ensure_utc(data.get("updated_at")),
    )


class FirestoreWorkspaceRepository:
    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_WORKSPACES)

    async def create(self, workspace: WorkspaceEntity) -> WorkspaceEntity:
        await self._coll.document(workspace.id).set(_to_doc(workspace))
        return workspace

    async def get_by_id(self, workspace_id: str) -> WorkspaceEntity | None:
        doc = await self._coll.document(workspace_id).get()
        if not doc:
            return None
        return _to_entity(doc.id, doc.to_dict())

    async def list_for_member(self, user_id: str) -> list[WorkspaceEntity]:
        """Workspaces containing user_id, newest first (sorted client-side)."""
        q = self._coll.where("member_ids", "array-contains", user_id).limit(
            _MAX_WORKSPACES_PER_USER
        )
        results = [_to_entity(s.id, s.to_dict()) async for s in q.stream()]
        results.sort(key=lambda w: w.created_at.timestamp() if w.created_at else 0, reverse=True)
        return results

    async def save(self, workspace: WorkspaceEntity) -> None:
        await self._coll.document(workspace.id).set(_to_doc(workspace))
