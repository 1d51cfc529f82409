"""Firestore-backed activity log (append-only)."""

from __future__ import annotations

from typing import Any

from projectgrid.domain.entities.activity import ActivityEntity
from projectgrid.domain.enums import ActivityAction, ActivityResourceType
from projectgrid.infrastructure.firebase._rest_client import FirestoreRESTClient
from projectgrid.infrastructure.firebase.collections import COLLECTION_ACTIVITIES
from projectgrid.shared.utils.datetime import ensure_utc

_MAX_ACTIVITIES_PER_RESOURCE = 500


def _to_doc(activity: ActivityEntity) -> dict[str, Any]:
    return {
        "user_id": activity.user_id,
        "action": activity.action.value,
        "resource_type": activity.resource_type.value,
        "resource_id": activity.resource_id,
        "description": activity.description,
        "created_at": activity.created_at,
    }


def _to_entity(doc_id: str, data: dict) -> ActivityEntity:
    return ActivityEntity(
        id=doc_id,
        user_id=data.get("user_id", ""),
        action=ActivityAction(data["action"]),
        resource_type=ActivityResourceType(data["resource_type"]),
        resource_id=data.get("resource_id", ""),
        description=data.get("description") or "",
        created_at=ensure_utc(data.get("created_at")),
    )


class FirestoreActivityRepository:
    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_ACTIVITIES)

    async def add(self, activity: ActivityEntity) -> None:
        await self._coll.document(activity.id).set(_to_doc(activity))

    async def list_by_resource(self, resource_id: str) -> list[ActivityEntity]:
        """Activity for one resource, newest first."""
        q = self._coll.where("resource_id", "==", resource_id).limit(
            _MAX_ACTIVITIES_PER_RESOURCE
        )
        results = [_to_entity(s.id, s.to_dict()) async for s in q.stream()]
        results.sort(key=lambda a: a.created_at.timestamp() if a.created_at else 0, reverse=True)
        return results
