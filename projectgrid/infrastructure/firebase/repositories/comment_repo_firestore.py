"""Firestore-backed task comment repository."""

from __future__ import annotations

from typing import Any

from projectgrid.domain.entities.comment import CommentEntity
from projectgrid.infrastructure.firebase._rest_client import FirestoreRESTClient
from projectgrid.infrastructure.firebase.collections import COLLECTION_COMMENTS
from projectgrid.shared.utils.datetime import ensure_utc

_MAX_COMMENTS_PER_TASK = 1000


def _to_doc(comment: CommentEntity) -> dict[str, Any]:
    return {
        "task_id": comment.task_id,
        "author_id": comment.author_id,
        "text": comment.text,
        "is_edited": comment.is_edited,
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
    }


def _to_entity(doc_id: str, data: dict) -> CommentEntity:
    return CommentEntity(
        id=doc_id,
        task_id=data.get("task_id", ""),
        author_id=data.get("author_id", ""),
        text=data.get("text", ""),
        is_edited=bool(data.get("is_edited", False)),
        created_at=ensure_utc(data.get("created_at")),
        updated_at=ensure_utc(data.get("updated_at")),
    )


class FirestoreCommentRepository:
    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_COMMENTS)

    async def create(self, comment: CommentEntity) -> CommentEntity:
        await self._coll.document(comment.id).set(_to_doc(comment))
        return comment

    async def get_by_id(self, comment_id: str) -> CommentEntity | None:
        doc = await self._coll.document(comment_id).get()
        if not doc:
            return None
        return _to_entity(doc.id, doc.to_dict())

    async def save(self, comment: CommentEntity) -> None:
        await self._coll.document(comment.id).set(_to_doc(comment))

    async def delete(self, comment_id: str) -> None:
        await self._coll.document(comment_id).delete()

    async def list_by_task(self, task_id: str) -> list[CommentEntity]:
        """Comments on a task, newest first."""
        q = self._coll.where("task_id", "==", task_id).limit(_MAX_COMMENTS_PER_TASK)
        results = [_to_entity(s.id, s.to_dict()) async for s in q.stream()]
        results.sort(key=lambda c: c.created_at.timestamp() if c.created_at else 0, reverse=True)
        return results
