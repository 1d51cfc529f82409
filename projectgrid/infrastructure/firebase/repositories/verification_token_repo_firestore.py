"""Firestore-backed verification token repository."""

from __future__ import annotations

from projectgrid.domain.entities.verification_token import VerificationTokenEntity
from projectgrid.domain.enums import TokenPurpose
from projectgrid.infrastructure.firebase._rest_client import FirestoreRESTClient
from projectgrid.infrastructure.firebase.collections import (
    COLLECTION_VERIFICATION_TOKENS,
)
from projectgrid.shared.utils.datetime import ensure_utc


def _to_entity(doc_id: str, data: dict) -> VerificationTokenEntity:
    return VerificationTokenEntity(
        id=doc_id,
        user_id=data.get("user_id", ""),
        token=data.get("token", ""),
        purpose=TokenPurpose(data.get("purpose")),
        expires_at=ensure_utc(data.get("expires_at")),
        created_at=ensure_utc(data.get("created_at")),
    )


class FirestoreVerificationTokenRepository:
    """Verification tokens keyed by generated ID; looked up by (user_id, purpose|token)."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_VERIFICATION_TOKENS)

    async def find_by_user_and_purpose(
        self, user_id: str, purpose: TokenPurpose
    ) -> VerificationTokenEntity | None:
        q = (
            self._coll.where("user_id", "==", user_id)
            .where("purpose", "==", purpose.value)
            .limit(1)
        )
        async for snapshot in q.stream():
            return _to_entity(snapshot.id, snapshot.to_dict())
        return None

    async def find_by_user_and_token(
        self, user_id: str, token: str
    ) -> VerificationTokenEntity | None:
        q = (
            self._coll.where("user_id", "==", user_id)
            .where("token", "==", token)
            .limit(1)
        )
        async for snapshot in q.stream():
            return _to_entity(snapshot.id, snapshot.to_dict())
        return None

    async def add(self, record: VerificationTokenEntity) -> None:
        await self._coll.document(record.id).set({
            "user_id": record.user_id,
            "token": record.token,
            "purpose": record.purpose.value,
            "expires_at": record.expires_at,
            "created_at": record.created_at,
        })

    async def delete(self, record_id: str) -> None:
        await self._coll.document(record_id).delete()
