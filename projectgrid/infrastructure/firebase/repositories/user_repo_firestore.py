"""Firestore-backed user repository (implements IUserRepository).

Email uniqueness is enforced by a second collection keyed by the
normalized email: the index document is created with create-with-id
before the user document, so two concurrent registrations cannot both
succeed.
"""

from __future__ import annotations

from typing import Any

from projectgrid.domain.entities.user import UserEntity
from projectgrid.domain.exceptions import DuplicateEmailException
from projectgrid.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    FirestoreRESTClient,
)
from projectgrid.infrastructure.firebase.collections import (
    COLLECTION_USER_EMAILS,
    COLLECTION_USERS,
)
from projectgrid.shared.utils.datetime import ensure_utc


def _email_doc_id(email: str) -> str:
    """Firestore document ID from a normalized email (cannot contain '/')."""
    return email.replace("/", "_")


def user_to_doc(user: UserEntity) -> dict[str, Any]:
    return {
        "email": user.email,
        "name": user.name,
        "password_hash": user.password_hash,
        "is_email_verified": user.is_email_verified,
        "last_login": user.last_login,
        "is_two_factor_enabled": user.is_two_factor_enabled,
        "two_factor_code_hash": user.two_factor_code_hash,
        "two_factor_code_expires_at": user.two_factor_code_expires_at,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def doc_to_user(doc_id: str, data: dict) -> UserEntity:
    return UserEntity(
        id=doc_id,
        email=data.get("email", ""),
        name=data.get("name", ""),
        password_hash=data.get("password_hash", ""),
        is_email_verified=bool(data.get("is_email_verified", False)),
        last_login=ensure_utc(data.get("last_login")),
        is_two_factor_enabled=bool(data.get("is_two_factor_enabled", False)),
        two_factor_code_hash=data.get("two_factor_code_hash"),
        two_factor_code_expires_at=ensure_utc(data.get("two_factor_code_expires_at")),
        created_at=ensure_utc(data.get("created_at")),
        updated_at=ensure_utc(data.get("updated_at")),
    )


class FirestoreUserRepository:
    """User repository using Firestore."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_USERS)
        self._emails = client.collection(COLLECTION_USER_EMAILS)

    async def get_by_id(self, user_id: str) -> UserEntity | None:
        """Return user by ID."""
        doc = await self._coll.document(user_id).get()
        if not doc:
            return None
        return doc_to_user(doc.id, doc.to_dict())

    async def get_by_email(self, email: str) -> UserEntity | None:
        """Return user by normalized email (via the email index)."""
        index = await self._emails.document(_email_doc_id(email)).get()
        if not index:
            return None
        user_id = index.to_dict().get("user_id")
        if not user_id:
            return None
        return await self.get_by_id(user_id)

    async def create(self, user: UserEntity) -> UserEntity:
        """Reserve the email, then write the user; DuplicateEmailException if taken."""
        email_id = _email_doc_id(user.email)
        try:
            await self._emails.create(
                email_id, {"user_id": user.id, "created_at": user.created_at}
            )
        except DocumentExistsError:
            raise DuplicateEmailException() from None
        try:
            await self._coll.document(user.id).set(user_to_doc(user))
        except Exception:
            await self._emails.document(email_id).delete()
            raise
        return user

    async def save(self, user: UserEntity) -> None:
        await self._coll.document(user.id).set(user_to_doc(user))
