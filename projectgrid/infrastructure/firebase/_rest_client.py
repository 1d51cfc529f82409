"""Firestore REST v1 client on httpx, with the small surface the
repositories need: document get/set/delete, create-with-id and
single-collection queries.

Authorization comes from a google-auth service account. With no
credentials (emulator, tests) requests go out unauthenticated.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from projectgrid.infrastructure.firebase._rest_encoding import (
    decode_document,
    encode_document,
    encode_value,
)

FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
DEFAULT_BASE_URL = "https://firestore.googleapis.com/v1"
DEFAULT_QUERY_LIMIT = 100

_OPERATORS = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "array-contains": "ARRAY_CONTAINS",
}


class DocumentExistsError(Exception):
    """createDocument answered 409: the document ID is taken."""


def load_service_account_credentials(key_info: dict):
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_info, scopes=[FIRESTORE_SCOPE]
    )


def _fresh_token(credentials) -> str:
    # google-auth refresh is blocking (requests transport); call via to_thread.
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


@dataclass(frozen=True)
class DocumentSnapshot:
    id: str
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return self.data


class DocumentReference:
    def __init__(self, client: FirestoreRESTClient, path: str) -> None:
        self._client = client
        self.path = path
        self.id = path.rsplit("/", 1)[-1]

    async def get(self) -> DocumentSnapshot | None:
        body = await self._client.request("GET", self.path)
        if body is None:
            return None
        return DocumentSnapshot(self.id, decode_document(body))

    async def set(self, data: dict[str, Any]) -> None:
        """Write the whole document, creating it if absent."""
        await self._client.request("PATCH", self.path, encode_document(data))

    async def delete(self) -> None:
        await self._client.request("DELETE", self.path)


class Query:
    """AND of field filters over one collection, run through runQuery."""

    def __init__(self, client: FirestoreRESTClient, collection_id: str) -> None:
        self._client = client
        self._collection_id = collection_id
        self._filters: list[dict] = []
        self._limit = DEFAULT_QUERY_LIMIT

    def where(self, field: str, op: str, value: Any) -> Query:
        if op not in _OPERATORS:
            raise ValueError(f"Unsupported Firestore operator: {op!r}")
        self._filters.append(
            {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": _OPERATORS[op],
                    "value": encode_value(value),
                }
            }
        )
        return self

    def limit(self, count: int) -> Query:
        self._limit = count
        return self

    def structured_query(self) -> dict[str, Any]:
        query: dict[str, Any] = {
            "from": [{"collectionId": self._collection_id}],
            "limit": self._limit,
        }
        if len(self._filters) == 1:
            query["where"] = self._filters[0]
        elif self._filters:
            query["where"] = {"compositeFilter": {"op": "AND", "filters": self._filters}}
        return query

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        rows = await self._client.request(
            "POST",
            f"{self._client.documents_root}:runQuery",
            {"structuredQuery": self.structured_query()},
        )
        # Rows without "document" only carry readTime (empty result).
        for row in rows or []:
            document = row.get("document")
            if document:
                doc_id = document["name"].rsplit("/", 1)[-1]
                yield DocumentSnapshot(doc_id, decode_document(document))


class CollectionReference:
    def __init__(self, client: FirestoreRESTClient, collection_id: str) -> None:
        self._client = client
        self.id = collection_id
        self.path = f"{client.documents_root}/{collection_id}"

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self.path}/{document_id}")

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Create document_id; raises DocumentExistsError if it already exists."""
        await self._client.request(
            "POST",
            f"{self.path}?documentId={quote(document_id, safe='')}",
            encode_document(data),
        )

    def where(self, field: str, op: str, value: Any) -> Query:
        return Query(self._client, self.id).where(field, op, value)


class FirestoreRESTClient:
    """Async Firestore client for one project's (default) database."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        self.project_id = project_id
        self.documents_root = f"projects/{project_id}/databases/(default)/documents"
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        # An injected client belongs to the caller.
        if self._owns_http:
            await self._http.aclose()

    async def _headers(self) -> dict[str, str]:
        if self._credentials is None:
            return {}
        token = await asyncio.to_thread(_fresh_token, self._credentials)
        return {"Authorization": f"Bearer {token}"}

    async def request(self, method: str, path: str, body: dict | None = None) -> Any:
        """Send one REST call. Returns parsed JSON, or None on 404."""
        response = await self._http.request(
            method,
            f"{self._base_url}/{path}",
            json=body,
            headers=await self._headers(),
        )
        if response.status_code == 404:
            return None
        if response.status_code == 409:
            raise DocumentExistsError(path)
        response.raise_for_status()
        if method == "DELETE" or not response.content:
            return {}
        return response.json()

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, collection_id)
