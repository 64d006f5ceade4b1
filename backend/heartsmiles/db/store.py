"""
Document store abstraction and its Firestore implementation.

Repositories talk to a `DocumentStore`, never to Firestore directly, so
the pipeline and the HTTP layer can run against an in-memory store in
tests.  Every document returned by a store carries its `id`.
"""

from __future__ import annotations

from typing import Any, Protocol

from google.cloud import firestore
from google.oauth2 import service_account

from heartsmiles.core.config import Settings
from heartsmiles.core.logging import get_logger

logger = get_logger(__name__)


class DocumentStore(Protocol):
    """Collection-level create/read over a document database."""

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        """Insert a new document and return its store-assigned id."""
        ...

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Fetch one document by id, or None if it does not exist."""
        ...

    async def list(self, collection: str, **where: Any) -> list[dict[str, Any]]:
        """List documents, optionally filtered by field equality."""
        ...


class FirestoreDocumentStore:
    """DocumentStore backed by `google.cloud.firestore.AsyncClient`."""

    def __init__(self, client: firestore.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "FirestoreDocumentStore":
        """Build a client from the service-account fields in settings."""
        credentials = service_account.Credentials.from_service_account_info(
            settings.firebase_credentials_info
        )
        client = firestore.AsyncClient(
            project=settings.FIREBASE_PROJECT_ID,
            credentials=credentials,
        )
        logger.info("Firestore client initialised", project=settings.FIREBASE_PROJECT_ID)
        return cls(client)

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        _, doc_ref = await self._client.collection(collection).add(data)
        return doc_ref.id

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        snapshot = await self._client.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return {"id": snapshot.id, **snapshot.to_dict()}

    async def list(self, collection: str, **where: Any) -> list[dict[str, Any]]:
        query = self._client.collection(collection)
        for field_name, value in where.items():
            query = query.where(filter=firestore.FieldFilter(field_name, "==", value))

        documents = []
        async for snapshot in query.stream():
            documents.append({"id": snapshot.id, **snapshot.to_dict()})
        return documents

    def close(self) -> None:
        self._client.close()
