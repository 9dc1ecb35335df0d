"""
Document store abstraction for Firestore and an in-memory test implementation.
"""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from google.api_core import exceptions as gcloud_exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from realestate.errors import DocumentNotFoundError


class DocumentStore(Protocol):
    """Operations the repositories need from a collection/document database."""

    def new_id(self, collection: str) -> str:
        ...

    def set(self, collection: str, doc_id: str, data: dict) -> None:
        ...

    def update(self, collection: str, doc_id: str, data: dict) -> None:
        ...

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        ...

    def delete(self, collection: str, doc_id: str) -> None:
        ...

    def list(self, collection: str, limit: Optional[int] = None) -> List[dict]:
        ...

    def where_equal(self, collection: str, field: str, value: Any) -> List[dict]:
        ...

    def collection_exists(self, collection: str) -> bool:
        ...


class InMemoryDocumentStore:
    """Simple in-memory document store for development and tests."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, dict]] = {}

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.collections.clear()

    def _resolve(self, data: dict) -> dict:
        now = datetime.now(timezone.utc)
        return {
            key: now if value is SERVER_TIMESTAMP else copy.deepcopy(value)
            for key, value in data.items()
        }

    def new_id(self, collection: str) -> str:
        return uuid.uuid4().hex[:20]

    def set(self, collection: str, doc_id: str, data: dict) -> None:
        self.collections.setdefault(collection, {})[doc_id] = self._resolve(data)

    def update(self, collection: str, doc_id: str, data: dict) -> None:
        documents = self.collections.get(collection, {})
        if doc_id not in documents:
            raise DocumentNotFoundError(collection, doc_id)
        documents[doc_id].update(self._resolve(data))

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        document = self.collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    def delete(self, collection: str, doc_id: str) -> None:
        self.collections.get(collection, {}).pop(doc_id, None)

    def list(self, collection: str, limit: Optional[int] = None) -> List[dict]:
        documents = [
            copy.deepcopy(doc) for doc in self.collections.get(collection, {}).values()
        ]
        return documents[:limit] if limit is not None else documents

    def where_equal(self, collection: str, field: str, value: Any) -> List[dict]:
        return [doc for doc in self.list(collection) if doc.get(field) == value]

    def collection_exists(self, collection: str) -> bool:
        return bool(self.collections.get(collection))


class FirestoreDocumentStore:
    """
    Firestore-backed implementation. Every call blocks until the RPC completes.
    """

    def __init__(self, client):
        self._client = client

    def _doc(self, collection: str, doc_id: str):
        return self._client.collection(collection).document(doc_id)

    def new_id(self, collection: str) -> str:
        return self._client.collection(collection).document().id

    def set(self, collection: str, doc_id: str, data: dict) -> None:
        self._doc(collection, doc_id).set(data)

    def update(self, collection: str, doc_id: str, data: dict) -> None:
        try:
            self._doc(collection, doc_id).update(data)
        except gcloud_exceptions.NotFound as exc:
            raise DocumentNotFoundError(collection, doc_id) from exc

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        snapshot = self._doc(collection, doc_id).get()
        return snapshot.to_dict() if snapshot.exists else None

    def delete(self, collection: str, doc_id: str) -> None:
        self._doc(collection, doc_id).delete()

    def list(self, collection: str, limit: Optional[int] = None) -> List[dict]:
        query = self._client.collection(collection)
        if limit is not None:
            query = query.limit(limit)
        return [snapshot.to_dict() for snapshot in query.stream()]

    def where_equal(self, collection: str, field: str, value: Any) -> List[dict]:
        query = self._client.collection(collection).where(
            filter=FieldFilter(field, "==", value)
        )
        return [snapshot.to_dict() for snapshot in query.stream()]

    def collection_exists(self, collection: str) -> bool:
        # Firestore has no explicit collections; one document is enough.
        return bool(self.list(collection, limit=1))
