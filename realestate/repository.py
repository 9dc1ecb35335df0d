"""
Generic entity repository over a document store collection, plus the
per-collection specializations.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from realestate.constants import (
    APARTMENTS_COLLECTION,
    BUYERS_COLLECTION,
    FLOORS_COLLECTION,
    PICTURES_COLLECTION,
    USERS_COLLECTION,
)
from realestate.db import DocumentStore
from realestate.errors import DocumentNotFoundError, EntityNotFoundError, RepositoryError
from realestate.models import (
    Apartment,
    Buyer,
    Floor,
    Picture,
    User,
    encode_value,
    from_document,
    snake_to_camel,
    to_document,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Never written by update(); owned by save().
_IMMUTABLE_FIELDS = ("id", "createdAt")


class EntityRepository(Generic[T]):
    """Maps one entity type onto one named collection."""

    def __init__(self, store: DocumentStore, collection: str, entity_class: Type[T]):
        self.store = store
        self.collection = collection
        self.entity_class = entity_class

    def save(self, entity: T) -> str:
        """Persists every field under a freshly generated id and returns the id."""
        try:
            doc_id = self.store.new_id(self.collection)
            data = to_document(entity)
            data["id"] = doc_id
            data["createdAt"] = SERVER_TIMESTAMP
            data["updatedAt"] = SERVER_TIMESTAMP
            self.store.set(self.collection, doc_id, data)
            return doc_id
        except Exception as exc:
            logger.error("Error saving document to %s: %s", self.collection, exc)
            raise RepositoryError(f"Error saving document to {self.collection}") from exc

    def update(self, entity_id: str, entity: T) -> None:
        """Merges the non-None fields of `entity` into the stored document."""
        data = to_document(entity, skip_none=True)
        for key in _IMMUTABLE_FIELDS:
            data.pop(key, None)
        data["updatedAt"] = SERVER_TIMESTAMP
        try:
            self.store.update(self.collection, entity_id, data)
        except DocumentNotFoundError as exc:
            raise EntityNotFoundError(self.entity_class.__name__, entity_id) from exc
        except Exception as exc:
            logger.error(
                "Error updating document %s/%s: %s", self.collection, entity_id, exc
            )
            raise RepositoryError(f"Error updating document {entity_id}") from exc

    def delete(self, entity_id: str) -> None:
        try:
            self.store.delete(self.collection, entity_id)
        except Exception as exc:
            logger.error(
                "Error deleting document %s/%s: %s", self.collection, entity_id, exc
            )
            raise RepositoryError(f"Error deleting document {entity_id}") from exc

    def find_by_id(self, entity_id: str) -> Optional[T]:
        try:
            data = self.store.get(self.collection, entity_id)
        except Exception as exc:
            logger.error(
                "Error finding document %s/%s: %s", self.collection, entity_id, exc
            )
            raise RepositoryError(f"Error finding document {entity_id}") from exc
        if data is None:
            return None
        data.setdefault("id", entity_id)
        return from_document(self.entity_class, data)

    def find_all(self) -> List[T]:
        try:
            documents = self.store.list(self.collection)
        except Exception as exc:
            logger.error("Error finding all documents in %s: %s", self.collection, exc)
            raise RepositoryError(
                f"Error finding all documents in {self.collection}"
            ) from exc
        return [from_document(self.entity_class, data) for data in documents]

    def find_by_field(self, field: str, value: Any) -> List[T]:
        """Equality filter on one field, named in snake_case."""
        try:
            documents = self.store.where_equal(
                self.collection, snake_to_camel(field), encode_value(value)
            )
        except Exception as exc:
            logger.error(
                "Error finding documents by field in %s: %s", self.collection, exc
            )
            raise RepositoryError(
                f"Error finding documents by {field} in {self.collection}"
            ) from exc
        return [from_document(self.entity_class, data) for data in documents]


class FloorRepository(EntityRepository[Floor]):
    def __init__(self, store: DocumentStore):
        super().__init__(store, FLOORS_COLLECTION, Floor)


class ApartmentRepository(EntityRepository[Apartment]):
    def __init__(self, store: DocumentStore):
        super().__init__(store, APARTMENTS_COLLECTION, Apartment)


class BuyerRepository(EntityRepository[Buyer]):
    def __init__(self, store: DocumentStore):
        super().__init__(store, BUYERS_COLLECTION, Buyer)


class PictureRepository(EntityRepository[Picture]):
    def __init__(self, store: DocumentStore):
        super().__init__(store, PICTURES_COLLECTION, Picture)


class UserRepository(EntityRepository[User]):
    def __init__(self, store: DocumentStore):
        super().__init__(store, USERS_COLLECTION, User)

    def find_by_email(self, email: str) -> Optional[User]:
        users = self.find_by_field("email", email)
        return users[0] if users else None
