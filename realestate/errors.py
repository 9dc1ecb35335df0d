"""
Exceptions shared by the store adapters, repositories and services.
"""

from __future__ import annotations


class DocumentNotFoundError(LookupError):
    """Raised by a document store when a partial update targets a missing document."""

    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} does not exist")
        self.collection = collection
        self.doc_id = doc_id


class RepositoryError(RuntimeError):
    """Generic wrapper for any failure coming out of the document store."""


class EntityNotFoundError(LookupError):
    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class DuplicateUserError(ValueError):
    def __init__(self, email: str):
        super().__init__(f"User already exists with email: {email}")
        self.email = email


class InvalidCredentialsError(Exception):
    """Unknown email, wrong password or disabled account."""
