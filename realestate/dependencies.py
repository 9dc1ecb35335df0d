"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

import firebase_admin
from fastapi import Depends
from firebase_admin import credentials, firestore, storage

from realestate.config import get_settings
from realestate.db import DocumentStore, FirestoreDocumentStore, InMemoryDocumentStore
from realestate.media import MediaService
from realestate.repository import (
    ApartmentRepository,
    BuyerRepository,
    FloorRepository,
    PictureRepository,
    UserRepository,
)
from realestate.services import (
    ApartmentService,
    BuyerService,
    FloorService,
    PictureService,
)
from realestate.storage import GcsStorageClient, InMemoryStorageClient, StorageClient
from realestate.users import UserService

logger = logging.getLogger(__name__)

_firebase_app: firebase_admin.App | None = None
_document_store: DocumentStore | None = None
_storage_client: StorageClient | None = None


def _use_in_memory() -> bool:
    return get_settings().uses_in_memory_backends


def get_firebase_app() -> firebase_admin.App:
    global _firebase_app
    if _firebase_app:
        return _firebase_app

    settings = get_settings()
    if settings.firebase_credentials_file:
        cred = credentials.Certificate(settings.firebase_credentials_file)
    else:
        cred = credentials.ApplicationDefault()
    options = {"projectId": settings.firebase_project_id}
    if settings.firebase_storage_bucket:
        options["storageBucket"] = settings.firebase_storage_bucket
    _firebase_app = firebase_admin.initialize_app(cred, options)
    logger.info("Initialized Firebase app for project %s", settings.firebase_project_id)
    return _firebase_app


def get_document_store() -> DocumentStore:
    """
    Return a singleton document store so in-memory state persists across requests.
    """
    global _document_store
    if _document_store:
        return _document_store

    if _use_in_memory():
        _document_store = InMemoryDocumentStore()
    else:
        _document_store = FirestoreDocumentStore(firestore.client(get_firebase_app()))
    return _document_store


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if _use_in_memory() or not settings.firebase_storage_bucket:
        _storage_client = InMemoryStorageClient()
    else:
        _storage_client = GcsStorageClient(
            storage.bucket(settings.firebase_storage_bucket, app=get_firebase_app())
        )
    return _storage_client


# Services are cheap wrappers, built per request on top of the singletons.


def get_media_service(
    storage_client: StorageClient = Depends(get_storage_client),
) -> MediaService:
    return MediaService(
        storage_client, signed_url_expiry_days=get_settings().signed_url_expiry_days
    )


def get_floor_service(
    store: DocumentStore = Depends(get_document_store),
    media: MediaService = Depends(get_media_service),
) -> FloorService:
    return FloorService(FloorRepository(store), media)


def get_apartment_service(
    store: DocumentStore = Depends(get_document_store),
    media: MediaService = Depends(get_media_service),
) -> ApartmentService:
    return ApartmentService(ApartmentRepository(store), media)


def get_buyer_service(store: DocumentStore = Depends(get_document_store)) -> BuyerService:
    return BuyerService(BuyerRepository(store))


def get_picture_service(
    store: DocumentStore = Depends(get_document_store),
    media: MediaService = Depends(get_media_service),
) -> PictureService:
    return PictureService(PictureRepository(store), media)


def get_user_service(store: DocumentStore = Depends(get_document_store)) -> UserService:
    return UserService(UserRepository(store))
