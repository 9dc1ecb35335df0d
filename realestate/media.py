"""
Binary asset handling on top of the storage client: generic media uploads,
3D-model assets referenced by entities, and the per-floor image folders.
"""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from urllib.parse import unquote, urlparse

from realestate.constants import (
    FLOOR_IMAGE_EXTENSIONS,
    FLOOR_IMAGE_PREFIX,
    IMAGE_EXTENSIONS,
    IMAGES_FOLDER,
    MODEL_MEDIA_TYPE,
    MODELS_FOLDER,
)
from realestate.storage import BlobInfo, StorageClient

logger = logging.getLogger(__name__)


@dataclass
class UploadedFile:
    """Framework-independent view of a multipart file part."""

    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.content


@dataclass
class FloorImageInfo:
    name: str
    full_path: str
    download_url: str
    size: int
    content_type: Optional[str]
    upload_date: datetime
    is_image: bool


def folder_for_type(media_type: str) -> str:
    return MODELS_FOLDER if media_type == MODEL_MEDIA_TYPE else IMAGES_FOLDER


def generate_unique_filename(original_filename: str) -> str:
    """Random identifier plus the original extension (if any)."""
    _, extension = os.path.splitext(original_filename or "")
    return f"{uuid.uuid4().hex}{extension}"


def _check_file_name(file_name: str) -> str:
    if not file_name or "/" in file_name or "\\" in file_name or ".." in file_name:
        raise ValueError(f"Invalid file name: {file_name!r}")
    return file_name


def _has_extension(name: str, extensions) -> bool:
    return name.lower().endswith(tuple(extensions))


class MediaService:
    def __init__(self, storage: StorageClient, signed_url_expiry_days: int = 7):
        self.storage = storage
        self.signed_url_expiry = timedelta(days=signed_url_expiry_days)

    # Generic media, namespaced by folder.

    def media_path(self, media_type: str, file_name: str) -> str:
        return f"{folder_for_type(media_type)}/{_check_file_name(file_name)}"

    def upload_file(self, file: UploadedFile, folder: str) -> str:
        """Uploads under a collision-free name and returns a signed URL."""
        path = f"{folder}/{generate_unique_filename(file.filename)}"
        self.storage.upload_bytes(path, file.content, file.content_type)
        return self.storage.signed_url(path, self.signed_url_expiry)

    def delete_file(self, path: str) -> bool:
        return self.storage.delete(path)

    def get_signed_url(self, path: str) -> Optional[str]:
        if self.storage.get_blob(path) is None:
            return None
        return self.storage.signed_url(path, self.signed_url_expiry)

    def file_exists(self, path: str) -> bool:
        return self.storage.get_blob(path) is not None

    # Assets referenced by URL from an entity (3D models, pictures).

    def upload_asset(self, file: UploadedFile) -> str:
        """Uploads at the bucket root and returns the public URL."""
        path = f"{uuid.uuid4().hex}_{os.path.basename(file.filename or 'upload')}"
        self.storage.upload_bytes(path, file.content, file.content_type)
        return self.storage.public_url(path)

    def path_from_url(self, url: str) -> str:
        """Recovers the object path from a public or signed URL."""
        path = unquote(urlparse(url).path).lstrip("/")
        bucket_prefix = f"{self.storage.bucket_name}/"
        if path.startswith(bucket_prefix):
            return path[len(bucket_prefix):]
        return path.rsplit("/", 1)[-1]

    def delete_by_url(self, url: str) -> bool:
        return self.storage.delete(self.path_from_url(url))

    def delete_by_url_quietly(self, url: str) -> None:
        """Best-effort cleanup: a missing blob or a storage error is only logged."""
        try:
            if not self.delete_by_url(url):
                logger.info("Blob for %s already absent", url)
        except Exception as exc:
            logger.warning("Failed to delete blob for %s: %s", url, exc)

    # Floor images live under floors/{floor_id}/.

    def _floor_path(self, floor_id: str, file_name: str) -> str:
        return f"{FLOOR_IMAGE_PREFIX}/{floor_id}/{_check_file_name(file_name)}"

    def _floor_image_info(self, blob: BlobInfo) -> FloorImageInfo:
        return FloorImageInfo(
            name=blob.name.rsplit("/", 1)[-1],
            full_path=blob.name,
            download_url=self.storage.signed_url(blob.name, self.signed_url_expiry),
            size=blob.size,
            content_type=blob.content_type,
            upload_date=blob.created_at or datetime.now(timezone.utc),
            is_image=_has_extension(blob.name, IMAGE_EXTENSIONS),
        )

    def list_floor_images(self, floor_id: str) -> List[str]:
        prefix = f"{FLOOR_IMAGE_PREFIX}/{floor_id}/"
        names = sorted(
            blob.name
            for blob in self.storage.list_blobs(prefix)
            if _has_extension(blob.name, FLOOR_IMAGE_EXTENSIONS)
        )
        return [self.storage.signed_url(name, self.signed_url_expiry) for name in names]

    def list_floor_image_details(self, floor_id: str) -> List[FloorImageInfo]:
        prefix = f"{FLOOR_IMAGE_PREFIX}/{floor_id}/"
        infos = [
            self._floor_image_info(blob)
            for blob in self.storage.list_blobs(prefix)
            if _has_extension(blob.name, IMAGE_EXTENSIONS)
        ]
        return sorted(infos, key=lambda info: info.name)

    def get_floor_image_info(self, floor_id: str, file_name: str) -> Optional[FloorImageInfo]:
        blob = self.storage.get_blob(self._floor_path(floor_id, file_name))
        return self._floor_image_info(blob) if blob is not None else None

    def upload_floor_image(
        self, floor_id: str, file: UploadedFile, custom_file_name: Optional[str] = None
    ) -> str:
        path = self._floor_path(floor_id, custom_file_name or file.filename)
        self.storage.upload_bytes(path, file.content, file.content_type)
        return self.storage.public_url(path)

    def delete_floor_image(self, floor_id: str, file_name: str) -> bool:
        return self.storage.delete(self._floor_path(floor_id, file_name))

    def rename_floor_image(self, floor_id: str, old_file_name: str, new_file_name: str) -> bool:
        """
        Copy then delete. Not atomic: a failure between the two steps leaves
        both objects in place and must be reconciled by hand.
        """
        old_path = self._floor_path(floor_id, old_file_name)
        new_path = self._floor_path(floor_id, new_file_name)
        if self.storage.get_blob(old_path) is None:
            return False
        self.storage.copy(old_path, new_path)
        self.storage.delete(old_path)
        return True
