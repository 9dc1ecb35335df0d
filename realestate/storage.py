"""
Storage abstraction for Firebase Cloud Storage and in-memory testing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Protocol
from urllib.parse import quote

from google.api_core import exceptions as gcloud_exceptions

from realestate.constants import PUBLIC_STORAGE_BASE_URL


@dataclass
class BlobInfo:
    name: str
    size: int
    content_type: Optional[str]
    created_at: Optional[datetime]


class StorageClient(Protocol):
    """Defines the operations the services need from object storage."""

    bucket_name: str

    def upload_bytes(self, path: str, data: bytes, content_type: Optional[str]) -> None:
        ...

    def copy(self, src_path: str, dest_path: str) -> None:
        ...

    def delete(self, path: str) -> bool:
        ...

    def get_blob(self, path: str) -> Optional[BlobInfo]:
        ...

    def list_blobs(self, prefix: str) -> List[BlobInfo]:
        ...

    def signed_url(self, path: str, expires_in: timedelta) -> str:
        ...

    def public_url(self, path: str) -> str:
        ...


@dataclass
class _StoredObject:
    data: bytes
    content_type: Optional[str]
    created_at: datetime


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    bucket_name: str = "in-memory-bucket"
    base_url: str = PUBLIC_STORAGE_BASE_URL
    stored_objects: Dict[str, _StoredObject] = field(default_factory=dict)

    def reset(self) -> None:
        self.stored_objects.clear()

    def upload_bytes(self, path: str, data: bytes, content_type: Optional[str]) -> None:
        self.stored_objects[path] = _StoredObject(
            data=bytes(data),
            content_type=content_type,
            created_at=datetime.now(timezone.utc),
        )

    def copy(self, src_path: str, dest_path: str) -> None:
        stored = self.stored_objects.get(src_path)
        if stored is None:
            raise FileNotFoundError(src_path)
        self.upload_bytes(dest_path, stored.data, stored.content_type)

    def delete(self, path: str) -> bool:
        return self.stored_objects.pop(path, None) is not None

    def _info(self, path: str, stored: _StoredObject) -> BlobInfo:
        return BlobInfo(
            name=path,
            size=len(stored.data),
            content_type=stored.content_type,
            created_at=stored.created_at,
        )

    def get_blob(self, path: str) -> Optional[BlobInfo]:
        stored = self.stored_objects.get(path)
        return self._info(path, stored) if stored else None

    def list_blobs(self, prefix: str) -> List[BlobInfo]:
        return [
            self._info(path, stored)
            for path, stored in self.stored_objects.items()
            if path.startswith(prefix)
        ]

    def signed_url(self, path: str, expires_in: timedelta) -> str:
        expires = int(expires_in.total_seconds())
        return f"{self.base_url}/{self.bucket_name}/{quote(path)}?op=get&expires={expires}"

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{self.bucket_name}/{path}"


class GcsStorageClient:
    """
    Cloud Storage client backed by a firebase_admin bucket handle.
    """

    def __init__(self, bucket):
        self._bucket = bucket
        self.bucket_name = bucket.name

    def upload_bytes(self, path: str, data: bytes, content_type: Optional[str]) -> None:
        blob = self._bucket.blob(path)
        blob.upload_from_string(
            data, content_type=content_type or "application/octet-stream"
        )

    def copy(self, src_path: str, dest_path: str) -> None:
        self._bucket.copy_blob(self._bucket.blob(src_path), self._bucket, dest_path)

    def delete(self, path: str) -> bool:
        try:
            self._bucket.blob(path).delete()
        except gcloud_exceptions.NotFound:
            return False
        return True

    def _info(self, blob) -> BlobInfo:
        return BlobInfo(
            name=blob.name,
            size=blob.size or 0,
            content_type=blob.content_type,
            created_at=blob.time_created,
        )

    def get_blob(self, path: str) -> Optional[BlobInfo]:
        blob = self._bucket.get_blob(path)
        return self._info(blob) if blob is not None else None

    def list_blobs(self, prefix: str) -> List[BlobInfo]:
        return [self._info(blob) for blob in self._bucket.list_blobs(prefix=prefix)]

    def signed_url(self, path: str, expires_in: timedelta) -> str:
        return self._bucket.blob(path).generate_signed_url(
            expiration=expires_in, version="v4", method="GET"
        )

    def public_url(self, path: str) -> str:
        return f"{PUBLIC_STORAGE_BASE_URL}/{self.bucket_name}/{path}"
