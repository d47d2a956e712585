from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path

from minio import Minio

from .config import Settings
from .errors import StorageError

logger = logging.getLogger(__name__)


class MediaStore(ABC):
    """Durable home for uploaded media; returns a reference that resolves to the stored object."""

    @abstractmethod
    def save(self, key: str, content: bytes, content_type: str = "application/octet-stream") -> str:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        raise NotImplementedError


class LocalMediaStore(MediaStore):
    """Writes media under a directory that the app serves as static files."""

    def __init__(self, upload_dir: str | Path, url_prefix: str = "/uploads") -> None:
        self.upload_dir = Path(upload_dir)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save(self, key: str, content: bytes, content_type: str = "application/octet-stream") -> str:
        target = self.upload_dir / key
        try:
            # "x" mode refuses to overwrite an existing upload.
            with target.open("xb") as f:
                f.write(content)
        except OSError as exc:
            logger.error("Failed to write upload %s: %s", target, exc, exc_info=True)
            raise StorageError(f"Failed to store media: {exc}") from exc
        logger.info("Stored %s bytes at %s", len(content), target)
        return f"{self.url_prefix}/{key}"

    def delete(self, key: str) -> None:
        target = self.upload_dir / key
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to remove media: {exc}") from exc
        logger.info("Removed %s", target)


class MinioMediaStore(MediaStore):
    """Stores media in a MinIO/S3 bucket and returns the object's public URL."""

    def __init__(self, client: Minio, bucket_name: str, public_url: str) -> None:
        self.client = client
        self.bucket_name = bucket_name
        self.public_url = public_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "MinioMediaStore":
        client = Minio(
            settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SECURE,
        )
        return cls(client, settings.MINIO_BUCKET, settings.MINIO_URL)

    def save(self, key: str, content: bytes, content_type: str = "application/octet-stream") -> str:
        try:
            if not self.client.bucket_exists(self.bucket_name):
                self.client.make_bucket(self.bucket_name)
            self.client.put_object(
                self.bucket_name,
                key,
                BytesIO(content),
                len(content),
                content_type=content_type,
            )
        except Exception as exc:
            logger.error("Media host rejected %s/%s: %s", self.bucket_name, key, exc, exc_info=True)
            raise StorageError(f"Failed to store media: {exc}") from exc
        logger.info("Stored %s bytes at %s/%s", len(content), self.bucket_name, key)
        return f"{self.public_url}/{self.bucket_name}/{key}"

    def delete(self, key: str) -> None:
        try:
            self.client.remove_object(self.bucket_name, key)
        except Exception as exc:
            raise StorageError(f"Failed to remove media: {exc}") from exc
        logger.info("Removed %s/%s", self.bucket_name, key)


def build_media_store(settings: Settings) -> MediaStore:
    if settings.MEDIA_BACKEND == "minio":
        return MinioMediaStore.from_settings(settings)
    return LocalMediaStore(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)
