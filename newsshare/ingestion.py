from __future__ import annotations

import itertools
import logging
import re
import time
from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional, Tuple, Union

from .errors import StorageError, ValidationError
from .object_store import MediaStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE_BYTES = 50 * 1024 * 1024
GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream"}

_sequence = itertools.count(1)
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class MediaUpload:
    filename: str
    content: bytes
    content_type: Optional[str] = None


def validate_upload(
    upload: MediaUpload,
    kind: str,
    max_size: int = DEFAULT_MAX_SIZE_BYTES,
) -> None:
    if not upload.content:
        raise ValidationError(f"{kind.capitalize()} upload is empty")
    if len(upload.content) > max_size:
        raise ValidationError(f"{kind.capitalize()} exceeds {max_size} bytes")
    content_type = (upload.content_type or "").lower()
    # Clients that cannot sniff the file send the generic type; treat it as unspecified.
    if content_type in GENERIC_CONTENT_TYPES:
        return
    if not content_type.startswith(f"{kind}/"):
        raise ValidationError(f"Unsupported {kind} content type: {upload.content_type}")


def stored_name(filename: str) -> str:
    """Collision-free storage key: nanosecond clock, process-wide counter, sanitized basename."""
    base = PurePath(filename.replace("\\", "/")).name
    safe = _UNSAFE_CHARS.sub("_", base).strip("._") or "upload"
    return f"{time.time_ns()}-{next(_sequence)}-{safe}"


class MediaIngestor:
    """
    Validates uploaded media and writes it to a MediaStore, yielding the
    references persisted on a NewsRecord.
    """

    def __init__(self, store: MediaStore, max_size: int = DEFAULT_MAX_SIZE_BYTES) -> None:
        self.store = store
        self.max_size = max_size

    def validate(
        self,
        image: Optional[MediaUpload],
        video: Union[MediaUpload, str, None] = None,
    ) -> None:
        if image is None or not image.content:
            raise ValidationError("Image is required")
        validate_upload(image, "image", self.max_size)
        if isinstance(video, MediaUpload):
            validate_upload(video, "video", self.max_size)

    def ingest(
        self,
        image: Optional[MediaUpload],
        video: Union[MediaUpload, str, None] = None,
    ) -> Tuple[str, Optional[str]]:
        self.validate(image, video)
        image_key = stored_name(image.filename)
        image_url = self._store(image_key, image)
        if isinstance(video, MediaUpload):
            try:
                video_url: Optional[str] = self._store(stored_name(video.filename), video)
            except StorageError:
                self._discard(image_key)
                raise
        elif video is not None:
            # URL fields are persisted verbatim.
            video_url = video.strip() or None
        else:
            video_url = None
        return image_url, video_url

    def _store(self, key: str, upload: MediaUpload) -> str:
        return self.store.save(
            key,
            upload.content,
            upload.content_type or "application/octet-stream",
        )

    def _discard(self, key: str) -> None:
        # The record will not be created, so the already-stored image has no owner.
        try:
            self.store.delete(key)
        except StorageError as exc:
            logger.warning("Could not remove orphaned upload %s: %s", key, exc)
