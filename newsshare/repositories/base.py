from __future__ import annotations

import re
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from ..errors import NotFoundError, ValidationError
from ..models import NewsRecord


class NewsRepository(ABC):
    """
    Repository abstraction for news records; can be backed by SQL or in-memory.
    """

    def create(
        self,
        title: str,
        description: str,
        image_url: Optional[str] = None,
        video_url: Optional[str] = None,
    ) -> NewsRecord:
        if not title or not title.strip():
            raise ValidationError("Title is required")
        if not description or not description.strip():
            raise ValidationError("Description is required")
        record = NewsRecord(
            title=title,
            description=description,
            image_url=image_url,
            video_url=video_url,
        )
        self.add(record)
        return record

    def get(self, news_id: str) -> NewsRecord:
        record = self._find(normalize_id(news_id))
        if record is None:
            raise NotFoundError(f"News {news_id} not found")
        return record

    def exists(self, news_id: str) -> bool:
        return self._find(normalize_id(news_id)) is not None

    @abstractmethod
    def add(self, record: NewsRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[NewsRecord]:
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def _find(self, news_id: str) -> Optional[NewsRecord]:
        raise NotImplementedError


_LEGACY_ID = re.compile(r"[0-9a-f]{24}")


def normalize_id(news_id: str) -> str:
    """Return the canonical form of ``news_id`` or raise NotFoundError if it is malformed.

    Ids are UUIDs; 24-hex document-store ids from imported legacy records are also accepted.
    """
    candidate = str(news_id).strip().lower()
    if _LEGACY_ID.fullmatch(candidate):
        return candidate
    try:
        return str(uuid.UUID(candidate))
    except ValueError as exc:
        raise NotFoundError(f"News {news_id} not found") from exc
