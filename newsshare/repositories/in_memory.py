from __future__ import annotations

import threading
from typing import Dict, List, Optional

from ..errors import ValidationError
from ..models import NewsRecord
from .base import NewsRepository


class InMemoryNewsRepository(NewsRepository):
    def __init__(self) -> None:
        self._records: Dict[str, NewsRecord] = {}
        self._order: Dict[str, int] = {}
        self._seq = 0
        self._lock = threading.Lock()

    def add(self, record: NewsRecord) -> None:
        with self._lock:
            if record.id in self._records:
                raise ValidationError(f"News {record.id} already exists")
            self._seq += 1
            self._records[record.id] = record
            self._order[record.id] = self._seq

    def list_all(self) -> List[NewsRecord]:
        with self._lock:
            rows = list(self._records.values())
            return sorted(rows, key=lambda r: (r.created_at, self._order[r.id]), reverse=True)

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def _find(self, news_id: str) -> Optional[NewsRecord]:
        with self._lock:
            return self._records.get(news_id)
