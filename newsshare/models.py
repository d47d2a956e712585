from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


# Historical field names seen in stored documents, in order of preference.
_LEGACY_KEYS = {
    "id": ("id", "_id"),
    "image_url": ("image_url", "imageUrl", "image"),
    "video_url": ("video_url", "videoUrl", "video"),
    "created_at": ("created_at", "createdAt"),
    "updated_at": ("updated_at", "updatedAt"),
}


@dataclass(frozen=True)
class NewsRecord:
    title: str
    description: str
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        # Records are never mutated, so the update stamp is the creation stamp.
        if self.updated_at is None:
            object.__setattr__(self, "updated_at", self.created_at)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "image_url": self.image_url,
            "video_url": self.video_url,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NewsRecord":
        """Build a record from a stored document in any historical schema.

        Accepts document-store exports (``_id``, ``imageUrl``, ``createdAt``)
        as well as the canonical snake_case shape.
        """
        record_id = _pick(data, "id")
        if isinstance(record_id, Mapping):
            # Extended JSON exports wrap ids as {"$oid": "..."}.
            record_id = record_id.get("$oid")
        created_at = _parse_timestamp(_pick(data, "created_at")) or utcnow()
        updated_at = _parse_timestamp(_pick(data, "updated_at"))
        return cls(
            id=str(record_id) if record_id else new_id(),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            image_url=_blank_to_none(_pick(data, "image_url")),
            video_url=_blank_to_none(_pick(data, "video_url")),
            created_at=created_at,
            updated_at=updated_at,
        )


def _pick(data: Mapping[str, Any], name: str) -> Any:
    for key in _LEGACY_KEYS[name]:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, Mapping):
        value = value.get("$date")
    if isinstance(value, (int, float)):
        # Epoch milliseconds.
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
