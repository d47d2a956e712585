from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from ..errors import ValidationError
from ..models import NewsRecord
from ..sql_models import NewsRow
from .base import NewsRepository


class SqlNewsRepository(NewsRepository):
    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def add(self, record: NewsRecord) -> None:
        with self.session_factory() as db:
            db.add(
                NewsRow(
                    id=record.id,
                    title=record.title,
                    description=record.description,
                    image_url=record.image_url,
                    video_url=record.video_url,
                    created_at=_as_utc(record.created_at),
                    updated_at=_as_utc(record.updated_at),
                )
            )
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise ValidationError(f"News {record.id} already exists") from exc

    def list_all(self) -> List[NewsRecord]:
        stmt = select(NewsRow).order_by(NewsRow.created_at.desc(), NewsRow.pk.desc())
        with self.session_factory() as db:
            return [_to_record(row) for row in db.scalars(stmt).all()]

    def count(self) -> int:
        with self.session_factory() as db:
            return db.scalar(select(func.count()).select_from(NewsRow)) or 0

    def _find(self, news_id: str) -> Optional[NewsRecord]:
        with self.session_factory() as db:
            row = db.scalars(select(NewsRow).where(NewsRow.id == news_id)).first()
            return _to_record(row) if row else None


def _to_record(row: NewsRow) -> NewsRecord:
    return NewsRecord(
        id=row.id,
        title=row.title,
        description=row.description,
        image_url=row.image_url,
        video_url=row.video_url,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite keeps only the wall clock, so values go in and come out as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
