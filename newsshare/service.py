from __future__ import annotations

import logging
from typing import List, Optional, Union

from .errors import ValidationError
from .ingestion import MediaIngestor, MediaUpload
from .models import NewsRecord
from .preview import PreviewRenderer
from .repositories import NewsRepository

logger = logging.getLogger(__name__)


class NewsService:
    """
    Coordinates media ingestion, the record store and preview rendering.
    """

    def __init__(
        self,
        repository: NewsRepository,
        ingestor: MediaIngestor,
        renderer: PreviewRenderer,
    ) -> None:
        self.repository = repository
        self.ingestor = ingestor
        self.renderer = renderer

    def create_news(
        self,
        *,
        title: Optional[str],
        description: Optional[str],
        image: Optional[MediaUpload],
        video: Union[MediaUpload, str, None] = None,
    ) -> NewsRecord:
        # Reject bad text before any media reaches the backend; ingest validates the media.
        if not title or not title.strip():
            raise ValidationError("Title is required")
        if not description or not description.strip():
            raise ValidationError("Description is required")
        image_url, video_url = self.ingestor.ingest(image, video)
        record = self.repository.create(title, description, image_url, video_url)
        logger.info("Created news %s image=%s video=%s", record.id, image_url, video_url)
        return record

    def list_news(self) -> List[NewsRecord]:
        return self.repository.list_all()

    def get_news(self, news_id: str) -> NewsRecord:
        return self.repository.get(news_id)

    def render_preview(self, news_id: str) -> str:
        return self.renderer.render(self.repository.get(news_id))
