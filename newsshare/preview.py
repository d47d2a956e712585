from __future__ import annotations

import logging
import re
from typing import Any, Optional

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup, escape

from .config import Settings
from .errors import RenderError
from .models import NewsRecord

logger = logging.getLogger(__name__)

DESCRIPTION_LIMIT = 150
ELLIPSIS = "..."

_ABSOLUTE_URL = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*:)?//")


def truncate_description(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def resolve_media_url(ref: Optional[str], base_url: str, default: Optional[str] = None) -> Optional[str]:
    """Absolute URL for a stored media reference; already-absolute refs pass through unchanged."""
    if not ref:
        return default
    if _ABSOLUTE_URL.match(ref):
        return ref
    return f"{base_url.rstrip('/')}/{ref.lstrip('/')}"


def canonical_page_url(frontend_base_url: str, record_id: str) -> str:
    return f"{frontend_base_url.rstrip('/')}/{record_id}"


def escape_attribute(value: Any) -> Markup:
    """Escape for attribute context, spelling double quotes as ``&quot;``."""
    if isinstance(value, Markup):
        return value
    if value is None:
        return Markup("")
    return Markup(str(escape(value)).replace("&#34;", "&quot;"))


class PreviewRenderer:
    """
    Builds the Open Graph / Twitter card document for one record. Browsers are
    redirected to the frontend page; crawlers read the head tags.
    """

    def __init__(
        self,
        api_base_url: str,
        frontend_base_url: str,
        default_image_url: str,
        description_limit: int = DESCRIPTION_LIMIT,
        site_name: str = "NewsShare",
    ) -> None:
        self.api_base_url = api_base_url
        self.frontend_base_url = frontend_base_url
        self.default_image_url = default_image_url
        self.description_limit = description_limit
        self.site_name = site_name
        self.env = Environment(
            loader=PackageLoader("newsshare", "templates"),
            autoescape=select_autoescape(["html"]),
            finalize=escape_attribute,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PreviewRenderer":
        return cls(
            api_base_url=settings.API_BASE_URL,
            frontend_base_url=settings.FRONTEND_BASE_URL,
            default_image_url=settings.DEFAULT_IMAGE_URL,
            description_limit=settings.DESCRIPTION_PREVIEW_LIMIT,
            site_name=settings.APP_NAME,
        )

    def context(self, record: NewsRecord) -> dict:
        return {
            "site_name": self.site_name,
            "title": record.title,
            "description": truncate_description(record.description, self.description_limit),
            "image_url": resolve_media_url(record.image_url, self.api_base_url, self.default_image_url),
            "video_url": resolve_media_url(record.video_url, self.api_base_url),
            "page_url": canonical_page_url(self.frontend_base_url, record.id),
        }

    def render(self, record: NewsRecord) -> str:
        try:
            template = self.env.get_template("preview.html")
            return template.render(**self.context(record))
        except Exception as exc:
            record_id = getattr(record, "id", None)
            logger.error("Preview rendering failed for %s: %s", record_id, exc, exc_info=True)
            raise RenderError(f"Failed to render preview for {record_id}") from exc
