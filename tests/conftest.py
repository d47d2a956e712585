from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from newsshare.config import Settings
from newsshare.main import create_app
from newsshare.models import NewsRecord
from newsshare.preview import PreviewRenderer

API_BASE_URL = "http://api.test"
FRONTEND_BASE_URL = "http://front.test/news"
DEFAULT_IMAGE_URL = "http://api.test/static/default.png"


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        API_BASE_URL=API_BASE_URL,
        FRONTEND_BASE_URL=FRONTEND_BASE_URL,
        DEFAULT_IMAGE_URL=DEFAULT_IMAGE_URL,
        STORE_BACKEND="memory",
        MEDIA_BACKEND="local",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        UPLOAD_URL_PREFIX="/uploads",
        SEED_PATH=None,
    )


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def renderer() -> PreviewRenderer:
    return PreviewRenderer(
        api_base_url=API_BASE_URL,
        frontend_base_url=FRONTEND_BASE_URL,
        default_image_url=DEFAULT_IMAGE_URL,
    )


@pytest.fixture()
def make_record():
    base_time = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def _make(**overrides) -> NewsRecord:
        fields = {
            "id": "3f0f5c9e-6f7c-4a55-9d7e-1b2f8e0c4d11",
            "title": "Breaking",
            "description": "City council approves new park.",
            "image_url": "/uploads/1700000000-1-a.jpg",
            "video_url": None,
            "created_at": base_time,
        }
        fields.update(overrides)
        if isinstance(fields["created_at"], int):
            fields["created_at"] = base_time + timedelta(minutes=fields["created_at"])
        return NewsRecord(**fields)

    return _make
