from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings


load_dotenv()


class Settings(BaseSettings):
    APP_NAME: str = "NewsShare"
    VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    CORS_ORIGINS: List[str] = ["*"]

    # Public addresses
    API_BASE_URL: str = "http://localhost:5000"
    FRONTEND_BASE_URL: str = "http://localhost:3000/news"
    DEFAULT_IMAGE_URL: str = "http://localhost:5000/static/placeholder.png"
    DESCRIPTION_PREVIEW_LIMIT: int = 150

    # Record store
    STORE_BACKEND: str = "memory"  # "memory" or "sql"
    DATABASE_URL: str = "sqlite:///./news.db"
    SEED_PATH: Optional[str] = None

    # Media storage
    MEDIA_BACKEND: str = "local"  # "local" or "minio"
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024

    # MinIO settings
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_BUCKET: str = "news-media"
    MINIO_SECURE: bool = False
    MINIO_PUBLIC_URL: Optional[str] = None

    @property
    def MINIO_URL(self) -> str:
        if self.MINIO_PUBLIC_URL:
            return self.MINIO_PUBLIC_URL.rstrip("/")
        scheme = "https" if self.MINIO_SECURE else "http"
        return f"{scheme}://{self.MINIO_ENDPOINT}"

    class Config:
        case_sensitive = True
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
