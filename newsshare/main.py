from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from .api import register_routers
from .config import Settings, get_settings
from .database import build_engine, build_session_factory, init_db
from .errors import NotFoundError, RenderError, StorageError, ValidationError
from .ingestion import MediaIngestor
from .object_store import LocalMediaStore, build_media_store
from .preview import PreviewRenderer
from .repositories import InMemoryNewsRepository, NewsRepository, SqlNewsRepository
from .seed import load_legacy_documents
from .service import NewsService

log = logging.getLogger("newsshare")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format="%(asctime)s %(levelname)s %(message)s")


def build_repository(settings: Settings) -> NewsRepository:
    if settings.STORE_BACKEND == "sql":
        engine = build_engine(settings.DATABASE_URL)
        init_db(engine)
        return SqlNewsRepository(build_session_factory(engine))
    return InMemoryNewsRepository()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": "News not found"})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        log.error("Storage error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(RenderError)
    async def render_error_handler(request: Request, exc: RenderError):
        return PlainTextResponse("Error generating preview", status_code=500)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log.error("Unhandled error: %s", exc, exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME, version=settings.VERSION)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    repository = build_repository(settings)
    media_store = build_media_store(settings)
    app.state.settings = settings
    app.state.news_service = NewsService(
        repository=repository,
        ingestor=MediaIngestor(media_store, max_size=settings.MAX_UPLOAD_BYTES),
        renderer=PreviewRenderer.from_settings(settings),
    )

    if isinstance(media_store, LocalMediaStore):
        app.mount(
            media_store.url_prefix,
            StaticFiles(directory=str(media_store.upload_dir)),
            name="uploads",
        )

    @app.on_event("startup")
    def seed_records() -> None:
        if settings.SEED_PATH:
            load_legacy_documents(repository, settings.SEED_PATH)

    register_routers(app)
    register_exception_handlers(app)
    log.info(
        "%s ready store=%s media=%s api=%s frontend=%s",
        settings.APP_NAME,
        settings.STORE_BACKEND,
        settings.MEDIA_BACKEND,
        settings.API_BASE_URL,
        settings.FRONTEND_BASE_URL,
    )
    return app
