from __future__ import annotations

from fastapi import FastAPI

from . import health, news


def register_routers(app: FastAPI) -> None:
    app.include_router(health.router)
    app.include_router(news.router, prefix="/news")
    app.include_router(news.router, prefix="/api/news")
