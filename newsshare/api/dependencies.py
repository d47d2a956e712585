from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from ..service import NewsService


def get_news_service(request: Request) -> NewsService:
    return request.app.state.news_service


NewsServiceDep = Annotated[NewsService, Depends(get_news_service)]
