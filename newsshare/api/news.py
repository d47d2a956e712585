from __future__ import annotations

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from starlette.datastructures import FormData, UploadFile

from ..errors import NotFoundError
from ..ingestion import MediaUpload
from ..schemas import ErrorOut, NewsOut
from .dependencies import NewsServiceDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["News"])


async def _read_upload(value: object) -> Optional[MediaUpload]:
    if not isinstance(value, UploadFile):
        return None
    content = await value.read()
    # Browsers submit an empty part for an untouched file input.
    if not value.filename and not content:
        return None
    return MediaUpload(
        filename=value.filename or "upload",
        content=content,
        content_type=value.content_type,
    )


async def _read_video(form: FormData) -> Union[MediaUpload, str, None]:
    value = form.get("video")
    if isinstance(value, UploadFile):
        return await _read_upload(value)
    if isinstance(value, str) and value.strip():
        return value
    legacy = form.get("videoUrl")
    if isinstance(legacy, str) and legacy.strip():
        return legacy
    return None


def _text(value: object) -> Optional[str]:
    return value if isinstance(value, str) else None


@router.post(
    "",
    response_model=NewsOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
async def create_news(request: Request, service: NewsServiceDep) -> NewsOut:
    form = await request.form()
    try:
        record = service.create_news(
            title=_text(form.get("title")),
            description=_text(form.get("description")),
            image=await _read_upload(form.get("image")),
            video=await _read_video(form),
        )
    finally:
        await form.close()
    return NewsOut.model_validate(record)


@router.get("", response_model=List[NewsOut])
def list_news(service: NewsServiceDep) -> List[NewsOut]:
    return [NewsOut.model_validate(record) for record in service.list_news()]


@router.get("/share/{news_id}", response_class=HTMLResponse, responses={404: {"content": {"text/plain": {}}}})
@router.get("/{news_id}/preview", response_class=HTMLResponse, responses={404: {"content": {"text/plain": {}}}})
def preview_news(news_id: str, service: NewsServiceDep):
    try:
        document = service.render_preview(news_id)
    except NotFoundError:
        logger.info("Preview requested for unknown news %s", news_id)
        return PlainTextResponse("News not found", status_code=status.HTTP_404_NOT_FOUND)
    return HTMLResponse(document)


@router.get("/{news_id}", response_model=NewsOut, responses={404: {"model": ErrorOut}})
def get_news(news_id: str, service: NewsServiceDep) -> NewsOut:
    return NewsOut.model_validate(service.get_news(news_id))
