from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class BaseSchema(BaseModel):
    model_config = {"from_attributes": True}


class NewsOut(BaseSchema):
    id: str
    title: str
    description: str
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ErrorOut(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
