"""Pydantic schemas for travel stories."""
from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, Field

from .base import MAX_EPOCH_MS, ApiResponse, CamelModel, NonBlankStr


class StoryBase(CamelModel):
    title: NonBlankStr = Field(..., max_length=255)
    story: NonBlankStr
    visited_location: list[NonBlankStr]
    visited_date: int = Field(..., ge=0, le=MAX_EPOCH_MS, description="Epoch milliseconds")


class StoryCreate(StoryBase):
    image_url: NonBlankStr = Field(..., max_length=1024)


class StoryUpdate(StoryBase):
    image_url: str | None = Field(default=None, max_length=1024)


class FavouriteUpdate(CamelModel):
    is_favourite: bool


class StoryRead(CamelModel):
    id: str
    title: str
    story: str
    visited_location: list[str] = Field(
        validation_alias=AliasChoices("visitedLocation", "visited_locations"),
        serialization_alias="visitedLocation",
    )
    is_favourite: bool
    user_id: str
    image_url: str
    visited_date: datetime
    created_on: datetime


class StoryResponse(ApiResponse):
    story: StoryRead


class StoryListResponse(ApiResponse):
    stories: list[StoryRead]


class ImageUploadResponse(ApiResponse):
    image_url: str
