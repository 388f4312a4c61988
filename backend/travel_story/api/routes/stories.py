"""Travel story endpoints.

Every route requires a bearer token; single-story routes answer 404 both for
missing stories and for stories owned by someone else. Request bodies are
validated before the bearer dependency runs, so a malformed body answers 400
even without a token; no handler runs in either case.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from travel_story.core.access import ResourceNotFound
from travel_story.core.config import Settings
from travel_story.core.context import Identity
from travel_story.core.dependencies import get_app_settings, get_db, get_image_store, require_identity
from travel_story.core.utils import from_epoch_ms
from travel_story.schemas.base import MAX_EPOCH_MS, ApiResponse
from travel_story.schemas.story import (
    FavouriteUpdate,
    StoryCreate,
    StoryListResponse,
    StoryRead,
    StoryResponse,
    StoryUpdate,
)
from travel_story.services import stories as story_service
from travel_story.services.images import ImageStore

router = APIRouter(tags=["stories"], dependencies=[Depends(require_identity)])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Travel story not found")


def _story_list(stories) -> StoryListResponse:
    return StoryListResponse(stories=[StoryRead.model_validate(story) for story in stories])


@router.post("/add-travel-story", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
async def add_travel_story(
    payload: StoryCreate,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
) -> StoryResponse:
    payload = payload.model_copy(update={"image_url": images.canonical(payload.image_url)})
    story = await story_service.create_story(session, identity, payload)
    await session.commit()
    return StoryResponse(story=StoryRead.model_validate(story), message="Added Successfully")


@router.get("/get-all-stories", response_model=StoryListResponse)
async def get_all_stories(
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> StoryListResponse:
    return _story_list(await story_service.list_stories(session, identity))


@router.put("/edit-story/{story_id}", response_model=StoryResponse)
async def edit_story(
    story_id: str,
    payload: StoryUpdate,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    images: ImageStore = Depends(get_image_store),
) -> StoryResponse:
    if payload.image_url:
        payload = payload.model_copy(update={"image_url": images.canonical(payload.image_url.strip())})
    try:
        story = await story_service.update_story(session, identity, story_id, payload, settings.placeholder_image)
    except ResourceNotFound as exc:
        raise _not_found() from exc
    await session.commit()
    return StoryResponse(story=StoryRead.model_validate(story), message="Update Successful")


@router.delete("/delete-story/{story_id}", response_model=ApiResponse)
async def delete_story(
    story_id: str,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
) -> ApiResponse:
    try:
        story = await story_service.delete_story(session, identity, story_id)
    except ResourceNotFound as exc:
        raise _not_found() from exc
    await session.commit()

    if not await story_service.image_in_use(session, images.canonical(story.image_url)):
        images.discard(story.image_url)
    return ApiResponse(message="Travel story deleted successfully")


@router.put("/update-is-favourite/{story_id}", response_model=StoryResponse)
async def update_is_favourite(
    story_id: str,
    payload: FavouriteUpdate,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> StoryResponse:
    try:
        story = await story_service.set_favourite(session, identity, story_id, payload.is_favourite)
    except ResourceNotFound as exc:
        raise _not_found() from exc
    await session.commit()
    return StoryResponse(story=StoryRead.model_validate(story), message="Update Successful")


@router.get("/search", response_model=StoryListResponse)
async def search_stories(
    query: str | None = Query(default=None, max_length=256),
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> StoryListResponse:
    if not query or not query.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="query is required")
    return _story_list(await story_service.search_stories(session, identity, query.strip()))


@router.get("/travel-stories/filter", response_model=StoryListResponse)
async def filter_stories(
    start_date: int = Query(..., alias="startDate", ge=0, le=MAX_EPOCH_MS),
    end_date: int = Query(..., alias="endDate", ge=0, le=MAX_EPOCH_MS),
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> StoryListResponse:
    stories = await story_service.filter_stories_by_date(
        session, identity, from_epoch_ms(start_date), from_epoch_ms(end_date)
    )
    return _story_list(stories)
