"""Service layer for travel story persistence.

Every function takes the caller's :class:`Identity`. Single-story operations
go through :func:`get_story`, which applies the ownership check; collection
queries filter on the caller's id in SQL.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from travel_story.core.access import ensure_owner
from travel_story.core.context import Identity
from travel_story.core.utils import from_epoch_ms
from travel_story.models.story import TravelStory
from travel_story.schemas.story import StoryCreate, StoryUpdate


def _owned_by(identity: Identity) -> Select:
    return (
        select(TravelStory)
        .where(TravelStory.user_id == identity.user_id)
        .order_by(TravelStory.is_favourite.desc(), TravelStory.created_on.desc())
    )


async def list_stories(session: AsyncSession, identity: Identity) -> list[TravelStory]:
    result = await session.execute(_owned_by(identity))
    return list(result.scalars().all())


async def get_story(session: AsyncSession, identity: Identity, story_id: str) -> TravelStory:
    """Fetch a story the caller owns; raise ResourceNotFound otherwise."""

    story = await session.get(TravelStory, story_id)
    return ensure_owner(story, identity, kind="Travel story")


async def create_story(session: AsyncSession, identity: Identity, data: StoryCreate) -> TravelStory:
    story = TravelStory(
        title=data.title,
        story=data.story,
        visited_locations=list(data.visited_location),
        image_url=data.image_url,
        visited_date=from_epoch_ms(data.visited_date),
        user_id=identity.user_id,
    )
    session.add(story)
    await session.flush()
    await session.refresh(story)
    return story


async def update_story(
    session: AsyncSession, identity: Identity, story_id: str, data: StoryUpdate, placeholder_image: str
) -> TravelStory:
    story = await get_story(session, identity, story_id)
    story.title = data.title
    story.story = data.story
    story.visited_locations = list(data.visited_location)
    story.visited_date = from_epoch_ms(data.visited_date)
    story.image_url = (data.image_url or "").strip() or placeholder_image
    await session.flush()
    await session.refresh(story)
    return story


async def set_favourite(session: AsyncSession, identity: Identity, story_id: str, is_favourite: bool) -> TravelStory:
    story = await get_story(session, identity, story_id)
    story.is_favourite = is_favourite
    await session.flush()
    await session.refresh(story)
    return story


async def delete_story(session: AsyncSession, identity: Identity, story_id: str) -> TravelStory:
    story = await get_story(session, identity, story_id)
    await session.delete(story)
    await session.flush()
    return story


async def search_stories(session: AsyncSession, identity: Identity, query: str) -> list[TravelStory]:
    """Case-insensitive substring match on title, story text or any single location."""

    needle = query.casefold()
    result = await session.execute(_owned_by(identity))
    return [story for story in result.scalars().all() if _matches(story, needle)]


def _matches(story: TravelStory, needle: str) -> bool:
    fields = [story.title, story.story, *(story.visited_locations or [])]
    return any(needle in str(field).casefold() for field in fields)


async def filter_stories_by_date(
    session: AsyncSession, identity: Identity, start: datetime, end: datetime
) -> list[TravelStory]:
    statement = _owned_by(identity).where(TravelStory.visited_date >= start, TravelStory.visited_date <= end)
    result = await session.execute(statement)
    return list(result.scalars().all())


async def image_used_by_others(session: AsyncSession, identity: Identity, image_url: str) -> bool:
    result = await session.execute(
        select(TravelStory.id)
        .where(TravelStory.image_url == image_url, TravelStory.user_id != identity.user_id)
        .limit(1)
    )
    return result.first() is not None


async def image_in_use(session: AsyncSession, image_url: str) -> bool:
    result = await session.execute(select(TravelStory.id).where(TravelStory.image_url == image_url).limit(1))
    return result.first() is not None
