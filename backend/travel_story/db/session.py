"""Database session and engine management."""
from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


def _json_serializer(value) -> str:
    # store non-ASCII place names as written
    return json.dumps(value, ensure_ascii=False)


def create_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, echo=False, json_serializer=_json_serializer)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@asynccontextmanager
async def get_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a transactional scope around a series of operations."""

    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
