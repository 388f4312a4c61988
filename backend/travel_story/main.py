"""FastAPI application entrypoint.

Run with ``uvicorn travel_story.main:create_app --factory``.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from travel_story import models  # noqa: F401  registers tables on Base.metadata
from travel_story.api import api_router
from travel_story.core.config import Settings, get_settings
from travel_story.core.errors import register_exception_handlers
from travel_story.core.security import PasswordHasher, TokenSigner
from travel_story.db.base import Base
from travel_story.db.session import create_engine, create_session_factory
from travel_story.middleware.timeout import RequestTimeoutMiddleware
from travel_story.services.images import UPLOAD_ROUTE, ImageStore

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application; fails immediately without an access token secret."""

    settings = settings or get_settings()
    if not settings.access_token_secret:
        raise RuntimeError("ACCESS_TOKEN_SECRET (or TRAVEL_STORY_ACCESS_TOKEN_SECRET) must be set")

    engine = create_engine(settings.database_url)
    image_store = ImageStore(settings.upload_path, settings.public_base_url, settings.max_upload_bytes)
    image_store.ensure_root()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            await engine.dispose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.session_factory = create_session_factory(engine)
    app.state.token_signer = TokenSigner(
        settings.access_token_secret,
        lifetime=timedelta(hours=settings.access_token_expire_hours),
    )
    app.state.password_hasher = PasswordHasher(
        time_cost=settings.password_hash_time_cost,
        memory_cost=settings.password_hash_memory_cost,
    )
    app.state.image_store = image_store

    register_exception_handlers(app)

    app.add_middleware(RequestTimeoutMiddleware, timeout=settings.request_timeout_seconds)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials="*" not in settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    app.mount(UPLOAD_ROUTE, StaticFiles(directory=str(image_store.root)), name="uploads")

    # Serve the built frontend if configured; API routes are matched first
    if settings.frontend_dir:
        static_dir = Path(settings.frontend_dir)
        if static_dir.exists() and static_dir.is_dir():
            app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="frontend")

    return app
