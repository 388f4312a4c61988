"""Reusable dependencies for FastAPI routes."""
from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from travel_story.core.config import Settings
from travel_story.core.context import Identity
from travel_story.core.security import PasswordHasher, TokenRejected, TokenSigner
from travel_story.db.session import get_session
from travel_story.models.user import User
from travel_story.services.images import ImageStore
from travel_story.services.users import get_user_by_id

_bearer = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    async with get_session(request.app.state.session_factory) as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_signer(request: Request) -> TokenSigner:
    return request.app.state.token_signer


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


async def require_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    signer: TokenSigner = Depends(get_token_signer),
) -> Identity:
    """Resolve the caller from the ``Authorization: Bearer`` header or reject with 401."""

    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")
    try:
        user_id = signer.verify(credentials.credentials)
    except TokenRejected as exc:
        raise _unauthorized("Invalid or expired token") from exc
    return Identity(user_id=user_id)


async def get_current_user(
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> User:
    user = await get_user_by_id(session, identity.user_id)
    if not user:
        raise _unauthorized("User not found")
    return user
