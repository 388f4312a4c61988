"""User service functions for account creation and authentication."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from travel_story.core.security import PasswordHasher
from travel_story.models.user import User
from travel_story.schemas.auth import CreateAccountRequest

logger = logging.getLogger(__name__)


class EmailAlreadyRegistered(ValueError):
    """An account with this email already exists."""


class AuthenticationFailed(ValueError):
    """Login rejected."""


class UnknownEmail(AuthenticationFailed):
    """No account is registered under the email."""


class InvalidPassword(AuthenticationFailed):
    """The password does not match the stored hash."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: str) -> User | None:
    return await session.get(User, user_id)


async def create_user(session: AsyncSession, user_in: CreateAccountRequest, hasher: PasswordHasher) -> User:
    email = normalize_email(user_in.email)
    if await get_user_by_email(session, email):
        raise EmailAlreadyRegistered("User already exists")

    user = User(full_name=user_in.full_name, email=email, password_hash=hasher.hash(user_in.password))
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as exc:
        # a concurrent request registered the same email after the check above
        await session.rollback()
        raise EmailAlreadyRegistered("User already exists") from exc
    logger.info("Created account %s", user.id)
    return user


async def authenticate_user(session: AsyncSession, email: str, password: str, hasher: PasswordHasher) -> User:
    user = await get_user_by_email(session, email)
    if not user:
        logger.info("Login failed: no account for the supplied email")
        raise UnknownEmail("User not found")
    if not hasher.verify(password, user.password_hash):
        logger.info("Login failed: bad password for user %s", user.id)
        raise InvalidPassword("Invalid Credentials")
    return user
