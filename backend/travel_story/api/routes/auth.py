"""Account creation, login and current-user endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from travel_story.core.config import Settings
from travel_story.core.dependencies import (
    get_app_settings,
    get_current_user,
    get_db,
    get_password_hasher,
    get_token_signer,
)
from travel_story.core.security import PasswordHasher, TokenSigner
from travel_story.models.user import User
from travel_story.schemas.auth import AuthResponse, CreateAccountRequest, CurrentUserResponse, LoginRequest
from travel_story.schemas.user import UserRead, UserSummary
from travel_story.services.users import (
    AuthenticationFailed,
    EmailAlreadyRegistered,
    UnknownEmail,
    authenticate_user,
    create_user,
)

router = APIRouter(tags=["auth"])

GENERIC_LOGIN_FAILURE = "Invalid Credentials"


@router.post("/create-account", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    payload: CreateAccountRequest,
    session: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    signer: TokenSigner = Depends(get_token_signer),
) -> AuthResponse:
    try:
        user = await create_user(session, payload, hasher)
        await session.commit()
    except EmailAlreadyRegistered as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return AuthResponse(
        user=UserSummary.model_validate(user),
        access_token=signer.issue(user.id),
        message="Registration Successful",
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    signer: TokenSigner = Depends(get_token_signer),
    settings: Settings = Depends(get_app_settings),
) -> AuthResponse:
    try:
        user = await authenticate_user(session, payload.email, payload.password, hasher)
    except AuthenticationFailed as exc:
        detail = GENERIC_LOGIN_FAILURE
        if settings.distinguish_login_failures and isinstance(exc, UnknownEmail):
            detail = str(exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail) from exc

    return AuthResponse(
        user=UserSummary.model_validate(user),
        access_token=signer.issue(user.id),
        message="Login Successful",
    )


@router.get("/get-user", response_model=CurrentUserResponse)
async def get_user(current_user: User = Depends(get_current_user)) -> CurrentUserResponse:
    return CurrentUserResponse(user=UserRead.model_validate(current_user), message="")
