"""Authentication-related schemas."""
from __future__ import annotations

from pydantic import Field

from .base import ApiResponse, CamelModel, NonBlankStr
from .user import UserRead, UserSummary


class CreateAccountRequest(CamelModel):
    full_name: NonBlankStr = Field(..., max_length=128)
    email: NonBlankStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class LoginRequest(CamelModel):
    email: NonBlankStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class AuthResponse(ApiResponse):
    user: UserSummary
    access_token: str


class CurrentUserResponse(ApiResponse):
    user: UserRead
