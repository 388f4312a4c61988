"""Pydantic schemas for user operations."""
from __future__ import annotations

from datetime import datetime

from .base import CamelModel


class UserSummary(CamelModel):
    id: str
    full_name: str
    email: str


class UserRead(UserSummary):
    created_on: datetime
