"""Database model for application users."""
from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from travel_story.core.utils import utc_now
from travel_story.db.base import Base
from travel_story.db.types import UTCDateTime


class User(Base):
    """Registered account with a hashed password."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_on: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)

    stories: Mapped[list["TravelStory"]] = relationship("TravelStory", back_populates="owner", cascade="all, delete-orphan")
