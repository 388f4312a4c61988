"""Database model for travel stories."""
from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from travel_story.core.utils import utc_now
from travel_story.db.base import Base
from travel_story.db.types import UTCDateTime


class TravelStory(Base):
    """A journal entry owned by exactly one user."""

    __tablename__ = "travel_stories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    story: Mapped[str] = mapped_column(Text, nullable=False)
    visited_locations: Mapped[list[str]] = mapped_column(JSON, default=list)
    is_favourite: Mapped[bool] = mapped_column(Boolean, default=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    visited_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)
    created_on: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)

    owner: Mapped["User"] = relationship("User", back_populates="stories")
