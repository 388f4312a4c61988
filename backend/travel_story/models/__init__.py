"""SQLAlchemy models exposed for metadata creation and imports."""
from .story import TravelStory
from .user import User

__all__ = ["User", "TravelStory"]
