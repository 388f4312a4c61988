"""Route modules for the Travel Story API."""
from . import auth, images, stories

__all__ = ["auth", "stories", "images"]
