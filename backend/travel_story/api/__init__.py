"""API router aggregator."""
from fastapi import APIRouter

from travel_story.api.routes import auth, images, stories

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(stories.router)
api_router.include_router(images.router)

__all__ = ["api_router"]
