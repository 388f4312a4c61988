"""Story image upload and removal endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from travel_story.core.context import Identity
from travel_story.core.dependencies import get_db, get_image_store, require_identity
from travel_story.schemas.base import ApiResponse
from travel_story.schemas.story import ImageUploadResponse
from travel_story.services import stories as story_service
from travel_story.services.images import ImageNotFound, ImageRejected, ImageStore

router = APIRouter(tags=["images"], dependencies=[Depends(require_identity)])


@router.post("/image-upload", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    image: UploadFile | None = File(default=None),
    images: ImageStore = Depends(get_image_store),
) -> ImageUploadResponse:
    if image is None or not image.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No image uploaded")
    try:
        image_url = await images.save(image)
    except ImageRejected as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    finally:
        await image.close()
    return ImageUploadResponse(image_url=image_url)


@router.delete("/delete-image", response_model=ApiResponse)
async def delete_image(
    image_url: str | None = Query(default=None, alias="imageUrl"),
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
) -> ApiResponse:
    if not image_url:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="imageUrl parameter is required")
    path = images.resolve(image_url)
    # another user's story image is reported exactly like a missing file
    if path is None or await story_service.image_used_by_others(session, identity, images.url_for(path.name)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    try:
        images.delete(image_url)
    except ImageNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ApiResponse(message="Image deleted successfully")
