# backend/app/api/routes_images.py

from typing import Optional

from fastapi import APIRouter, Query

from app.core.errors import ApiError
from app.services.image_service import ImageService

router = APIRouter(prefix="/api/images", tags=["images"])
images = ImageService()


def _require_query(query: Optional[str]) -> str:
    if not query or not query.strip():
        raise ApiError.bad_request("Query parameter is required", code="VALIDATION_ERROR")
    return query.strip()


@router.get("/unsplash")
def unsplash_image(query: Optional[str] = Query(None)):
    # 404 tells the client to move on to its next image source
    url = images.unsplash.find_photo(_require_query(query))
    if not url:
        raise ApiError.not_found("No image found")
    return {"url": url}


@router.get("/sources")
def image_sources(
    query: Optional[str] = Query(None),
    width: int = Query(800, ge=16, le=4096),
    height: int = Query(600, ge=16, le=4096),
):
    return {"sources": images.candidates(_require_query(query), width=width, height=height)}
