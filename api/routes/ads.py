"""
api/routes/ads.py -- Listing endpoints.

Routes:
  POST /ads     -- create a listing owned by the caller (requires auth)
  GET  /ads     -- all listings, newest first; ?city= for exact location match
  GET  /me/ads  -- the caller's own listings (requires auth)

The owner id comes only from get_current_user_id(); nothing in the request
body can set it.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request

from ads.service import ListingService
from api.models import AdCreate, AdResponse
from auth.dependencies import get_current_user_id

router = APIRouter()


def get_listing_service(request: Request) -> ListingService:
    return request.app.state.listing_service


@router.post("/ads", response_model=AdResponse, status_code=201)
def create_ad(
    body: Optional[AdCreate] = Body(default=None),
    user_id: int = Depends(get_current_user_id),
    service: ListingService = Depends(get_listing_service),
) -> AdResponse:
    """Create a listing. A missing or null body stores an ad with no content."""
    body = body or AdCreate()
    ad = service.create_listing(user_id, title=body.title, description=body.description, location=body.location)
    return AdResponse.from_ad(ad)


@router.get("/ads", response_model=list[AdResponse])
def list_ads(
    city: Optional[str] = None,
    service: ListingService = Depends(get_listing_service),
) -> list[AdResponse]:
    """Public listing feed. An empty city parameter is treated as no filter."""
    return [AdResponse.from_ad(ad) for ad in service.list_all(city)]


@router.get("/me/ads", response_model=list[AdResponse])
def my_ads(
    user_id: int = Depends(get_current_user_id),
    service: ListingService = Depends(get_listing_service),
) -> list[AdResponse]:
    return [AdResponse.from_ad(ad) for ad in service.list_mine(user_id)]
