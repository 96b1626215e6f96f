"""
Local Marketplace Backend - Listing Route Handlers
===================================================

Routes:
    GET    /api/listings?category=          browse (optionally by category)
    GET    /api/listings/nearby             proximity search
    POST   /api/listings                    create
    GET    /api/listings/{id}               detail
    PUT    /api/listings/{id}               full replace
    POST   /api/listings/{id}/deactivate    soft delete
    DELETE /api/listings/{id}               hard delete

/listings/nearby is declared before /listings/{listing_id} so the literal
path wins over the integer path parameter.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config import settings
from marketplace.database import get_db_session
from marketplace.schemas.common import ErrorResponse
from marketplace.schemas.listing import (
    ListingResponse,
    ListingWrite,
    NearbyListingsResponse,
)
from marketplace.services.geo import Coordinate
from marketplace.services.listing_service import listing_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Listings"])


@router.get(
    "/listings",
    response_model=List[ListingResponse],
    summary="Browse active listings, newest first",
)
async def list_listings(
    response: Response,
    category: Optional[str] = Query(
        default=None,
        description="Only listings in this category. Omit for all active listings.",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[ListingResponse]:
    listings = await listing_service.list_by_category(db, category)
    response.headers["X-Total-Count"] = str(len(listings))
    return [ListingResponse.model_validate(item) for item in listings]


@router.get(
    "/listings/nearby",
    response_model=NearbyListingsResponse,
    summary="Active listings within a radius of a point",
    description=(
        "Great-circle (haversine) distance from the given point to each active "
        "listing; listings at a distance <= radius_km are returned, newest first."
    ),
)
async def nearby_listings(
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
    radius_km: Optional[float] = Query(
        default=None,
        ge=0,
        description="Search radius in kilometres (inclusive). Defaults to the server setting.",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> NearbyListingsResponse:
    radius = settings.default_search_radius_km if radius_km is None else radius_km
    listings = await listing_service.find_nearby(
        db, Coordinate(latitude, longitude), radius
    )
    return NearbyListingsResponse(
        latitude=latitude,
        longitude=longitude,
        radius_km=radius,
        count=len(listings),
        listings=[ListingResponse.model_validate(item) for item in listings],
    )


@router.post(
    "/listings",
    status_code=201,
    response_model=ListingResponse,
    responses={
        400: {"description": "Missing title or non-positive price", "model": ErrorResponse},
        404: {"description": "Seller not found", "model": ErrorResponse},
    },
)
async def create_listing(
    body: ListingWrite,
    db: AsyncSession = Depends(get_db_session),
) -> ListingResponse:
    listing = await listing_service.create(db, body)
    return ListingResponse.model_validate(listing)


@router.get(
    "/listings/{listing_id}",
    response_model=ListingResponse,
    responses={404: {"description": "Listing not found", "model": ErrorResponse}},
)
async def get_listing(
    listing_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> ListingResponse:
    return ListingResponse.model_validate(await listing_service.get(db, listing_id))


@router.put(
    "/listings/{listing_id}",
    response_model=ListingResponse,
    responses={
        400: {"description": "Missing title or non-positive price", "model": ErrorResponse},
        404: {"description": "Listing not found", "model": ErrorResponse},
    },
)
async def replace_listing(
    listing_id: int,
    body: ListingWrite,
    db: AsyncSession = Depends(get_db_session),
) -> ListingResponse:
    listing = await listing_service.replace(db, listing_id, body)
    return ListingResponse.model_validate(listing)


@router.post(
    "/listings/{listing_id}/deactivate",
    response_model=ListingResponse,
    responses={404: {"description": "Listing not found", "model": ErrorResponse}},
    summary="Soft delete: hide the listing from browse and search",
)
async def deactivate_listing(
    listing_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> ListingResponse:
    listing = await listing_service.deactivate(db, listing_id)
    return ListingResponse.model_validate(listing)


@router.delete(
    "/listings/{listing_id}",
    status_code=204,
    responses={404: {"description": "Listing not found", "model": ErrorResponse}},
)
async def delete_listing(
    listing_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> None:
    await listing_service.delete(db, listing_id)
