"""
Local Marketplace Backend - Listing Schemas
============================================

What:  API contracts for creating, replacing, browsing and searching listings.

Coordinate Validation:
    Latitude/longitude are range-checked here, at the HTTP boundary
    ([-90, 90] and [-180, 180]); out-of-range values get a 422 from FastAPI.
    The proximity search itself passes values through untouched.
"""

from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field


class ListingWrite(BaseModel):
    """
    Body for POST /api/listings and PUT /api/listings/{id}.

    PUT is a full-record replace: every field is sent, every field is stored.
    """
    seller_id: int
    title: str = Field(max_length=200)
    description: str = ""
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    category: str = Field(default="", max_length=100)
    condition: str = Field(default="", max_length=50)
    image_urls: List[str] = Field(default_factory=list)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    location: str = Field(default="", max_length=200)


class ListingResponse(BaseModel):
    id: int
    seller_id: int
    title: str
    description: str
    price: Decimal
    category: str
    condition: str
    image_urls: List[str]
    latitude: float
    longitude: float
    location: str
    listed_at: datetime
    is_active: bool

    model_config = {"from_attributes": True}


class NearbyListingsResponse(BaseModel):
    """Result of a proximity query; listings keep the browse order (newest first)."""
    latitude: float
    longitude: float
    radius_km: float
    count: int
    listings: List[ListingResponse]
