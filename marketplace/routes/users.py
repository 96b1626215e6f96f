"""
Local Marketplace Backend - User & Auth Route Handlers
=======================================================

Routes:
    POST   /api/users                  register
    POST   /api/auth/login             authenticate
    GET    /api/users/{id}             profile
    PUT    /api/users/{id}             update profile
    PUT    /api/users/{id}/location    save last known location
    DELETE /api/users/{id}             delete account
    GET    /api/users/{id}/listings    seller's listings (active and inactive)

Responses use UserResponse, which has no password field.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.database import get_db_session
from marketplace.schemas.common import ErrorResponse
from marketplace.schemas.listing import ListingResponse
from marketplace.schemas.user import (
    LocationUpdateRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
)
from marketplace.services.geo import Coordinate
from marketplace.services.listing_service import listing_service
from marketplace.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])


@router.post(
    "/users",
    status_code=201,
    response_model=UserResponse,
    responses={409: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Register a new account",
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.register(
        db,
        username=body.username,
        email=body.email,
        password=body.password,
    )
    return UserResponse.model_validate(user)


@router.post(
    "/auth/login",
    response_model=UserResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Log in with email and password",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.authenticate(db, email=body.email, password=body.password)
    return UserResponse.model_validate(user)


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return UserResponse.model_validate(await user_service.get(db, user_id))


@router.put(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Update profile fields",
)
async def update_profile(
    user_id: int,
    body: ProfileUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.update_profile(db, user_id, body)
    return UserResponse.model_validate(user)


@router.put(
    "/users/{user_id}/location",
    response_model=UserResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Save the user's current location",
)
async def update_location(
    user_id: int,
    body: LocationUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.save_user_location(
        db, user_id, Coordinate(body.latitude, body.longitude)
    )
    return UserResponse.model_validate(user)


@router.delete(
    "/users/{user_id}",
    status_code=204,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> None:
    await user_service.delete(db, user_id)


@router.get(
    "/users/{user_id}/listings",
    response_model=List[ListingResponse],
    summary="All listings of a seller, newest first",
)
async def list_user_listings(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[ListingResponse]:
    await user_service.get(db, user_id)
    listings = await listing_service.list_by_seller(db, user_id)
    return [ListingResponse.model_validate(item) for item in listings]
