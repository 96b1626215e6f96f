"""
Local Marketplace Backend - User Schemas
=========================================

What:  API contracts for registration, login, profile and location updates.

Security:
    UserResponse never carries password_hash. Passwords only travel inbound
    (RegisterRequest, LoginRequest).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=1, description="Plain password; hashed before storage")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ProfileUpdateRequest(BaseModel):
    """
    Editable profile fields. Omitted fields keep their stored value.

    average_rating is stored as given; nothing in this service computes it.
    """
    username: Optional[str] = Field(default=None, min_length=1, max_length=50)
    phone_number: Optional[str] = Field(default=None, max_length=20)
    profile_image_url: Optional[str] = None
    average_rating: Optional[float] = Field(default=None, ge=0)


class LocationUpdateRequest(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    phone_number: str
    profile_image_url: Optional[str] = None
    average_rating: float
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: datetime

    model_config = {"from_attributes": True}
