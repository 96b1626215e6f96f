"""
Local Marketplace Backend - Message Schemas
============================================
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    sender_id: int
    receiver_id: int
    content: str = Field(description="Message text; must not be blank")
    listing_id: Optional[int] = Field(default=None, description="Listing this message is about")
    attachment_url: Optional[str] = None


class MessageResponse(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    listing_id: Optional[int] = None
    content: str
    attachment_url: Optional[str] = None
    sent_at: datetime
    is_read: bool

    model_config = {"from_attributes": True}
