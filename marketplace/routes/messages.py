"""
Local Marketplace Backend - Message Route Handlers
===================================================

Routes:
    POST   /api/messages                              send
    GET    /api/messages/conversation?user_a=&user_b=  thread between two users
    GET    /api/listings/{id}/messages                 thread about a listing
    POST   /api/messages/{id}/read                     mark as read
    DELETE /api/messages/{id}                          delete
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.database import get_db_session
from marketplace.schemas.common import ErrorResponse
from marketplace.schemas.message import MessageCreate, MessageResponse
from marketplace.services.message_service import message_service

router = APIRouter(prefix="/api", tags=["Messages"])


@router.post(
    "/messages",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Empty message", "model": ErrorResponse},
        404: {"description": "Unknown user or listing", "model": ErrorResponse},
    },
)
async def send_message(
    body: MessageCreate,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    message = await message_service.send(
        db,
        sender_id=body.sender_id,
        receiver_id=body.receiver_id,
        content=body.content,
        listing_id=body.listing_id,
        attachment_url=body.attachment_url,
    )
    return MessageResponse.model_validate(message)


@router.get(
    "/messages/conversation",
    response_model=List[MessageResponse],
    summary="Messages between two users, oldest first",
)
async def get_conversation(
    user_a: int = Query(),
    user_b: int = Query(),
    db: AsyncSession = Depends(get_db_session),
) -> List[MessageResponse]:
    messages = await message_service.conversation(db, user_a, user_b)
    return [MessageResponse.model_validate(m) for m in messages]


@router.get(
    "/listings/{listing_id}/messages",
    response_model=List[MessageResponse],
    summary="Messages about a listing, oldest first",
)
async def get_listing_messages(
    listing_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[MessageResponse]:
    messages = await message_service.for_listing(db, listing_id)
    return [MessageResponse.model_validate(m) for m in messages]


@router.post(
    "/messages/{message_id}/read",
    response_model=MessageResponse,
    responses={404: {"description": "Message not found", "model": ErrorResponse}},
)
async def mark_message_read(
    message_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return MessageResponse.model_validate(await message_service.mark_read(db, message_id))


@router.delete(
    "/messages/{message_id}",
    status_code=204,
    responses={404: {"description": "Message not found", "model": ErrorResponse}},
)
async def delete_message(
    message_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> None:
    await message_service.delete(db, message_id)
