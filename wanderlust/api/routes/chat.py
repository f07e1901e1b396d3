"""Booking chat API routes: customer and host talk once a booking is confirmed.

Endpoints:
  GET  /v1.0/chats/bookings/{booking_id}: get (or open) the thread, marks incoming as read
  POST /v1.0/chats/bookings/{booking_id}/messages: append a message
  GET  /v1.0/chats/unread-count: unread messages across the user's threads
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from supabase import Client

from wanderlust.api import deps
from wanderlust.core.errors import NotFoundError, TransientStoreError, ValidationError
from wanderlust.crud.booking import get_booking_by_id
from wanderlust.crud.chat import (
    count_unread_messages,
    create_message,
    get_chat_messages,
    get_or_create_chat,
    mark_messages_read,
)
from wanderlust.db.base import get_supabase
from wanderlust.schemas.chat import (
    ChatMessageCreate,
    ChatMessageResponse,
    ChatSendResponse,
    ChatThreadResponse,
    UnreadCountResponse,
)
from wanderlust.services.access import RequestContext, ensure_chat_access
from wanderlust.services.guardrails import clean_chat_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1.0/chats", tags=["chat"])


def _to_message_response(row: dict) -> ChatMessageResponse:
    return ChatMessageResponse(
        id=row.get("id"),
        sender=row["sender_id"],
        content=row["content"],
        timestamp=row["timestamp"],
        is_read=bool(row.get("is_read", False)),
    )


async def _get_gated_booking(client: Client, ctx: RequestContext, booking_id: str) -> dict:
    booking = await get_booking_by_id(client, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    ensure_chat_access(ctx, booking)
    return booking


def _participants(booking: dict) -> list[str]:
    return [booking["customer_id"], booking["listing_owner_id"]]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Count unread messages sent to the current user."""
    count = await count_unread_messages(client, ctx.user_id)
    return UnreadCountResponse(unread_count=count)


@router.get("/bookings/{booking_id}", response_model=ChatThreadResponse)
async def get_booking_chat(
    booking_id: str,
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Open the booking's chat thread, creating it on first access."""
    booking = await _get_gated_booking(client, ctx, booking_id)

    chat = await get_or_create_chat(client, booking_id, _participants(booking))
    await mark_messages_read(client, chat["id"], ctx.user_id)
    messages = await get_chat_messages(client, chat["id"])

    participants = [str(p) for p in chat.get("participants") or []]
    other = next((p for p in participants if p != ctx.user_id), None)
    return ChatThreadResponse(
        id=chat["id"],
        booking_id=booking_id,
        participants=participants,
        other_participant=other,
        messages=[_to_message_response(m) for m in messages],
    )


@router.post("/bookings/{booking_id}/messages", response_model=ChatSendResponse)
async def send_booking_message(
    booking_id: str,
    payload: ChatMessageCreate,
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Append a message to the booking's chat thread."""
    content = clean_chat_message(payload.message)
    if content is None:
        raise ValidationError("Message cannot be empty")

    booking = await _get_gated_booking(client, ctx, booking_id)

    try:
        chat = await get_or_create_chat(client, booking_id, _participants(booking))
        row = await create_message(client, chat["id"], ctx.user_id, content)
    except Exception:
        logger.exception("Failed to store chat message for booking %s", booking_id)
        raise TransientStoreError()

    return ChatSendResponse(message=_to_message_response(row))
