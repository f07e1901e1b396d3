from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ChatMessageCreate(BaseModel):
    message: str | None = None


class ChatMessageResponse(BaseModel):
    id: str | None = None
    sender: str
    content: str
    timestamp: datetime
    is_read: bool = False


class ChatSendResponse(BaseModel):
    success: bool = True
    message: ChatMessageResponse


class ChatThreadResponse(BaseModel):
    id: str
    booking_id: str
    participants: list[str]
    other_participant: str | None = None
    messages: list[ChatMessageResponse]


class UnreadCountResponse(BaseModel):
    unread_count: int
