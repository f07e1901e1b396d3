from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Step(str, Enum):
    GREETING = "greeting"
    GATHERING_INFO = "gathering_info"
    LOCATION = "location"
    PRICE = "price"
    GUESTS = "guests"
    READY = "ready"


class BotMessage(BaseModel):
    sender: Literal["user", "bot"]
    text: str
    timestamp: datetime = Field(default_factory=_utcnow)


class ConversationContext(BaseModel):
    step: Step = Step.GREETING
    location: str | None = None
    min_price: int | None = None
    max_price: int | None = None
    guests: int | None = None

    def has_any_slot(self) -> bool:
        return bool(self.location) or self.min_price is not None or bool(self.guests)

    def public(self) -> dict:
        """Context as sent to clients: unset slots are left out."""
        return self.model_dump(mode="json", exclude_none=True)


class Conversation(BaseModel):
    session_id: str
    user_id: str | None = None
    messages: list[BotMessage] = Field(default_factory=list)
    context: ConversationContext = Field(default_factory=ConversationContext)
    created_at: datetime = Field(default_factory=_utcnow)
    last_activity: datetime = Field(default_factory=_utcnow)


class BotChatRequest(BaseModel):
    session_id: str | None = None
    message: str | None = None


class Recommendation(BaseModel):
    id: str | None = None
    title: str
    location: str
    country: str
    price: float
    image: str
    owner: str


class BotChatResponse(BaseModel):
    success: bool = True
    session_id: str
    bot_message: str
    recommendations: list[Recommendation] | None = None
    context: dict


class BotHistoryResponse(BaseModel):
    success: bool = True
    messages: list[BotMessage]
    context: dict


class BotResetRequest(BaseModel):
    session_id: str | None = None


class BotResetResponse(BaseModel):
    success: bool = True
    session_id: str
    message: str = "Conversation reset successfully"
