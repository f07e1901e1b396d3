from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class BookingCreate(BaseModel):
    check_in: date
    check_out: date
    guests: int = Field(..., ge=1)


class BookingResponse(BaseModel):
    id: str
    listing_id: str
    customer_id: str
    listing_title: str | None = None
    listing_owner_id: str | None = None
    check_in: date
    check_out: date
    guests: int
    total_price: float
    status: BookingStatus
    created_at: datetime | None = None


class BookingListResponse(BaseModel):
    items: list[BookingResponse]
