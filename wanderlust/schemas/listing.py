from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from wanderlust.schemas.review import ReviewResponse


class ListingCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=30)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1, max_length=27)
    price: float = Field(..., ge=300)
    image_url: str | None = None
    category: str | None = None


class ListingUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(None, min_length=1, max_length=30)
    description: str | None = Field(None, min_length=1)
    location: str | None = Field(None, min_length=1)
    country: str | None = Field(None, min_length=1, max_length=27)
    price: float | None = Field(None, ge=300)
    image_url: str | None = None
    category: str | None = None


class ListingResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    location: str | None = None
    country: str | None = None
    price: float
    image_url: str | None = None
    category: str | None = None
    owner_id: str
    geometry: dict | None = None
    created_at: datetime | None = None


class ListingDetailResponse(ListingResponse):
    reviews: list[ReviewResponse] = Field(default_factory=list)


class ListingListResponse(BaseModel):
    items: list[ListingResponse]


class ListingFilter(BaseModel):
    """Store-agnostic listing search.

    ``text`` is matched case-insensitively as a substring of any of
    ``text_fields``; the price bounds are inclusive and either may be absent.
    """

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    text_fields: tuple[str, ...] = ("location", "country", "title")
    min_price: int | None = None
    max_price: int | None = None
    limit: int = 5
    order_by: str = "price"
    descending: bool = False
