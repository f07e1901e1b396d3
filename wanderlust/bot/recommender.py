"""Turns a conversation context into a listing search and shapes the results."""

from __future__ import annotations

import logging
from typing import Any

from supabase import Client

from wanderlust.crud.listing import find_listings
from wanderlust.schemas.conversation import ConversationContext
from wanderlust.schemas.listing import ListingFilter

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_URL = "https://images.unsplash.com/photo-1625505826533-5c80aca7d157?w=400"
RECOMMENDATION_LIMIT = 5


def build_filter(context: ConversationContext, limit: int = RECOMMENDATION_LIMIT) -> ListingFilter:
    # Guest count is collected but listings have no capacity column to filter on.
    return ListingFilter(
        text=context.location or None,
        min_price=context.min_price,
        max_price=context.max_price,
        limit=limit,
        order_by="price",
    )


async def find_recommendations(
    client: Client,
    context: ConversationContext,
    limit: int = RECOMMENDATION_LIMIT,
) -> list[dict]:
    """Run the recommendation query. Store failures degrade to no results."""
    listing_filter = build_filter(context, limit=limit)
    try:
        listings = await find_listings(client, listing_filter)
    except Exception as e:
        logger.error(f"Recommendation query failed for {listing_filter!r}: {e}")
        return []
    logger.info("Recommendation query returned %d listings", len(listings))
    return listings


def _owner_name(owner: Any) -> str:
    if isinstance(owner, dict):
        return str(owner.get("username") or "Host")
    if isinstance(owner, str) and owner:
        return owner
    return "Host"


def _image_url(image: Any) -> str:
    if isinstance(image, dict):
        return str(image.get("url") or DEFAULT_IMAGE_URL)
    if isinstance(image, str) and image:
        return image
    return DEFAULT_IMAGE_URL


def to_recommendation(listing: dict) -> dict:
    listing_id = listing.get("id")
    return {
        "id": str(listing_id) if listing_id is not None else None,
        "title": listing.get("title") or "Untitled Property",
        "location": listing.get("location") or "Location not specified",
        "country": listing.get("country") or "Country not specified",
        "price": listing.get("price") or 0,
        "image": _image_url(listing.get("image_url")),
        "owner": _owner_name(listing.get("users")),
    }
