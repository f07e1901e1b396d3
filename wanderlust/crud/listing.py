from __future__ import annotations

from supabase import Client

from wanderlust.schemas.listing import ListingFilter

LISTING_SELECT = "*, users(username)"


def _ilike_value(text: str) -> str:
    # Quoted so commas and parentheses in the search text do not break the or= filter.
    cleaned = text.replace("%", "").replace("*", "").strip()
    escaped = cleaned.replace("\\", "\\\\").replace('"', '\\"')
    return f'"%{escaped}%"'


def text_match_clause(text: str, fields: tuple[str, ...]) -> str:
    value = _ilike_value(text)
    return ",".join(f"{field}.ilike.{value}" for field in fields)


async def find_listings(client: Client, listing_filter: ListingFilter) -> list[dict]:
    query = client.table("listings").select(LISTING_SELECT)
    if listing_filter.text:
        query = query.or_(text_match_clause(listing_filter.text, listing_filter.text_fields))
    if listing_filter.min_price is not None:
        query = query.gte("price", listing_filter.min_price)
    if listing_filter.max_price is not None:
        query = query.lte("price", listing_filter.max_price)
    response = (
        query.order(listing_filter.order_by, desc=listing_filter.descending)
        .limit(listing_filter.limit)
        .execute()
    )
    return response.data or []


async def get_listings(
    client: Client, category: str | None = None, search: str | None = None
) -> list[dict]:
    query = client.table("listings").select("*")
    if category and category != "all":
        query = query.eq("category", category)
    if search:
        query = query.ilike("country", f"%{search.strip()}%")
    response = query.order("created_at", desc=True).execute()
    return response.data or []


async def get_listing_by_id(client: Client, listing_id: str) -> dict | None:
    response = client.table("listings").select("*").eq("id", listing_id).execute()
    return response.data[0] if response.data else None


async def create_listing(client: Client, data: dict) -> dict:
    response = client.table("listings").insert(data).execute()
    return response.data[0]


async def update_listing(client: Client, listing_id: str, data: dict) -> dict | None:
    client.table("listings").update(data).eq("id", listing_id).execute()
    return await get_listing_by_id(client, listing_id)


async def delete_listing(client: Client, listing_id: str) -> bool:
    response = client.table("listings").delete().eq("id", listing_id).execute()
    return bool(response.data)


async def get_listing_ids_by_owner(client: Client, owner_id: str) -> list[str]:
    response = client.table("listings").select("id").eq("owner_id", owner_id).execute()
    return [row["id"] for row in response.data or []]


async def update_listing_image(client: Client, listing_id: str, image_url: str) -> None:
    client.table("listings").update({"image_url": image_url}).eq("id", listing_id).execute()
