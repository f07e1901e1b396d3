from __future__ import annotations

from supabase import Client

REVIEW_SELECT = "*, users(username)"


def _flatten_author(row: dict) -> dict:
    author = row.pop("users", None)
    if isinstance(author, list):
        author = author[0] if author else None
    row["author_username"] = author.get("username") if author else None
    return row


async def get_reviews_by_listing(client: Client, listing_id: str) -> list[dict]:
    response = (
        client.table("reviews")
        .select(REVIEW_SELECT)
        .eq("listing_id", listing_id)
        .order("created_at", desc=True)
        .execute()
    )
    return [_flatten_author(row) for row in response.data or []]


async def get_review_by_id(client: Client, review_id: str) -> dict | None:
    response = (
        client.table("reviews")
        .select(REVIEW_SELECT)
        .eq("id", review_id)
        .limit(1)
        .execute()
    )
    if not response.data:
        return None
    return _flatten_author(response.data[0])


async def create_review(client: Client, data: dict) -> dict:
    response = client.table("reviews").insert(data).execute()
    return response.data[0]


async def delete_review(client: Client, review_id: str) -> bool:
    response = client.table("reviews").delete().eq("id", review_id).execute()
    return bool(response.data)


async def delete_reviews_by_listing(client: Client, listing_id: str) -> int:
    response = client.table("reviews").delete().eq("listing_id", listing_id).execute()
    return len(response.data or [])
