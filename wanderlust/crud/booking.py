from __future__ import annotations

from datetime import date

from supabase import Client

BOOKING_SELECT = "*, listings(id, title, price, owner_id)"


def _flatten_listing(row: dict) -> dict:
    listing = row.pop("listings", None)
    if isinstance(listing, list):
        listing = listing[0] if listing else None
    row["listing_title"] = listing.get("title") if listing else None
    row["listing_owner_id"] = listing.get("owner_id") if listing else None
    return row


async def get_booking_by_id(client: Client, booking_id: str) -> dict | None:
    response = (
        client.table("bookings")
        .select(BOOKING_SELECT)
        .eq("id", booking_id)
        .execute()
    )
    if not response.data:
        return None
    return _flatten_listing(response.data[0])


async def get_bookings_by_customer(client: Client, customer_id: str) -> list[dict]:
    response = (
        client.table("bookings")
        .select(BOOKING_SELECT)
        .eq("customer_id", customer_id)
        .order("created_at", desc=True)
        .execute()
    )
    return [_flatten_listing(row) for row in response.data or []]


async def get_bookings_by_listings(client: Client, listing_ids: list[str]) -> list[dict]:
    if not listing_ids:
        return []
    response = (
        client.table("bookings")
        .select(BOOKING_SELECT)
        .in_("listing_id", listing_ids)
        .order("created_at", desc=True)
        .execute()
    )
    return [_flatten_listing(row) for row in response.data or []]


async def get_all_bookings(client: Client) -> list[dict]:
    response = (
        client.table("bookings")
        .select(BOOKING_SELECT)
        .order("created_at", desc=True)
        .execute()
    )
    return [_flatten_listing(row) for row in response.data or []]


async def create_booking(client: Client, data: dict) -> dict:
    response = client.table("bookings").insert(data).execute()
    return response.data[0]


async def update_booking_status(client: Client, booking_id: str, status: str) -> dict | None:
    client.table("bookings").update({"status": status}).eq("id", booking_id).execute()
    return await get_booking_by_id(client, booking_id)


async def delete_booking(client: Client, booking_id: str) -> bool:
    response = client.table("bookings").delete().eq("id", booking_id).execute()
    return bool(response.data)


async def delete_rejected_bookings(client: Client) -> int:
    response = client.table("bookings").delete().eq("status", "rejected").execute()
    return len(response.data or [])


async def delete_confirmed_bookings_before(client: Client, checkout_before: date) -> int:
    response = (
        client.table("bookings")
        .delete()
        .eq("status", "confirmed")
        .lt("check_out", checkout_before.isoformat())
        .execute()
    )
    return len(response.data or [])
