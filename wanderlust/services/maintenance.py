"""One-off database cleanup jobs, run from ``scripts/clean_db.py``."""

from __future__ import annotations

import logging
import re
from datetime import date, timedelta

from supabase import Client

from wanderlust.crud.booking import delete_confirmed_bookings_before, delete_rejected_bookings
from wanderlust.crud.conversation import purge_expired_conversations
from wanderlust.crud.listing import get_listings, update_listing_image

logger = logging.getLogger(__name__)

_STRINGIFIED_URL_RE = re.compile(r"url:\s*['\"](https?://[^'\"]+)['\"]")


def normalize_image_url(url: str | None) -> str | None:
    """Repair an image URL saved with wrapping quotes or as a stringified object.

    Returns the repaired URL, or None when the value needs no change.
    """
    if not url:
        return None

    fixed = url
    if len(fixed) >= 2 and fixed[0] == fixed[-1] and fixed[0] in ("'", '"'):
        fixed = fixed[1:-1]

    if "filename" in fixed and "url" in fixed:
        match = _STRINGIFIED_URL_RE.search(fixed)
        if match:
            fixed = match.group(1)

    return fixed if fixed != url else None


async def cleanup_rejected_bookings(client: Client) -> int:
    removed = await delete_rejected_bookings(client)
    logger.info("Deleted %d rejected bookings", removed)
    return removed


async def cleanup_old_bookings(
    client: Client, age_days: int = 30, today: date | None = None
) -> int:
    cutoff = (today or date.today()) - timedelta(days=age_days)
    removed = await delete_confirmed_bookings_before(client, cutoff)
    logger.info("Deleted %d completed bookings that checked out before %s", removed, cutoff)
    return removed


async def cleanup_expired_conversations(client: Client, retention_days: int = 7) -> int:
    removed = await purge_expired_conversations(client, retention_days=retention_days)
    logger.info("Deleted %d expired bot conversations", removed)
    return removed


async def fix_image_urls(client: Client) -> list[str]:
    fixed_ids = []
    for listing in await get_listings(client):
        fixed = normalize_image_url(listing.get("image_url"))
        if fixed is None:
            continue
        await update_listing_image(client, listing["id"], fixed)
        logger.info(f"Fixed listing {listing['id']}: {fixed}")
        fixed_ids.append(listing["id"])
    return fixed_ids
