#!/usr/bin/env python3
"""
Database cleanup jobs. Nothing runs unless asked for.

Usage (from project root):
    python scripts/clean_db.py --rejected-bookings      # delete rejected bookings
    python scripts/clean_db.py --old-bookings           # delete confirmed bookings checked out 30+ days ago
    python scripts/clean_db.py --expired-conversations  # purge bot conversations past retention
    python scripts/clean_db.py --fix-image-urls         # repair quoted / stringified listing image URLs
"""

import argparse
import asyncio
import logging
import os
import sys

# Allow running as `python scripts/clean_db.py` from project root.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from wanderlust.core.config import get_settings
from wanderlust.db.base import get_supabase
from wanderlust.services.maintenance import (
    cleanup_expired_conversations,
    cleanup_old_bookings,
    cleanup_rejected_bookings,
    fix_image_urls,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("clean_db")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Wanderlust database cleanup")
    parser.add_argument("--rejected-bookings", action="store_true")
    parser.add_argument("--old-bookings", action="store_true")
    parser.add_argument("--expired-conversations", action="store_true")
    parser.add_argument("--fix-image-urls", action="store_true")
    return parser.parse_args(argv)


async def main(argv: list[str]) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    client = get_supabase()

    if not any(vars(args).values()):
        logger.warning("No cleanup selected. Pass --help to see the available jobs.")
        return 1

    if args.rejected_bookings:
        await cleanup_rejected_bookings(client)
    if args.old_bookings:
        await cleanup_old_bookings(client, age_days=settings.booking_cleanup_age_days)
    if args.expired_conversations:
        await cleanup_expired_conversations(
            client, retention_days=settings.conversation_retention_days
        )
    if args.fix_image_urls:
        fixed = await fix_image_urls(client)
        logger.info("Fixed %d listing image URLs", len(fixed))

    logger.info("Database cleanup completed")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
