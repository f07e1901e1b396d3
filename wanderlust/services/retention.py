"""Background sweep that deletes bot conversations past the retention window."""

from __future__ import annotations

import asyncio
import logging

from wanderlust.core.config import get_settings
from wanderlust.crud.conversation import purge_expired_conversations
from wanderlust.db.base import get_supabase

logger = logging.getLogger(__name__)

_sweeper_task: asyncio.Task | None = None


async def sweep_once() -> int:
    settings = get_settings()
    removed = await purge_expired_conversations(
        get_supabase(), retention_days=settings.conversation_retention_days
    )
    if removed:
        logger.info("Retention sweep removed %d expired bot conversations", removed)
    return removed


async def _sweep_forever(interval_seconds: int) -> None:
    while True:
        try:
            await sweep_once()
        except Exception as e:
            logger.warning(f"Conversation retention sweep failed: {e}")
        await asyncio.sleep(interval_seconds)


async def start_retention_sweeper() -> None:
    global _sweeper_task
    if _sweeper_task is not None:
        return
    settings = get_settings()
    _sweeper_task = asyncio.create_task(
        _sweep_forever(settings.retention_sweep_interval_seconds)
    )


async def stop_retention_sweeper() -> None:
    global _sweeper_task
    if _sweeper_task is None:
        return
    _sweeper_task.cancel()
    try:
        await _sweeper_task
    except asyncio.CancelledError:
        pass
    _sweeper_task = None
