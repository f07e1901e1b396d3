"""Persistence for recommendation-bot conversations.

One row per session in ``bot_conversations``; ``messages`` and ``context`` are
jsonb columns. Rows whose ``last_activity`` falls outside the retention window
are treated as gone even before the sweeper deletes them.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from supabase import Client

from wanderlust.schemas.conversation import Conversation

TABLE = "bot_conversations"
DEFAULT_RETENTION_DAYS = 7


def new_session_id() -> str:
    return uuid.uuid4().hex


def _cutoff(retention_days: int, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return (now - timedelta(days=retention_days)).isoformat()


async def load_conversation(
    client: Client,
    session_id: str,
    retention_days: int = DEFAULT_RETENTION_DAYS,
    now: datetime | None = None,
) -> Conversation | None:
    response = (
        client.table(TABLE)
        .select("*")
        .eq("session_id", session_id)
        .gte("last_activity", _cutoff(retention_days, now))
        .limit(1)
        .execute()
    )
    if not response.data:
        return None
    return Conversation.model_validate(response.data[0])


async def load_or_create_conversation(
    client: Client,
    session_id: str | None,
    user_id: str | None = None,
    retention_days: int = DEFAULT_RETENTION_DAYS,
    now: datetime | None = None,
) -> Conversation:
    """Load the session, or start a fresh one under a new id when it is unknown."""
    if session_id:
        conversation = await load_conversation(
            client, session_id, retention_days=retention_days, now=now
        )
        if conversation is not None:
            return conversation

    return Conversation(session_id=new_session_id(), user_id=user_id)


async def save_conversation(client: Client, conversation: Conversation) -> None:
    row = conversation.model_dump(mode="json")
    client.table(TABLE).upsert(row, on_conflict="session_id").execute()


async def delete_conversation(client: Client, session_id: str) -> None:
    client.table(TABLE).delete().eq("session_id", session_id).execute()


async def purge_expired_conversations(
    client: Client,
    retention_days: int = DEFAULT_RETENTION_DAYS,
    now: datetime | None = None,
) -> int:
    response = (
        client.table(TABLE)
        .delete()
        .lt("last_activity", _cutoff(retention_days, now))
        .execute()
    )
    return len(response.data or [])
