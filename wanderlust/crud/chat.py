from __future__ import annotations

from datetime import datetime, timezone

from supabase import Client


async def get_chat_by_booking(client: Client, booking_id: str) -> dict | None:
    response = (
        client.table("chats")
        .select("*")
        .eq("booking_id", booking_id)
        .limit(1)
        .execute()
    )
    return response.data[0] if response.data else None


async def create_chat(client: Client, booking_id: str, participants: list[str]) -> dict:
    row = {
        "booking_id": booking_id,
        "participants": participants,
        "last_message_at": datetime.now(timezone.utc).isoformat(),
    }
    response = client.table("chats").insert(row).execute()
    return response.data[0]


async def get_or_create_chat(client: Client, booking_id: str, participants: list[str]) -> dict:
    chat = await get_chat_by_booking(client, booking_id)
    if chat is not None:
        return chat
    return await create_chat(client, booking_id, participants)


async def get_chat_messages(client: Client, chat_id: str, limit: int = 200) -> list[dict]:
    response = (
        client.table("chat_messages")
        .select("*")
        .eq("chat_id", chat_id)
        .order("timestamp")
        .limit(limit)
        .execute()
    )
    return response.data or []


async def create_message(client: Client, chat_id: str, sender_id: str, content: str) -> dict:
    now = datetime.now(timezone.utc).isoformat()
    row = {
        "chat_id": chat_id,
        "sender_id": sender_id,
        "content": content,
        "timestamp": now,
        "is_read": False,
    }
    response = client.table("chat_messages").insert(row).execute()
    client.table("chats").update({"last_message_at": now}).eq("id", chat_id).execute()
    return response.data[0]


async def mark_messages_read(client: Client, chat_id: str, reader_id: str) -> int:
    """Mark the other participants' unread messages in a chat as read."""
    response = (
        client.table("chat_messages")
        .update({"is_read": True})
        .eq("chat_id", chat_id)
        .neq("sender_id", reader_id)
        .eq("is_read", False)
        .execute()
    )
    return len(response.data or [])


async def count_unread_messages(client: Client, user_id: str) -> int:
    chats = (
        client.table("chats")
        .select("id")
        .contains("participants", [user_id])
        .execute()
    )
    chat_ids = [row["id"] for row in chats.data or []]
    if not chat_ids:
        return 0

    unread = (
        client.table("chat_messages")
        .select("id")
        .in_("chat_id", chat_ids)
        .neq("sender_id", user_id)
        .eq("is_read", False)
        .execute()
    )
    return len(unread.data or [])
