from __future__ import annotations

from supabase import Client

USER_FIELDS = "id, email, username, is_admin"


async def get_user_by_email(client: Client, email: str) -> dict | None:
    response = client.table("users").select(USER_FIELDS).eq("email", email).limit(1).execute()
    return response.data[0] if response.data else None


async def get_user_by_id(client: Client, user_id: str) -> dict | None:
    response = client.table("users").select(USER_FIELDS).eq("id", user_id).limit(1).execute()
    return response.data[0] if response.data else None
