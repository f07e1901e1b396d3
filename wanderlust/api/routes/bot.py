"""Recommendation bot API routes: anonymous access allowed.

Endpoints:
  POST /v1.0/bot/chat: send a message, get the bot reply (and recommendations)
  GET  /v1.0/bot/history/{session_id}: messages and context of a session
  POST /v1.0/bot/reset: drop a session and get a new session id
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from supabase import Client

from wanderlust.api import deps
from wanderlust.bot.dialogue import handle_turn
from wanderlust.bot.recommender import find_recommendations, to_recommendation
from wanderlust.core.config import get_settings
from wanderlust.core.errors import TransientStoreError, ValidationError
from wanderlust.crud.conversation import (
    delete_conversation,
    load_conversation,
    load_or_create_conversation,
    new_session_id,
    save_conversation,
)
from wanderlust.db.base import get_supabase
from wanderlust.schemas.conversation import (
    BotChatRequest,
    BotChatResponse,
    BotHistoryResponse,
    BotResetRequest,
    BotResetResponse,
    ConversationContext,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1.0/bot", tags=["bot"])


@router.post("/chat", response_model=BotChatResponse)
async def chat_with_bot(
    payload: BotChatRequest,
    current_user: dict | None = Depends(deps.get_optional_user),
    client: Client = Depends(get_supabase),
):
    """Run one bot turn and persist it."""
    message = payload.message
    if not message or not message.strip():
        raise ValidationError("Please provide a valid message.")

    settings = get_settings()
    try:
        conversation = await load_or_create_conversation(
            client,
            payload.session_id,
            user_id=current_user["id"] if current_user else None,
            retention_days=settings.conversation_retention_days,
        )
    except Exception:
        logger.exception("Failed to load bot conversation %s", payload.session_id)
        raise TransientStoreError()

    async def recommend(context: ConversationContext) -> list[dict]:
        return await find_recommendations(client, context, limit=settings.recommendation_limit)

    turn = await handle_turn(conversation, message, recommend)
    result = turn.conversation

    if turn.restarted:
        now = datetime.now(timezone.utc)
        result = result.model_copy(
            update={"session_id": new_session_id(), "created_at": now, "last_activity": now}
        )

    try:
        await save_conversation(client, result)
    except Exception:
        logger.exception("Failed to save bot conversation %s", result.session_id)
        raise TransientStoreError()

    # The old session is only dropped once its replacement is stored.
    if turn.restarted:
        try:
            await delete_conversation(client, conversation.session_id)
        except Exception as e:
            logger.warning(
                f"Could not delete restarted bot conversation {conversation.session_id}, "
                f"leaving it to the retention sweep: {e}"
            )

    recommendations = None
    if turn.recommendations:
        recommendations = [to_recommendation(listing) for listing in turn.recommendations]

    return BotChatResponse(
        session_id=result.session_id,
        bot_message=turn.bot_message,
        recommendations=recommendations,
        context=result.context.public(),
    )


@router.get("/history/{session_id}", response_model=BotHistoryResponse)
async def get_bot_history(
    session_id: str,
    client: Client = Depends(get_supabase),
):
    """Get message history for a bot session. Unknown sessions look brand new."""
    settings = get_settings()
    conversation = await load_conversation(
        client, session_id, retention_days=settings.conversation_retention_days
    )
    if conversation is None:
        return BotHistoryResponse(messages=[], context=ConversationContext().public())
    return BotHistoryResponse(
        messages=conversation.messages,
        context=conversation.context.public(),
    )


@router.post("/reset", response_model=BotResetResponse)
async def reset_bot_conversation(
    payload: BotResetRequest,
    client: Client = Depends(get_supabase),
):
    """Delete a bot session and hand out a new session id."""
    if payload.session_id:
        await delete_conversation(client, payload.session_id)
    return BotResetResponse(session_id=new_session_id())
