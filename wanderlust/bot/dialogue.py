"""Dialogue manager for the recommendation bot.

Each turn classifies the utterance, fills whatever slots it can, picks the next
prompt and, once enough is known, asks the recommender for listings. The input
conversation is never mutated: the turn works on a deep copy that the caller
persists, so a failed save leaves no half-applied turn behind.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from wanderlust.bot.intent import Intent, classify
from wanderlust.bot.slots import PriceRange, extract_guests, extract_location, extract_price
from wanderlust.schemas.conversation import BotMessage, Conversation, ConversationContext, Step

logger = logging.getLogger(__name__)

Recommender = Callable[[ConversationContext], Awaitable[list[dict]]]

ONBOARDING_TEXT = (
    "Hi! I'm your property recommendation assistant. "
    "I can help you find the perfect place to stay!\n\n"
    "Tell me:\n"
    "- Where would you like to stay?\n"
    "- What's your budget?\n"
    "- How many guests?\n\n"
    "Or just tell me what you're looking for!"
)
ASK_BUDGET_TEXT = "What's your budget per night? (e.g., 'under 5000' or '3000 to 8000')"
ASK_GUESTS_TEXT = "How many guests? (e.g., '2 people' or '4')"
CLARIFY_LOCATION_TEXT = (
    "I didn't catch the location. Could you specify the city or area? "
    "(e.g., 'Goa', 'Mumbai', 'Delhi')"
)
CLARIFY_BUDGET_TEXT = (
    "Could you specify your budget? For example:\n"
    "- 'under 5000'\n"
    "- '3000 to 8000'\n"
    "- 'maximum 10000'"
)
CLARIFY_GUESTS_TEXT = "How many guests? Please specify a number (e.g., '2' or '4 people')"
SEARCHING_TEXT = "Let me find the best properties for you..."
RECOMMEND_TEXT = "Here are my recommendations based on your preferences:"
NEED_MORE_INFO_TEXT = (
    "I need more information to recommend properties. Let's start:\n\n"
    "Where would you like to stay? (e.g., 'Goa', 'Mumbai')"
)
RESTART_TEXT = "Let's start fresh!\n\nWhere would you like to stay?"
ALL_SET_TEXT = "Perfect! Here are my recommendations:"
HELP_TEXT = (
    "I'm here to help you find properties! You can tell me:\n\n"
    "- Location (e.g., 'in Goa')\n"
    "- Budget (e.g., 'under 5000')\n"
    "- Guests (e.g., '2 people')\n\n"
    "Or type 'restart' to begin again."
)

# Order in which missing slots are asked for.
MISSING_SLOT_PROMPTS: list[tuple[str, str, Step]] = [
    ("location", "location", Step.LOCATION),
    ("min_price", "budget", Step.PRICE),
    ("guests", "number of guests", Step.GUESTS),
]


@dataclass
class TurnResult:
    conversation: Conversation
    intent: Intent
    bot_message: str
    recommendations: list[dict] | None = None
    restarted: bool = False


def _format_budget(price: PriceRange) -> str:
    if price.max is None:
        return f"₹{price.min:,} and above"
    return f"₹{price.min:,} - ₹{price.max:,}"


def _store_price(context: ConversationContext, price: PriceRange) -> None:
    context.min_price = price.min
    context.max_price = price.max


def _missing_slots(context: ConversationContext) -> list[tuple[str, Step]]:
    missing = []
    for field, label, step in MISSING_SLOT_PROMPTS:
        value = getattr(context, field)
        if value is None or value == "":
            missing.append((label, step))
    return missing


async def _on_greeting(context, message, recommend):
    context.step = Step.GATHERING_INFO
    return ONBOARDING_TEXT, None


async def _on_location(context, message, recommend):
    location = extract_location(message)
    if not location:
        return CLARIFY_LOCATION_TEXT, None
    context.location = location
    context.step = Step.PRICE
    return f"Great! Looking for properties in {location}.\n\n{ASK_BUDGET_TEXT}", None


async def _on_price(context, message, recommend):
    price = extract_price(message)
    if price is None:
        return CLARIFY_BUDGET_TEXT, None
    _store_price(context, price)
    context.step = Step.GUESTS
    return f"Perfect! Budget: {_format_budget(price)} per night.\n\n{ASK_GUESTS_TEXT}", None


async def _on_guests(context, message, recommend):
    guests = extract_guests(message)
    if guests is None:
        return CLARIFY_GUESTS_TEXT, None
    context.guests = guests
    context.step = Step.READY
    plural = "s" if guests > 1 else ""
    reply = f"Got it! {guests} guest{plural}.\n\n{SEARCHING_TEXT}"
    return reply, await recommend(context)


async def _on_recommend(context, message, recommend):
    if context.has_any_slot():
        return RECOMMEND_TEXT, await recommend(context)
    context.step = Step.LOCATION
    return NEED_MORE_INFO_TEXT, None


async def _on_unknown(context, message, recommend):
    location = extract_location(message)
    price = extract_price(message)
    guests = extract_guests(message)
    if not (location or price or guests):
        return HELP_TEXT, None

    if location:
        context.location = location
    if price is not None:
        _store_price(context, price)
    if guests:
        context.guests = guests

    missing = _missing_slots(context)
    if not missing:
        context.step = Step.READY
        return ALL_SET_TEXT, await recommend(context)

    labels = ", ".join(label for label, _ in missing)
    first_label, first_step = missing[0]
    context.step = first_step
    return f"Got it! I still need: {labels}\n\nPlease provide the {first_label}.", None


_HANDLERS = {
    Intent.GREETING: _on_greeting,
    Intent.LOCATION: _on_location,
    Intent.PRICE: _on_price,
    Intent.GUESTS: _on_guests,
    Intent.RECOMMEND: _on_recommend,
    Intent.UNKNOWN: _on_unknown,
}


async def handle_turn(
    conversation: Conversation,
    message: str,
    recommend: Recommender,
    now: datetime | None = None,
) -> TurnResult:
    now = now or datetime.now(timezone.utc)
    updated = conversation.model_copy(deep=True)
    intent = classify(message)
    logger.info("Bot turn session=%s intent=%s", conversation.session_id, intent.value)

    if intent is Intent.RESTART:
        updated.context = ConversationContext()
        updated.messages = []
        updated.last_activity = max(now, updated.last_activity)
        return TurnResult(updated, intent, RESTART_TEXT, restarted=True)

    updated.messages.append(BotMessage(sender="user", text=message, timestamp=now))
    reply, recommendations = await _HANDLERS[intent](updated.context, message, recommend)
    updated.messages.append(BotMessage(sender="bot", text=reply, timestamp=now))
    updated.last_activity = max(now, updated.last_activity)

    return TurnResult(updated, intent, reply, recommendations=recommendations)
