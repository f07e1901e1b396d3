"""Rule-based intent classification for the recommendation bot.

Patterns are evaluated in order and the first match wins, so an utterance such
as "hi, anything in Goa?" is a greeting even though it also names a place.
"""

from __future__ import annotations

import re
from enum import Enum


class Intent(str, Enum):
    GREETING = "greeting"
    LOCATION = "location"
    PRICE = "price"
    GUESTS = "guests"
    RECOMMEND = "recommend"
    RESTART = "restart"
    UNKNOWN = "unknown"


def _keywords(*words: str) -> re.Pattern[str]:
    return re.compile(r"\b(?:" + "|".join(words) + r")\b", re.IGNORECASE)


INTENT_PATTERNS: list[tuple[re.Pattern[str], Intent]] = [
    (_keywords("hi", "hello", "hey", "help", "assist", r"start(?!\s+over)"), Intent.GREETING),
    (
        _keywords("in", "at", "near", "location", "place", "city", "country", "area"),
        Intent.LOCATION,
    ),
    (
        # Comparatives only count when a number follows, so "start over" is not a budget.
        re.compile(
            r"[₹$€£]|\b(?:price|cost|budget|cheap|expensive|affordable|rs|inr)\b"
            r"|\b(?:under|below|less than|max|maximum|above|over|more than|min|minimum"
            r"|between)\s*[₹$€£]?\s*\d",
            re.IGNORECASE,
        ),
        Intent.PRICE,
    ),
    (
        _keywords(
            "guests?", "people", "person", "persons", "travell?ers", "family", "group"
        ),
        Intent.GUESTS,
    ),
    (
        _keywords(
            "show", "find", "search", "recommend", "suggest", "list", "properties", "listings"
        ),
        Intent.RECOMMEND,
    ),
    (_keywords("restart", "reset", "start over", "begin again"), Intent.RESTART),
]


def classify(utterance: str) -> Intent:
    text = (utterance or "").strip().lower()
    for pattern, intent in INTENT_PATTERNS:
        if pattern.search(text):
            return intent
    return Intent.UNKNOWN
