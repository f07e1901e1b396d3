"""Slot extractors: location, price range and guest count from free text.

Each extractor is a pure function of the raw utterance and returns ``None``
when it finds nothing. None of them raise.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

WORD_NUMBERS: dict[str, int] = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
}

_LOCATION_RE = re.compile(r"\b(?:in|at|near)\s+([a-z][a-z\s,]*)", re.IGNORECASE)

_CURRENCY_RE = re.compile(r"[₹$€£]|\b(?:rs\.?|inr)(?=\s|\d|$)", re.IGNORECASE)
_DIGIT_GROUPING_RE = re.compile(r"(?<=\d),(?=\d)")

_PRICE_UNDER_RE = re.compile(r"\b(?:under|below|less than|max|maximum)\s*(\d+)")
_PRICE_ABOVE_RE = re.compile(r"\b(?:above|over|more than|min|minimum)\s*(\d+)")
_PRICE_BETWEEN_RE = re.compile(r"\b(?:between|from)\s*(\d+)\s*(?:and|to|-)\s*(\d+)")
_PRICE_RANGE_RE = re.compile(r"(\d+)\s*(?:to|-)\s*(\d+)")
_PRICE_SINGLE_RE = re.compile(r"(\d+)")

_GUESTS_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class PriceRange:
    min: int
    max: int | None  # None means no upper bound


def extract_location(message: str) -> str | None:
    """Find the place the user is asking about.

    Tries "in/at/near <place>" first. Otherwise falls back to every word longer
    than two characters joined together. The fallback is a heuristic guess and
    happily returns non-places ("thanks" becomes a location); callers rely on
    it to fill the slot opportunistically.
    """
    if not message:
        return None

    match = _LOCATION_RE.search(message)
    if match:
        location = match.group(1).strip(" ,")
        if location:
            return location

    words = [word for word in message.split() if len(word) > 2]
    if words:
        return " ".join(words)
    return None


def _normalize_price_text(message: str) -> str:
    text = _CURRENCY_RE.sub(" ", message.lower())
    return _DIGIT_GROUPING_RE.sub("", text)


def extract_price(message: str) -> PriceRange | None:
    if not message:
        return None
    text = _normalize_price_text(message)

    match = _PRICE_UNDER_RE.search(text)
    if match:
        return PriceRange(min=0, max=int(match.group(1)))

    match = _PRICE_ABOVE_RE.search(text)
    if match:
        return PriceRange(min=int(match.group(1)), max=None)

    # Reversed bounds are kept as given.
    match = _PRICE_BETWEEN_RE.search(text) or _PRICE_RANGE_RE.search(text)
    if match:
        return PriceRange(min=int(match.group(1)), max=int(match.group(2)))

    match = _PRICE_SINGLE_RE.search(text)
    if match:
        return PriceRange(min=0, max=int(match.group(1)))

    return None


def extract_guests(message: str) -> int | None:
    """First integer in the text, else the first number word found.

    Number words are checked in ``WORD_NUMBERS`` order, not by position in the
    text: "ten or two" yields 2.
    """
    if not message:
        return None

    match = _GUESTS_RE.search(message)
    if match:
        count = int(match.group(0))
        return count if count >= 1 else None

    lowered = message.lower()
    for word, number in WORD_NUMBERS.items():
        if re.search(rf"\b{word}\b", lowered):
            return number
    return None
