from __future__ import annotations

import math
from datetime import date

SECONDS_PER_DAY = 24 * 60 * 60


def validate_dates(check_in: date, check_out: date, today: date | None = None) -> str | None:
    """Validate booking dates. Returns error message or None if valid."""
    today = today or date.today()
    if check_in < today:
        return "Check-in date must be today or a future date"
    if check_out <= check_in:
        return "Check-out date must be after check-in date"
    return None


def validate_guests(count: int) -> str | None:
    """Validate guest count. Returns error message or None if valid."""
    if not isinstance(count, int) or count < 1:
        return "Guest count must be at least 1."
    return None


def compute_total_price(check_in: date, check_out: date, nightly_price: float) -> float:
    nights = math.ceil((check_out - check_in).total_seconds() / SECONDS_PER_DAY)
    return nights * float(nightly_price)


def clean_chat_message(text: str | None) -> str | None:
    """Trimmed message text, or None when there is nothing left to send."""
    if text is None:
        return None
    cleaned = text.strip()
    return cleaned or None
