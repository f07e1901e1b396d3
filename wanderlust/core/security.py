from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import jwt

from wanderlust.core.config import get_settings


def create_access_token(subject: str, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {"sub": subject, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and verify a bearer token. Raises JWTError on bad signature or expiry."""
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.algorithm])
