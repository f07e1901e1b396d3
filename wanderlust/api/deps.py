from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from supabase import Client

from wanderlust.core.security import decode_access_token
from wanderlust.crud.user import get_user_by_email
from wanderlust.db.base import get_supabase
from wanderlust.services.access import RequestContext

# Tokens are issued by the external auth service at tokenUrl; this API only verifies them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


async def _user_from_token(client: Client, token: str) -> dict | None:
    try:
        payload = decode_access_token(token)
    except (JWTError, ValueError):
        return None
    email: str | None = payload.get("sub")
    if email is None:
        return None
    return await get_user_by_email(client, email=email)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    client: Client = Depends(get_supabase)
) -> dict:
    """Get current user from JWT token using Supabase."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user = await _user_from_token(client, token)
    if user is None:
        raise credentials_exception

    return user


async def get_optional_user(
    token: str | None = Depends(optional_oauth2_scheme),
    client: Client = Depends(get_supabase),
) -> dict | None:
    """Current user when a valid token is sent, otherwise None (anonymous)."""
    if not token:
        return None
    return await _user_from_token(client, token)


async def get_request_context(current_user: dict = Depends(get_current_user)) -> RequestContext:
    return RequestContext.from_user(current_user)
