from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi import HTTPException

from wanderlust.api import deps
from wanderlust.core.security import create_access_token
from wanderlust.services.access import RequestContext


@pytest.fixture
def users(storage):
    storage["users"] = [
        {"id": "user-1", "email": "asha@example.com", "username": "asha", "is_admin": False},
        {"id": "admin-1", "email": "root@example.com", "username": "root", "is_admin": True},
    ]
    return storage


def test_valid_token_resolves_user(users, fake_client):
    token = create_access_token("asha@example.com")

    user = _run_async(deps.get_current_user(token=token, client=fake_client))

    assert user["id"] == "user-1"


def test_expired_token_is_unauthorized(users, fake_client):
    token = create_access_token("asha@example.com", expires_delta=timedelta(minutes=-5))

    with pytest.raises(HTTPException) as exc_info:
        _run_async(deps.get_current_user(token=token, client=fake_client))

    assert exc_info.value.status_code == 401


def test_unknown_user_is_unauthorized(users, fake_client):
    token = create_access_token("ghost@example.com")

    with pytest.raises(HTTPException):
        _run_async(deps.get_current_user(token=token, client=fake_client))


def test_optional_user_is_none_without_token(fake_client):
    assert _run_async(deps.get_optional_user(token=None, client=fake_client)) is None


def test_optional_user_ignores_garbage_token(users, fake_client):
    assert _run_async(deps.get_optional_user(token="not-a-jwt", client=fake_client)) is None


def test_request_context_carries_admin_flag(users, fake_client):
    token = create_access_token("root@example.com")
    user = _run_async(deps.get_current_user(token=token, client=fake_client))

    ctx = _run_async(deps.get_request_context(current_user=user))

    assert ctx == RequestContext(user_id="admin-1", is_admin=True)


def _run_async(coro):
    import asyncio

    return asyncio.run(coro)
