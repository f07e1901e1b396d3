from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from wanderlust.api import deps
from wanderlust.api.routes import chat as chat_routes
from wanderlust.core.errors import register_exception_handlers
from wanderlust.db.base import get_supabase
from wanderlust.services.access import RequestContext

chat_test_app = FastAPI()
chat_test_app.include_router(chat_routes.router)
register_exception_handlers(chat_test_app)

CUSTOMER = RequestContext(user_id="customer-1")
OWNER = RequestContext(user_id="owner-1")
ADMIN = RequestContext(user_id="admin-1", is_admin=True)
STRANGER = RequestContext(user_id="stranger-1")


def _booking_row(status: str = "confirmed", owner_id: str = "owner-1") -> dict:
    return {
        "id": "booking-1",
        "listing_id": "listing-1",
        "customer_id": "customer-1",
        "status": status,
        "listings": {"id": "listing-1", "title": "Beach Hut", "price": 1000, "owner_id": owner_id},
    }


@pytest.fixture
def as_user(fake_client):
    def _client_for(ctx: RequestContext) -> TestClient:
        chat_test_app.dependency_overrides[get_supabase] = lambda: fake_client
        chat_test_app.dependency_overrides[deps.get_request_context] = lambda: ctx
        return TestClient(chat_test_app)

    try:
        yield _client_for
    finally:
        chat_test_app.dependency_overrides = {}


def _send(client: TestClient, message):
    return client.post("/v1.0/chats/bookings/booking-1/messages", json={"message": message})


def test_participant_sends_on_confirmed_booking(as_user, storage):
    storage["bookings"] = [_booking_row("confirmed")]

    response = _send(as_user(CUSTOMER), "  Hello host!  ")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"]["content"] == "Hello host!"
    assert body["message"]["sender"] == "customer-1"
    assert storage["chats"][0]["participants"] == ["customer-1", "owner-1"]
    assert [m["content"] for m in storage["chat_messages"]] == ["Hello host!"]


@pytest.mark.parametrize("status", ["pending", "rejected"])
def test_chat_is_locked_until_confirmed(as_user, storage, status):
    storage["bookings"] = [_booking_row(status)]

    response = _send(as_user(CUSTOMER), "Hello")

    assert response.status_code == 403
    assert response.json() == {
        "success": False,
        "error": "Chat is only available for confirmed bookings",
    }
    assert not storage.get("chats")
    assert not storage.get("chat_messages")


def test_stranger_gets_access_once_they_own_the_listing(as_user, storage):
    storage["bookings"] = [_booking_row("confirmed")]

    denied = _send(as_user(STRANGER), "Hi")
    assert denied.status_code == 403
    assert denied.json()["error"] == "You don't have permission to access this chat"

    storage["bookings"] = [_booking_row("confirmed", owner_id=STRANGER.user_id)]
    assert _send(as_user(STRANGER), "Hi").status_code == 200


def test_admin_may_join_the_thread(as_user, storage):
    storage["bookings"] = [_booking_row("confirmed")]

    assert _send(as_user(ADMIN), "Checking in").status_code == 200


def test_empty_message_is_rejected_before_lookup(as_user, storage):
    response = _send(as_user(CUSTOMER), "   ")

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Message cannot be empty"}


def test_unknown_booking_is_404(as_user, storage):
    response = as_user(CUSTOMER).get("/v1.0/chats/bookings/booking-1")

    assert response.status_code == 404


def test_store_failure_surfaces_retry_message(as_user, storage, monkeypatch):
    storage["bookings"] = [_booking_row("confirmed")]
    monkeypatch.setattr(chat_routes, "create_message", AsyncMock(side_effect=RuntimeError("boom")))

    response = _send(as_user(CUSTOMER), "Hello")

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert not storage.get("chat_messages")


def test_opening_thread_marks_incoming_messages_read(as_user, storage):
    storage["bookings"] = [_booking_row("confirmed")]
    _send(as_user(CUSTOMER), "First")
    _send(as_user(CUSTOMER), "Second")

    assert as_user(OWNER).get("/v1.0/chats/unread-count").json() == {"unread_count": 2}
    assert as_user(CUSTOMER).get("/v1.0/chats/unread-count").json() == {"unread_count": 0}

    response = as_user(OWNER).get("/v1.0/chats/bookings/booking-1")

    assert response.status_code == 200
    body = response.json()
    assert body["other_participant"] == "customer-1"
    assert [m["content"] for m in body["messages"]] == ["First", "Second"]
    assert all(m["is_read"] for m in body["messages"])
    assert as_user(OWNER).get("/v1.0/chats/unread-count").json() == {"unread_count": 0}


def test_opening_thread_keeps_own_messages_unread(as_user, storage):
    storage["bookings"] = [_booking_row("confirmed")]
    _send(as_user(CUSTOMER), "Hello")

    body = as_user(CUSTOMER).get("/v1.0/chats/bookings/booking-1").json()

    assert body["other_participant"] == "owner-1"
    assert body["messages"][0]["is_read"] is False
    assert len(storage["chats"]) == 1
