from __future__ import annotations

from wanderlust.bot.recommender import (
    DEFAULT_IMAGE_URL,
    build_filter,
    find_recommendations,
    to_recommendation,
)
from wanderlust.crud.listing import find_listings, text_match_clause
from wanderlust.schemas.conversation import ConversationContext
from wanderlust.schemas.listing import ListingFilter


def _listings() -> list[dict]:
    return [
        {"id": "l-1", "title": "Beach Hut", "location": "Calangute, Goa", "country": "India", "price": 4500},
        {"id": "l-2", "title": "Goa Villa", "location": "Panaji", "country": "India", "price": 9000},
        {"id": "l-3", "title": "Sea Shack", "location": "Anjuna, GOA", "country": "India", "price": 1200},
        {"id": "l-4", "title": "Lake House", "location": "Udaipur", "country": "India", "price": 3000},
        {"id": "l-5", "title": "Palm Cottage", "location": "Palolem, Goa", "country": "India", "price": 2500},
    ]


def test_build_filter_uses_location_and_both_bounds():
    context = ConversationContext(location="Goa", min_price=0, max_price=5000, guests=4)

    listing_filter = build_filter(context)

    assert listing_filter == ListingFilter(text="Goa", min_price=0, max_price=5000, limit=5)


def test_build_filter_allows_partial_range_and_ignores_guests():
    listing_filter = build_filter(ConversationContext(min_price=3000, guests=2))

    assert listing_filter.text is None
    assert listing_filter.min_price == 3000
    assert listing_filter.max_price is None
    assert "guests" not in listing_filter.model_dump()


def test_text_match_clause_quotes_the_search_text():
    clause = text_match_clause("Calangute, Goa", ("location", "country", "title"))

    assert clause == (
        'location.ilike."%Calangute, Goa%",'
        'country.ilike."%Calangute, Goa%",'
        'title.ilike."%Calangute, Goa%"'
    )


def test_find_listings_matches_any_text_field_case_insensitively(storage, fake_client):
    storage["listings"] = _listings()

    rows = _run_async(find_listings(fake_client, ListingFilter(text="goa", max_price=5000)))

    assert [row["id"] for row in rows] == ["l-3", "l-5", "l-1"]


def test_find_recommendations_sorts_by_price_and_limits(storage, fake_client):
    storage["listings"] = _listings() + [
        {"id": f"extra-{i}", "title": f"Goa Flat {i}", "location": "Goa", "country": "India", "price": 100 * i}
        for i in range(1, 5)
    ]

    rows = _run_async(find_recommendations(fake_client, ConversationContext(location="Goa")))

    assert len(rows) == 5
    prices = [row["price"] for row in rows]
    assert prices == sorted(prices)


def test_find_recommendations_fails_soft(failing_client_factory):
    client = failing_client_factory()

    rows = _run_async(find_recommendations(client, ConversationContext(location="Goa")))

    assert rows == []


def test_to_recommendation_fills_defaults():
    assert to_recommendation({}) == {
        "id": None,
        "title": "Untitled Property",
        "location": "Location not specified",
        "country": "Country not specified",
        "price": 0,
        "image": DEFAULT_IMAGE_URL,
        "owner": "Host",
    }


def test_to_recommendation_uses_owner_username_and_image():
    recommendation = to_recommendation(
        {
            "id": "l-1",
            "title": "Beach Hut",
            "location": "Calangute, Goa",
            "country": "India",
            "price": 4500,
            "image_url": "https://cdn.example.com/hut.jpg",
            "users": {"username": "asha"},
        }
    )

    assert recommendation["owner"] == "asha"
    assert recommendation["image"] == "https://cdn.example.com/hut.jpg"
    assert recommendation["price"] == 4500


def _run_async(coro):
    import asyncio

    return asyncio.run(coro)
