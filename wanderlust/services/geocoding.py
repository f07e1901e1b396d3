"""Geocoding hook used when listings are created or moved.

A geocoder turns a free-text location into a GeoJSON point, or None when it
cannot place it. The default one places nothing; deployments plug in a real
geocoder by overriding the ``get_geocoder`` dependency.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

Geocoder = Callable[[str], Awaitable[dict | None]]


async def no_geocoding(location: str) -> dict | None:
    return None


def get_geocoder() -> Geocoder:
    return no_geocoding
