import logging

from fastapi import APIRouter, Depends, Query, status
from supabase import Client

from wanderlust.api import deps
from wanderlust.core.errors import NotFoundError, ValidationError
from wanderlust.crud.listing import (
    create_listing,
    delete_listing,
    get_listing_by_id,
    get_listings,
    update_listing,
)
from wanderlust.crud.review import delete_reviews_by_listing, get_reviews_by_listing
from wanderlust.db.base import get_supabase
from wanderlust.schemas.listing import (
    ListingCreate,
    ListingDetailResponse,
    ListingListResponse,
    ListingResponse,
    ListingUpdate,
)
from wanderlust.services.access import RequestContext, ensure_can_edit_listing
from wanderlust.services.geocoding import Geocoder, get_geocoder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1.0/listings", tags=["listings"])


async def _get_listing_or_404(client: Client, listing_id: str) -> dict:
    listing = await get_listing_by_id(client, listing_id)
    if not listing:
        raise NotFoundError("Listing not found")
    return listing


@router.get("", response_model=ListingListResponse)
async def list_listings(
    category: str | None = Query(None, description="Category to filter by, or 'all'"),
    search: str | None = Query(None, description="Case-insensitive country search"),
    client: Client = Depends(get_supabase),
):
    """Browse listings, optionally by category or country."""
    rows = await get_listings(client, category=category, search=search)
    return ListingListResponse(items=rows)


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def create_new_listing(
    payload: ListingCreate,
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
    geocode: Geocoder = Depends(get_geocoder),
):
    """Create a listing owned by the current user."""
    data = payload.model_dump()
    data["owner_id"] = ctx.user_id
    geometry = await geocode(payload.location)
    if geometry:
        data["geometry"] = geometry
    listing = await create_listing(client, data)
    logger.info(f"Listing {listing['id']} created by {ctx.user_id}")
    return listing


@router.get("/{listing_id}", response_model=ListingDetailResponse)
async def get_listing(
    listing_id: str,
    client: Client = Depends(get_supabase),
):
    """Get a single listing by ID, with its reviews."""
    listing = await _get_listing_or_404(client, listing_id)
    listing["reviews"] = await get_reviews_by_listing(client, listing_id)
    return listing


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_existing_listing(
    listing_id: str,
    payload: ListingUpdate,
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
    geocode: Geocoder = Depends(get_geocoder),
):
    """Owner or admin edits a listing. The location is re-geocoded when it changes."""
    listing = await _get_listing_or_404(client, listing_id)
    ensure_can_edit_listing(ctx, listing)

    # Only the optional columns may be cleared with an explicit null.
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in ("image_url", "category")
    }
    if not changes:
        raise ValidationError("No listing fields to update")

    new_location = changes.get("location")
    if new_location and new_location != listing.get("location"):
        geometry = await geocode(new_location)
        if geometry:
            changes["geometry"] = geometry

    updated = await update_listing(client, listing_id, changes)
    if not updated:
        raise NotFoundError("Listing not found")
    return updated


@router.delete("/{listing_id}", status_code=status.HTTP_200_OK)
async def delete_existing_listing(
    listing_id: str,
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Owner or admin deletes a listing together with its reviews."""
    listing = await _get_listing_or_404(client, listing_id)
    ensure_can_edit_listing(ctx, listing)

    removed_reviews = await delete_reviews_by_listing(client, listing_id)
    await delete_listing(client, listing_id)
    logger.info("Deleted listing %s and %d reviews", listing_id, removed_reviews)
    return {"success": True, "message": "Listing deleted", "id": listing_id}
