from fastapi import APIRouter, Depends, status
from supabase import Client

from wanderlust.api import deps
from wanderlust.core.errors import AuthorizationError, NotFoundError, ValidationError
from wanderlust.crud.booking import (
    create_booking,
    delete_booking,
    get_all_bookings,
    get_booking_by_id,
    get_bookings_by_customer,
    get_bookings_by_listings,
    update_booking_status,
)
from wanderlust.crud.listing import get_listing_by_id, get_listing_ids_by_owner
from wanderlust.db.base import get_supabase
from wanderlust.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    BookingStatus,
)
from wanderlust.services.access import (
    RequestContext,
    ensure_can_book,
    ensure_can_cancel,
    ensure_can_decide,
    ensure_can_hard_delete,
)
from wanderlust.services.guardrails import compute_total_price, validate_dates, validate_guests

router = APIRouter(prefix="/v1.0", tags=["bookings"])


async def _get_booking_or_404(client: Client, booking_id: str) -> dict:
    booking = await get_booking_by_id(client, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


@router.post(
    "/listings/{listing_id}/bookings",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_booking(
    listing_id: str,
    payload: BookingCreate,
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Request a booking for a listing. Starts out pending."""
    listing = await get_listing_by_id(client, listing_id)
    if not listing:
        raise NotFoundError("Listing not found")
    ensure_can_book(ctx, listing)

    error = validate_dates(payload.check_in, payload.check_out) or validate_guests(payload.guests)
    if error:
        raise ValidationError(error)

    data = {
        "listing_id": listing_id,
        "customer_id": ctx.user_id,
        "check_in": payload.check_in.isoformat(),
        "check_out": payload.check_out.isoformat(),
        "guests": payload.guests,
        "total_price": compute_total_price(payload.check_in, payload.check_out, listing["price"]),
        "status": BookingStatus.PENDING.value,
    }
    booking = await create_booking(client, data)
    booking["listing_title"] = listing.get("title")
    booking["listing_owner_id"] = listing.get("owner_id")
    return booking


@router.get("/bookings/mine", response_model=BookingListResponse)
async def list_my_bookings(
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Bookings the current user made."""
    rows = await get_bookings_by_customer(client, ctx.user_id)
    return BookingListResponse(items=rows)


@router.get("/bookings/manage", response_model=BookingListResponse)
async def list_owner_bookings(
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Bookings made on listings the current user owns."""
    listing_ids = await get_listing_ids_by_owner(client, ctx.user_id)
    rows = await get_bookings_by_listings(client, listing_ids)
    return BookingListResponse(items=rows)


@router.get("/bookings", response_model=BookingListResponse)
async def list_all_bookings(
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Admin: every booking."""
    if not ctx.is_admin:
        raise AuthorizationError("You must be an admin to access this page")
    rows = await get_all_bookings(client)
    return BookingListResponse(items=rows)


async def _decide(
    client: Client, ctx: RequestContext, booking_id: str, new_status: BookingStatus
) -> dict:
    booking = await _get_booking_or_404(client, booking_id)
    ensure_can_decide(ctx, booking, new_status)
    updated = await update_booking_status(client, booking_id, new_status.value)
    if not updated:
        raise NotFoundError("Booking not found")
    return updated


@router.post("/bookings/{booking_id}/confirm", response_model=BookingResponse)
async def confirm_booking(
    booking_id: str,
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Listing owner or admin confirms a pending booking."""
    return await _decide(client, ctx, booking_id, BookingStatus.CONFIRMED)


@router.post("/bookings/{booking_id}/reject", response_model=BookingResponse)
async def reject_booking(
    booking_id: str,
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Listing owner or admin rejects a pending booking."""
    return await _decide(client, ctx, booking_id, BookingStatus.REJECTED)


@router.delete("/bookings/{booking_id}", status_code=status.HTTP_200_OK)
async def cancel_booking(
    booking_id: str,
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Customer (or admin) cancels a booking in any status."""
    booking = await _get_booking_or_404(client, booking_id)
    ensure_can_cancel(ctx, booking)
    await delete_booking(client, booking_id)
    return {"success": True, "message": "Booking cancelled", "id": booking_id}


@router.delete("/bookings/{booking_id}/admin", status_code=status.HTTP_200_OK)
async def admin_delete_booking(
    booking_id: str,
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Admin: delete a booking permanently."""
    booking = await _get_booking_or_404(client, booking_id)
    ensure_can_hard_delete(ctx, booking)
    await delete_booking(client, booking_id)
    return {"success": True, "message": "Booking deleted permanently", "id": booking_id}
