"""Authorization rules for listings, reviews, bookings and booking chats.

Every check takes an explicit ``RequestContext`` and the row it guards. Booking
rows come from ``crud.booking.get_booking_by_id`` with ``listing_owner_id``
flattened in. A failed check raises ``AuthorizationError`` before anything is
written.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wanderlust.core.errors import AuthorizationError, ValidationError
from wanderlust.schemas.booking import BookingStatus


class Role(str, Enum):
    ADMIN = "admin"
    OWNER = "owner"
    CUSTOMER = "customer"


@dataclass(frozen=True)
class RequestContext:
    user_id: str
    is_admin: bool = False

    @classmethod
    def from_user(cls, user: dict) -> "RequestContext":
        return cls(user_id=str(user["id"]), is_admin=bool(user.get("is_admin", False)))


def roles_for(ctx: RequestContext, booking: dict) -> set[Role]:
    roles: set[Role] = set()
    if ctx.is_admin:
        roles.add(Role.ADMIN)
    if booking.get("listing_owner_id") == ctx.user_id:
        roles.add(Role.OWNER)
    if booking.get("customer_id") == ctx.user_id:
        roles.add(Role.CUSTOMER)
    return roles


def ensure_can_book(ctx: RequestContext, listing: dict) -> None:
    if listing.get("owner_id") == ctx.user_id:
        raise AuthorizationError("You cannot book your own listing!")


def ensure_can_decide(ctx: RequestContext, booking: dict, new_status: BookingStatus) -> None:
    """Owner or admin may move a pending booking to confirmed or rejected."""
    if not roles_for(ctx, booking) & {Role.ADMIN, Role.OWNER}:
        raise AuthorizationError("You are not authorized to manage this booking")
    if new_status not in (BookingStatus.CONFIRMED, BookingStatus.REJECTED):
        raise ValidationError(f"Cannot move a booking to '{new_status.value}'")
    if booking.get("status") != BookingStatus.PENDING.value:
        raise ValidationError(f"Booking is already {booking.get('status')}")


def ensure_can_cancel(ctx: RequestContext, booking: dict) -> None:
    if not roles_for(ctx, booking) & {Role.ADMIN, Role.CUSTOMER}:
        raise AuthorizationError("You are not authorized to manage this booking")


def ensure_can_hard_delete(ctx: RequestContext, booking: dict) -> None:
    if Role.ADMIN not in roles_for(ctx, booking):
        raise AuthorizationError("You must be an admin to delete bookings")


def ensure_can_edit_listing(ctx: RequestContext, listing: dict) -> None:
    if ctx.is_admin:
        return
    if listing.get("owner_id") != ctx.user_id:
        raise AuthorizationError("You are not the owner of this listing")


def ensure_can_delete_review(ctx: RequestContext, review: dict) -> None:
    if ctx.is_admin:
        return
    if not review.get("author_id") or review["author_id"] != ctx.user_id:
        raise AuthorizationError("You are not the author of this review")


def ensure_chat_access(ctx: RequestContext, booking: dict) -> None:
    if not roles_for(ctx, booking):
        raise AuthorizationError("You don't have permission to access this chat")
    if booking.get("status") != BookingStatus.CONFIRMED.value:
        raise AuthorizationError("Chat is only available for confirmed bookings")
