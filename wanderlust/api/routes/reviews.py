from fastapi import APIRouter, Depends, status
from supabase import Client

from wanderlust.api import deps
from wanderlust.core.errors import NotFoundError
from wanderlust.crud.listing import get_listing_by_id
from wanderlust.crud.review import create_review, delete_review, get_review_by_id
from wanderlust.db.base import get_supabase
from wanderlust.schemas.review import ReviewCreate, ReviewResponse
from wanderlust.services.access import RequestContext, ensure_can_delete_review

router = APIRouter(prefix="/v1.0/listings", tags=["reviews"])


@router.post(
    "/{listing_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_listing_review(
    listing_id: str,
    payload: ReviewCreate,
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Leave a review on a listing as the current user."""
    listing = await get_listing_by_id(client, listing_id)
    if not listing:
        raise NotFoundError("Listing not found")

    data = {
        "listing_id": listing_id,
        "author_id": ctx.user_id,
        "rating": payload.rating,
        "comment": payload.comment,
    }
    return await create_review(client, data)


@router.delete("/{listing_id}/reviews/{review_id}", status_code=status.HTTP_200_OK)
async def delete_listing_review(
    listing_id: str,
    review_id: str,
    ctx: RequestContext = Depends(deps.get_request_context),
    client: Client = Depends(get_supabase),
):
    """Review author (or admin) deletes a review."""
    review = await get_review_by_id(client, review_id)
    if not review or review.get("listing_id") != listing_id:
        raise NotFoundError("Review not found")
    ensure_can_delete_review(ctx, review)

    await delete_review(client, review_id)
    return {"success": True, "message": "Review deleted", "id": review_id}
