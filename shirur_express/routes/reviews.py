# shirur_express/routes/reviews.py
from fastapi import APIRouter, Depends, status
from decimal import Decimal
import logging
import asyncpg

from ..database import get_db
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..models.auth import RequestContext
from ..models.booking import BookingStatus
from ..models.review import ReviewCreate, ReviewOut
from ..queries import booking_queries, provider_queries, review_queries
from ..services.notifications import notify_in_app
from ..utils.auth import require_customer

logger = logging.getLogger(__name__)

reviews_router = APIRouter(prefix="/reviews", tags=["Reviews"])

@reviews_router.post("/", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
async def create_review(
    review: ReviewCreate,
    ctx: RequestContext = Depends(require_customer),
    conn: asyncpg.Connection = Depends(get_db)
):
    booking_id = str(review.booking_id)
    booking = await booking_queries.get_booking(conn, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    if booking["user_id"] != ctx.user_id:
        raise AuthorizationError("Not your booking")
    if booking["status"] != BookingStatus.COMPLETED.value:
        raise ValidationError("Booking must be completed before reviewing")
    if await review_queries.review_exists(conn, booking_id, ctx.user_id):
        raise ValidationError("You already reviewed this booking")

    try:
        async with conn.transaction():
            created = await review_queries.create_review(
                conn,
                booking_id=booking_id,
                user_id=ctx.user_id,
                provider_id=booking["provider_id"],
                rating=review.rating,
                comment=review.comment
            )
            stats = await review_queries.get_provider_rating_stats(conn, booking["provider_id"])
            await provider_queries.update_provider_rating(
                conn, booking["provider_id"], stats["average"] or Decimal("0"), stats["count"]
            )
    except asyncpg.UniqueViolationError:
        # a concurrent request stored the review first
        raise ValidationError("You already reviewed this booking")

    provider = await provider_queries.get_provider(conn, booking["provider_id"])
    if provider:
        await notify_in_app(conn, provider["user_id"], f"New review received (rating: {review.rating})")
    logger.info(f"Review {created['review_id']} for provider {booking['provider_id']}: {review.rating}")
    return created

__all__ = ["reviews_router"]
