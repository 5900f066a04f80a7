# shirur_express/routes/table_bookings.py
from fastapi import APIRouter, Depends, status
from datetime import date
from typing import List
from uuid import UUID
import logging
import asyncpg

from ..database import get_db
from ..errors import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from ..models.auth import RequestContext, UserRole
from ..models.menu import MenuCategory
from ..models.table_booking import (
    TableBookingCreate,
    TableBookingOut,
    TableBookingStatus,
    TableBookingStatusUpdate,
)
from ..queries import provider_queries, table_booking_queries
from ..services.notifications import notify_in_app
from ..utils.auth import get_current_user, require_customer

logger = logging.getLogger(__name__)

table_bookings_router = APIRouter(prefix="/table-bookings", tags=["Table Bookings"])

CUSTOMER = "customer"
RESTAURANT = "restaurant"

# (from, to) -> who may make the move
TABLE_TRANSITIONS = {
    (TableBookingStatus.PENDING, TableBookingStatus.CONFIRMED): {RESTAURANT},
    (TableBookingStatus.PENDING, TableBookingStatus.CANCELLED): {CUSTOMER, RESTAURANT},
    (TableBookingStatus.CONFIRMED, TableBookingStatus.CANCELLED): {CUSTOMER, RESTAURANT},
    (TableBookingStatus.CONFIRMED, TableBookingStatus.COMPLETED): {RESTAURANT},
}


def party_of(ctx: RequestContext, booking: dict) -> str:
    if booking["user_id"] == ctx.user_id:
        return CUSTOMER
    if ctx.is_admin or (ctx.provider_id is not None and booking["provider_id"] == ctx.provider_id):
        return RESTAURANT
    raise AuthorizationError("Not your table booking")


@table_bookings_router.post("/", response_model=TableBookingOut, status_code=status.HTTP_201_CREATED)
async def create_table_booking(
    booking: TableBookingCreate,
    ctx: RequestContext = Depends(require_customer),
    conn: asyncpg.Connection = Depends(get_db)
):
    if booking.booking_date < date.today():
        raise ValidationError("Booking date is in the past")
    provider = await provider_queries.get_provider(conn, str(booking.provider_id))
    if not provider:
        raise NotFoundError("Restaurant not found")
    if provider["category_slug"] != MenuCategory.RESTAURANTS.value:
        raise ValidationError("Tables can only be booked at restaurants")
    if not provider["is_available"]:
        raise ValidationError("Restaurant is not taking bookings")

    created = await table_booking_queries.create_table_booking(
        conn,
        user_id=ctx.user_id,
        provider_id=provider["provider_id"],
        booking_date=booking.booking_date,
        booking_time=booking.booking_time,
        party_size=booking.party_size,
        special_requests=booking.special_requests
    )
    await notify_in_app(
        conn, provider["user_id"],
        f"Table for {booking.party_size} requested on {booking.booking_date} at {booking.booking_time}"
    )
    logger.info(f"Table booking {created['table_booking_id']} at {provider['provider_id']} by {ctx.user_id}")
    return created

@table_bookings_router.get("/", response_model=List[TableBookingOut])
async def list_table_bookings(
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    """Customers see their reservations; restaurants see the ones made with them"""
    if ctx.role == UserRole.PROVIDER and ctx.provider_id:
        return await table_booking_queries.get_provider_table_bookings(conn, ctx.provider_id)
    return await table_booking_queries.get_user_table_bookings(conn, ctx.user_id)

@table_bookings_router.patch("/{table_booking_id}/status", response_model=TableBookingOut)
async def update_table_booking_status(
    table_booking_id: UUID,
    update: TableBookingStatusUpdate,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    booking = await table_booking_queries.get_table_booking(conn, str(table_booking_id))
    if not booking:
        raise NotFoundError("Table booking not found")
    party = party_of(ctx, booking)

    current = TableBookingStatus(booking["status"])
    allowed = TABLE_TRANSITIONS.get((current, update.status))
    if allowed is None:
        raise InvalidTransitionError(f"Cannot move a {current.value} table booking to {update.status.value}")
    if party not in allowed:
        raise AuthorizationError(f"A {party} cannot mark this booking {update.status.value}")

    updated = await table_booking_queries.update_table_booking_status(
        conn, booking["table_booking_id"], current.value, update.status.value
    )
    if updated is None:
        raise StateConflictError("Table booking was changed by another request, refresh and try again")

    if party == RESTAURANT:
        await notify_in_app(conn, booking["user_id"], f"Your table booking is now {update.status.value}")
    else:
        provider = await provider_queries.get_provider(conn, booking["provider_id"])
        if provider:
            await notify_in_app(conn, provider["user_id"], "A table booking was cancelled by the customer")
    logger.info(f"Table booking {booking['table_booking_id']}: {current.value} -> {update.status.value} by {party}")
    return updated

__all__ = ["table_bookings_router"]
