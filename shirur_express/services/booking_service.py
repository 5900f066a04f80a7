# shirur_express/services/booking_service.py
"""
Booking operations on top of the transition table.

Every move is written with ``update_booking_if_status`` guarded by the status
that was read, so two racing requests cannot both win: the loser's update
matches no row and gets a StateConflictError.
"""
import logging
import re
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import asyncpg

from ..config import settings
from ..errors import (
    AuthorizationError,
    InvalidCodeError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from ..models.auth import RequestContext, UserRole
from ..models.booking import BookingCreate, BookingStatus
from ..models.invoice import InvoiceCreate
from ..queries import booking_queries, catalog_queries, invoice_queries, provider_queries
from .booking_machine import Actor, BookingEvent, STATUS_EVENTS, next_status
from .pricing import check_client_total, invoice_total, money
from .signatures import constant_time_compare

logger = logging.getLogger(__name__)

ROLE_ACTORS = {
    UserRole.CUSTOMER: Actor.CUSTOMER,
    UserRole.PROVIDER: Actor.PROVIDER,
    UserRole.ADMIN: Actor.ADMIN,
}

# Events that assign an unclaimed booking to the acting provider
CLAIMING_EVENTS = (BookingEvent.ACCEPT, BookingEvent.DECLINE)


def generate_otp(length: int = 6) -> str:
    return f"{secrets.randbelow(10 ** length):0{length}d}"


def actor_for(ctx: RequestContext) -> Actor:
    return ROLE_ACTORS[UserRole(ctx.role)]


def check_access(ctx: RequestContext, booking: Dict[str, Any]) -> None:
    """Owner customer, assigned provider (or a same-category provider for an unclaimed booking), or admin"""
    if ctx.is_admin:
        return
    if ctx.role == UserRole.CUSTOMER:
        if booking["user_id"] != ctx.user_id:
            raise AuthorizationError("Not your booking")
        return
    if booking.get("provider_id"):
        if booking["provider_id"] != ctx.provider_id:
            raise AuthorizationError("Not your booking")
        return
    if ctx.provider_category is None or ctx.provider_category != booking["service_type"]:
        raise AuthorizationError("This booking is not in your service category")


async def create_booking(conn: asyncpg.Connection, ctx: RequestContext, data: BookingCreate) -> Dict[str, Any]:
    category = await catalog_queries.get_category_by_slug(conn, data.service_type)
    if not category:
        raise ValidationError(f"Unknown service type '{data.service_type}'")

    provider_id = str(data.provider_id) if data.provider_id else None
    if provider_id:
        provider = await provider_queries.get_provider(conn, provider_id)
        if not provider:
            raise NotFoundError("Provider not found")
        if provider["category_slug"] != data.service_type:
            raise ValidationError("Provider does not offer this service")
        if not provider["is_available"]:
            raise ValidationError("Provider is not available")

    booking = await booking_queries.create_booking(
        conn,
        user_id=ctx.user_id,
        service_type=data.service_type,
        user_address=data.user_address,
        user_phone=data.user_phone,
        provider_id=provider_id,
        problem_id=str(data.problem_id) if data.problem_id else None,
        scheduled_at=data.scheduled_at,
        preferred_time_slots=data.preferred_time_slots,
        notes=data.notes,
    )
    logger.info(f"Booking {booking['booking_id']} created by {ctx.user_id} ({data.service_type})")
    return booking


async def get_booking_for(conn: asyncpg.Connection, ctx: RequestContext, booking_id: str) -> Dict[str, Any]:
    booking = await booking_queries.get_booking(conn, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    check_access(ctx, booking)
    return booking


async def _prepare(
    conn: asyncpg.Connection,
    ctx: RequestContext,
    booking_id: str,
    event: BookingEvent
) -> Tuple[Dict[str, Any], BookingStatus]:
    booking = await get_booking_for(conn, ctx, booking_id)
    target = next_status(booking["status"], event, actor_for(ctx))
    return booking, target


async def _commit(
    conn: asyncpg.Connection,
    ctx: RequestContext,
    booking: Dict[str, Any],
    event: BookingEvent,
    target: BookingStatus,
    fields: Optional[Dict[str, Any]] = None,
    expected_otp: Optional[str] = None
) -> Dict[str, Any]:
    claim = ctx.provider_id if event in CLAIMING_EVENTS else None
    updated = await booking_queries.update_booking_if_status(
        conn,
        booking["booking_id"],
        BookingStatus(booking["status"]).value,
        target.value,
        fields=fields,
        expected_otp=expected_otp,
        claim_provider_id=claim,
    )
    if updated is None:
        logger.warning(
            f"Booking {booking['booking_id']}: {event.value} lost a race "
            f"(expected '{BookingStatus(booking['status']).value}')"
        )
        raise StateConflictError("Booking was changed by another request, refresh and try again")
    logger.info(
        f"Booking {booking['booking_id']}: {BookingStatus(booking['status']).value} -> "
        f"{target.value} ({event.value} by {actor_for(ctx).value} {ctx.user_id})"
    )
    return updated


async def change_status(
    conn: asyncpg.Connection,
    ctx: RequestContext,
    booking_id: str,
    status: BookingStatus
) -> Dict[str, Any]:
    """Provider dashboard actions: accept, decline, start"""
    event = STATUS_EVENTS.get(BookingStatus(status))
    if event is None:
        raise ValidationError(f"Status '{status}' cannot be set directly")
    booking, target = await _prepare(conn, ctx, booking_id, event)
    fields = {"started_at": datetime.now(timezone.utc)} if event == BookingEvent.START else None
    return await _commit(conn, ctx, booking, event, target, fields=fields)


async def request_otp(
    conn: asyncpg.Connection,
    ctx: RequestContext,
    booking_id: str
) -> Tuple[Dict[str, Any], str]:
    """started -> awaiting_otp with a fresh code stored on the booking"""
    booking, target = await _prepare(conn, ctx, booking_id, BookingEvent.REQUEST_OTP)
    otp = generate_otp(settings.otp_length)
    updated = await _commit(conn, ctx, booking, BookingEvent.REQUEST_OTP, target, fields={"otp": otp})
    return updated, otp


async def verify_otp(
    conn: asyncpg.Connection,
    ctx: RequestContext,
    booking_id: str,
    code: str
) -> Dict[str, Any]:
    """
    awaiting_otp -> awaiting_bill when ``code`` equals the stored code.

    The write is also guarded on the stored code and clears it, so the same
    code can only ever succeed once.
    """
    if not re.fullmatch(rf"\d{{{settings.otp_length}}}", code or ""):
        raise ValidationError(f"Code must be exactly {settings.otp_length} digits")

    booking, target = await _prepare(conn, ctx, booking_id, BookingEvent.VERIFY_OTP)
    if not constant_time_compare(booking.get("otp") or "", code):
        # no lockout: the code stays valid until used or the booking moves on
        logger.warning(f"Booking {booking_id}: wrong completion code submitted")
        raise InvalidCodeError("Invalid code")

    return await _commit(
        conn, ctx, booking, BookingEvent.VERIFY_OTP, target,
        fields={"otp": None},
        expected_otp=code,
    )


async def submit_invoice(
    conn: asyncpg.Connection,
    ctx: RequestContext,
    booking_id: str,
    data: InvoiceCreate
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """awaiting_bill -> awaiting_payment and the booking's one invoice, in one transaction"""
    booking, target = await _prepare(conn, ctx, booking_id, BookingEvent.SUBMIT_INVOICE)

    parts = [{"name": p.name, "price": money(p.price)} for p in data.spare_parts]
    service_charge = money(data.service_charge)
    total = invoice_total((p["price"] for p in parts), service_charge)
    check_client_total(data.total, total, "Invoice")

    async with conn.transaction():
        updated = await _commit(conn, ctx, booking, BookingEvent.SUBMIT_INVOICE, target)
        invoice = await invoice_queries.create_invoice(
            conn,
            booking_id=booking["booking_id"],
            spare_parts=parts,
            service_charge=service_charge,
            notes=data.notes,
            total=total,
        )
    logger.info(f"Invoice {invoice['invoice_id']} for booking {booking_id}: total {total}")
    return updated, invoice


async def cancel_booking(
    conn: asyncpg.Connection,
    ctx: RequestContext,
    booking_id: str
) -> Dict[str, Any]:
    booking, target = await _prepare(conn, ctx, booking_id, BookingEvent.CANCEL)
    return await _commit(conn, ctx, booking, BookingEvent.CANCEL, target, fields={"otp": None})


async def complete_after_payment(conn: asyncpg.Connection, booking_id: str) -> Optional[Dict[str, Any]]:
    """
    awaiting_payment -> completed, fired by payment reconciliation.
    Returns None when the booking is no longer awaiting payment.
    """
    booking = await booking_queries.get_booking(conn, booking_id)
    if not booking:
        return None
    target = next_status(BookingStatus.AWAITING_PAYMENT, BookingEvent.CONFIRM_PAYMENT, Actor.PAYMENT)
    updated = await booking_queries.update_booking_if_status(
        conn,
        booking_id,
        BookingStatus.AWAITING_PAYMENT.value,
        target.value,
        fields={"completed_at": datetime.now(timezone.utc)},
    )
    if updated:
        logger.info(f"Booking {booking_id}: awaiting_payment -> completed (payment confirmed)")
    return updated
