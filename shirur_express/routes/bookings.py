# shirur_express/routes/bookings.py
from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from typing import Any, Dict, List, Optional
from uuid import UUID
import asyncpg

from ..database import get_db
from ..errors import NotFoundError
from ..models.auth import RequestContext
from ..models.booking import (
    BookingCancel,
    BookingCreate,
    BookingOut,
    BookingStatus,
    BookingStatusUpdate,
    OtpVerify
)
from ..models.invoice import InvoiceCreate, InvoiceOut
from ..queries import booking_queries, invoice_queries, provider_queries
from ..services import booking_service
from ..services.notifications import (
    booking_status_message,
    notify_in_app,
    otp_message,
    send_sms_best_effort
)
from ..services.receipts import build_invoice_receipt
from ..services.sms import TwilioSmsClient, get_sms_client
from ..utils.auth import get_current_user, require_customer

bookings_router = APIRouter(prefix="/bookings", tags=["Bookings"])


async def notify_customer(
    conn: asyncpg.Connection,
    background_tasks: BackgroundTasks,
    sms: TwilioSmsClient,
    booking: Dict[str, Any],
    text_customer: bool = True
) -> None:
    """In-app note now, SMS after the response; the status change is already committed"""
    provider = None
    if booking.get("provider_id"):
        provider = await provider_queries.get_provider(conn, booking["provider_id"])
    message = booking_status_message(
        booking["status"],
        provider["business_name"] if provider else "Your provider",
        booking.get("scheduled_at")
    )
    await notify_in_app(conn, booking["user_id"], message)
    if text_customer:
        background_tasks.add_task(send_sms_best_effort, sms, booking["user_phone"], message)


async def notify_provider(conn: asyncpg.Connection, provider_id: Optional[str], message: str) -> None:
    if not provider_id:
        return
    provider = await provider_queries.get_provider(conn, provider_id)
    if provider:
        await notify_in_app(conn, provider["user_id"], message)


@bookings_router.post("/", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking: BookingCreate,
    ctx: RequestContext = Depends(require_customer),
    conn: asyncpg.Connection = Depends(get_db)
):
    created = await booking_service.create_booking(conn, ctx, booking)
    await notify_provider(conn, created.get("provider_id"), f"New booking request for {created['service_type']}")
    return created

@bookings_router.get("/", response_model=List[BookingOut])
async def get_my_bookings(
    status: Optional[BookingStatus] = None,
    ctx: RequestContext = Depends(require_customer),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await booking_queries.get_user_bookings(conn, ctx.user_id, status.value if status else None)

@bookings_router.get("/{booking_id}", response_model=BookingOut)
async def get_booking(
    booking_id: UUID,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    booking = await booking_service.get_booking_for(conn, ctx, str(booking_id))
    booking["invoice"] = await invoice_queries.get_invoice_by_booking(conn, str(booking_id))
    return booking

@bookings_router.patch("/{booking_id}/status", response_model=BookingOut)
async def update_booking_status(
    booking_id: UUID,
    update: BookingStatusUpdate,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db),
    sms: TwilioSmsClient = Depends(get_sms_client)
):
    booking = await booking_service.change_status(conn, ctx, str(booking_id), BookingStatus(update.status))
    await notify_customer(conn, background_tasks, sms, booking)
    return booking

@bookings_router.post("/{booking_id}/cancel", response_model=BookingOut)
async def cancel_booking(
    booking_id: UUID,
    background_tasks: BackgroundTasks,
    payload: Optional[BookingCancel] = None,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db),
    sms: TwilioSmsClient = Depends(get_sms_client)
):
    booking = await booking_service.cancel_booking(conn, ctx, str(booking_id))
    reason = f": {payload.reason}" if payload and payload.reason else ""
    await notify_provider(conn, booking.get("provider_id"), f"Booking {booking_id} was cancelled{reason}")
    await notify_customer(conn, background_tasks, sms, booking, text_customer=False)
    return booking

@bookings_router.post("/{booking_id}/generate-otp", response_model=BookingOut)
async def generate_otp(
    booking_id: UUID,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db),
    sms: TwilioSmsClient = Depends(get_sms_client)
):
    """The code goes only to the customer's phone, never into the response"""
    booking, otp = await booking_service.request_otp(conn, ctx, str(booking_id))
    background_tasks.add_task(send_sms_best_effort, sms, booking["user_phone"], otp_message(otp))
    return booking

@bookings_router.post("/{booking_id}/verify-otp", response_model=BookingOut)
async def verify_otp(
    booking_id: UUID,
    payload: OtpVerify,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db),
    sms: TwilioSmsClient = Depends(get_sms_client)
):
    booking = await booking_service.verify_otp(conn, ctx, str(booking_id), payload.otp)
    await notify_customer(conn, background_tasks, sms, booking, text_customer=False)
    return booking

@bookings_router.post("/{booking_id}/create-invoice", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    booking_id: UUID,
    invoice: InvoiceCreate,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db),
    sms: TwilioSmsClient = Depends(get_sms_client)
):
    booking, created = await booking_service.submit_invoice(conn, ctx, str(booking_id), invoice)
    await notify_customer(conn, background_tasks, sms, booking)
    return {**booking, "invoice": created}

@bookings_router.get("/{booking_id}/invoice", response_model=InvoiceOut)
async def get_invoice(
    booking_id: UUID,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    await booking_service.get_booking_for(conn, ctx, str(booking_id))
    invoice = await invoice_queries.get_invoice_by_booking(conn, str(booking_id))
    if not invoice:
        raise NotFoundError("Invoice not found")
    return invoice

@bookings_router.get("/{booking_id}/invoice/receipt")
async def download_invoice_receipt(
    booking_id: UUID,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    booking = await booking_service.get_booking_for(conn, ctx, str(booking_id))
    invoice = await invoice_queries.get_invoice_by_booking(conn, str(booking_id))
    if not invoice:
        raise NotFoundError("Invoice not found")
    provider = None
    if booking.get("provider_id"):
        provider = await provider_queries.get_provider(conn, booking["provider_id"])

    pdf = build_invoice_receipt(booking, invoice, provider)
    headers = {
        'Content-Disposition': f'attachment; filename="invoice_{invoice["invoice_id"]}.pdf"'
    }
    return Response(content=pdf, media_type='application/pdf', headers=headers)

__all__ = ["bookings_router"]
