# shirur_express/routes/payments.py
from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse
from typing import Optional
import asyncpg

from ..config import settings
from ..database import get_db
from ..errors import SignatureMismatchError
from ..models.auth import RequestContext
from ..models.payment import (
    CreateGatewayOrderRequest,
    GatewayOrderOut,
    VerifySignatureRequest,
    VerifySignatureOut
)
from ..services import reconciliation
from ..services.notifications import notify_in_app
from ..services.payment_gateway import RazorpayClient, get_payment_gateway
from ..queries import provider_queries
from ..utils.auth import get_current_user

payments_router = APIRouter(prefix="/payment", tags=["Payments"])


async def announce_settlement(conn: asyncpg.Connection, settlement: Optional[reconciliation.Settlement]) -> None:
    if settlement is None or not settlement.applied:
        return
    if settlement.order:
        await notify_in_app(
            conn, settlement.order["user_id"],
            f"Payment received. Your grocery order of Rs. {settlement.order['total']} is confirmed."
        )
    if settlement.booking:
        booking = settlement.booking
        await notify_in_app(conn, booking["user_id"], "Payment received. Your booking is complete, thank you!")
        provider = await provider_queries.get_provider(conn, booking["provider_id"])
        if provider:
            await notify_in_app(conn, provider["user_id"], f"Payment received for booking {booking['booking_id']}")


@payments_router.post("/create-order", response_model=GatewayOrderOut, status_code=status.HTTP_201_CREATED)
async def create_payment_order(
    request: CreateGatewayOrderRequest,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db),
    gateway: RazorpayClient = Depends(get_payment_gateway)
):
    intent = await reconciliation.create_gateway_order(conn, ctx, gateway, request)
    return {
        "razorpay_order_id": intent["gateway_order_id"],
        "razorpay_key_id": settings.razorpay_key_id,
        "amount": intent["amount"],
        "currency": intent["currency"],
        "target": intent["target"]
    }

@payments_router.post("/verify-signature", response_model=VerifySignatureOut)
async def verify_payment_signature(
    payload: VerifySignatureRequest,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    outcome = await reconciliation.confirm_payment(
        conn,
        payload.razorpay_order_id,
        payload.razorpay_payment_id,
        payload.razorpay_signature,
        local_id=payload.database_order_id
    )
    if not outcome.verified:
        raise SignatureMismatchError("Payment signature verification failed")

    await announce_settlement(conn, outcome.settlement)
    return {
        "status": "success",
        "target": outcome.target,
        "already_paid": outcome.already_paid,
        "needs_refund": outcome.settlement.needs_refund
    }

@payments_router.post("/webhook")
async def payment_webhook(
    request: Request,
    x_razorpay_signature: Optional[str] = Header(None),
    x_razorpay_event_id: Optional[str] = Header(None),
    conn: asyncpg.Connection = Depends(get_db)
):
    """Gateway callback; the signature covers the raw body, so it is read unparsed"""
    raw_body = await request.body()
    outcome = await reconciliation.handle_webhook(conn, raw_body, x_razorpay_signature, x_razorpay_event_id)
    if not outcome.accepted:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"status": "ignored", "detail": outcome.reason}
        )

    await announce_settlement(conn, outcome.settlement)
    return {
        "status": "ok",
        "applied": outcome.applied,
        "duplicate": outcome.duplicate,
        "detail": outcome.reason
    }

__all__ = ["payments_router"]
