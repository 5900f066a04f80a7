# shirur_express/services/reconciliation.py
"""
Payment reconciliation.

A local order or invoice is bound to a gateway order through a payment
intent, and a target never has more than one unpaid intent (a partial
unique index on ``payment_intent``). Two independent confirmations can
arrive, in either order:

* the client-confirmed signature (HMAC over ``order_id|payment_id``), and
* the gateway webhook (HMAC over the raw body).

Both end in ``settle``, which flips the intent ``created -> paid`` with a
compare-and-set. Whichever confirmation comes second finds the intent paid
and changes nothing, so a payment is credited at most once.
"""
import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import asyncpg

from ..config import settings
from ..errors import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from ..models.auth import RequestContext
from ..models.booking import BookingStatus
from ..models.payment import CreateGatewayOrderRequest, PaymentTarget
from ..queries import invoice_queries, order_queries, payment_queries
from . import booking_service, order_service
from .payment_gateway import RazorpayClient
from .pricing import to_minor_units
from .signatures import verify_payment_signature, verify_webhook_signature

logger = logging.getLogger(__name__)

HANDLED_WEBHOOK_EVENTS = ("payment.captured", "order.paid")


@dataclass
class Settlement:
    applied: bool
    intent: Dict[str, Any]
    booking: Optional[Dict[str, Any]] = None
    order: Optional[Dict[str, Any]] = None
    # money was captured but the target had already been settled another way
    needs_refund: bool = False


@dataclass
class PaymentOutcome:
    verified: bool
    target: Optional[PaymentTarget] = None
    already_paid: bool = False
    settlement: Optional[Settlement] = None


@dataclass
class WebhookOutcome:
    accepted: bool
    applied: bool = False
    duplicate: bool = False
    reason: str = ""
    settlement: Optional[Settlement] = None


async def _open_intent(conn: asyncpg.Connection, target: PaymentTarget, local_id: str) -> Optional[Dict[str, Any]]:
    if target == PaymentTarget.ORDER:
        return await payment_queries.get_open_intent_for_order(conn, local_id)
    return await payment_queries.get_open_intent_for_booking(conn, local_id)


async def _intent_of_winner(
    conn: asyncpg.Connection,
    target: PaymentTarget,
    local_id: str,
    discarded: str
) -> Dict[str, Any]:
    """Another request bound its gateway order first; hand back that one"""
    existing = await _open_intent(conn, target, local_id)
    if existing is None:
        raise StateConflictError("Payment changed while creating the gateway order, try again")
    logger.info(
        f"Gateway order {discarded} discarded: {target.value} {local_id} "
        f"is already bound to {existing['gateway_order_id']}"
    )
    return existing


async def create_gateway_order(
    conn: asyncpg.Connection,
    ctx: RequestContext,
    gateway: RazorpayClient,
    request: CreateGatewayOrderRequest
) -> Dict[str, Any]:
    """Create (or reuse) the gateway order for an unpaid order or invoice; amount is server-side"""
    if request.order_id:
        order = await order_service.get_order_for(conn, ctx, str(request.order_id))
        if order["status"] != "pending":
            raise ValidationError("Order is already paid")
        existing = await payment_queries.get_open_intent_for_order(conn, order["order_id"])
        if existing:
            return existing

        amount = to_minor_units(order["total"])
        gateway_order = await gateway.create_order(
            amount, settings.currency,
            receipt=order["order_id"],
            notes={"order_id": order["order_id"]},
        )
        try:
            async with conn.transaction():
                intent = await payment_queries.create_payment_intent(
                    conn, gateway_order.id, PaymentTarget.ORDER.value, amount, settings.currency,
                    order_id=order["order_id"],
                )
                if await order_queries.attach_payment_intent(conn, order["order_id"], gateway_order.id) is None:
                    raise StateConflictError("Order was paid while creating the payment")
        except asyncpg.UniqueViolationError:
            return await _intent_of_winner(conn, PaymentTarget.ORDER, order["order_id"], gateway_order.id)
        return intent

    booking = await booking_service.get_booking_for(conn, ctx, str(request.booking_id))
    if not ctx.is_admin and booking["user_id"] != ctx.user_id:
        raise AuthorizationError("Only the customer can pay for this booking")
    if booking["status"] != BookingStatus.AWAITING_PAYMENT.value:
        raise InvalidTransitionError(
            f"Booking is not awaiting payment (current state '{booking['status']}')"
        )
    invoice = await invoice_queries.get_invoice_by_booking(conn, booking["booking_id"])
    if invoice is None:
        raise NotFoundError("Invoice not found")

    existing = await payment_queries.get_open_intent_for_booking(conn, booking["booking_id"])
    if existing:
        return existing

    amount = to_minor_units(invoice["total"])
    gateway_order = await gateway.create_order(
        amount, settings.currency,
        receipt=invoice["invoice_id"],
        notes={"booking_id": booking["booking_id"], "invoice_id": invoice["invoice_id"]},
    )
    try:
        return await payment_queries.create_payment_intent(
            conn, gateway_order.id, PaymentTarget.INVOICE.value, amount, settings.currency,
            booking_id=booking["booking_id"],
        )
    except asyncpg.UniqueViolationError:
        return await _intent_of_winner(conn, PaymentTarget.INVOICE, booking["booking_id"], gateway_order.id)


async def settle(
    conn: asyncpg.Connection,
    intent: Dict[str, Any],
    payment_id: str,
    settled_by: str
) -> Settlement:
    """
    Mark the intent paid, then apply it to its order or booking.

    ``applied`` is False when the intent was already paid, and also when the
    target had been settled by some other payment; the latter is flagged
    ``needs_refund`` since the gateway did capture the money.
    """
    async with conn.transaction():
        paid = await payment_queries.mark_intent_paid(conn, intent["gateway_order_id"], payment_id, settled_by)
        if paid is None:
            logger.info(f"Intent {intent['gateway_order_id']} already settled, nothing to do ({settled_by})")
            return Settlement(applied=False, intent=intent)

        settlement = Settlement(applied=True, intent=paid)
        if paid["target"] == PaymentTarget.ORDER.value:
            settlement.order = await order_queries.mark_order_paid_if_pending(conn, paid["order_id"], payment_id)
            local = f"order {paid['order_id']}"
            settled_elsewhere = settlement.order is None
        else:
            settlement.booking = await booking_service.complete_after_payment(conn, paid["booking_id"])
            local = f"booking {paid['booking_id']}"
            settled_elsewhere = settlement.booking is None

    if settled_elsewhere:
        logger.warning(f"Payment {payment_id} captured for {local}, which was already settled; needs refund")
        settlement.applied = False
        settlement.needs_refund = True
        return settlement
    logger.info(f"Intent {paid['gateway_order_id']} settled by {settled_by} (payment {payment_id})")
    return settlement


async def confirm_payment(
    conn: asyncpg.Connection,
    gateway_order_id: str,
    payment_id: str,
    signature: str,
    local_id: Optional[str] = None
) -> PaymentOutcome:
    """Client-confirmed path; a bad signature is an unverified outcome, not an exception"""
    intent = await payment_queries.get_payment_intent(conn, gateway_order_id)
    if intent is None:
        raise NotFoundError("Unknown payment order")
    if local_id and local_id not in (intent.get("order_id"), intent.get("booking_id")):
        raise ValidationError("Payment does not belong to this order")

    target = PaymentTarget(intent["target"])
    if not verify_payment_signature(gateway_order_id, payment_id, signature, settings.razorpay_key_secret):
        logger.warning(f"Signature mismatch for gateway order {gateway_order_id}")
        return PaymentOutcome(verified=False, target=target)

    settlement = await settle(conn, intent, payment_id, "signature")
    return PaymentOutcome(
        verified=True,
        target=target,
        already_paid=not settlement.applied,
        settlement=settlement,
    )


def _entity(container: Any, name: str) -> Dict[str, Any]:
    wrapper = container.get(name) if isinstance(container, dict) else None
    entity = wrapper.get("entity") if isinstance(wrapper, dict) else None
    return entity if isinstance(entity, dict) else {}


def _webhook_entities(payload: Dict[str, Any]) -> Tuple[Any, Any, Any]:
    body = payload.get("payload")
    payment = _entity(body, "payment")
    order = _entity(body, "order")
    gateway_order_id = payment.get("order_id") or order.get("id")
    amount = payment.get("amount", order.get("amount_paid"))
    return gateway_order_id, payment.get("id"), amount


async def handle_webhook(
    conn: asyncpg.Connection,
    raw_body: bytes,
    signature: str,
    event_id: Optional[str] = None
) -> WebhookOutcome:
    if not verify_webhook_signature(raw_body, signature or "", settings.razorpay_webhook_secret):
        logger.warning("Webhook signature mismatch, ignoring delivery")
        return WebhookOutcome(accepted=False, reason="invalid signature")

    try:
        payload = json.loads(raw_body)
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        logger.warning("Webhook body is not a JSON object, ignoring delivery")
        return WebhookOutcome(accepted=False, reason="malformed payload")

    event_type = payload.get("event", "")
    if event_type not in HANDLED_WEBHOOK_EVENTS:
        logger.debug(f"Webhook event {event_type!r} not handled")
        return WebhookOutcome(accepted=True, reason="event ignored")

    gateway_order_id, payment_id, amount = _webhook_entities(payload)
    if not isinstance(gateway_order_id, (str, type(None))) or not isinstance(payment_id, (str, type(None))):
        logger.warning("Webhook entity ids are not strings, ignoring delivery")
        return WebhookOutcome(accepted=False, reason="malformed payload")
    if amount is not None:
        try:
            amount = int(amount)
        except (TypeError, ValueError):
            logger.warning(f"Webhook amount {amount!r} is not an integer, ignoring delivery")
            return WebhookOutcome(accepted=False, reason="malformed payload")

    # unknown orders are not recorded, so a later redelivery is still processed
    intent = await payment_queries.get_payment_intent(conn, gateway_order_id) if gateway_order_id else None
    if intent is None:
        logger.warning(f"Webhook for unknown gateway order {gateway_order_id!r}")
        return WebhookOutcome(accepted=True, reason="unknown order")

    event_id = event_id or hashlib.sha256(raw_body).hexdigest()
    async with conn.transaction():
        if not await payment_queries.record_webhook_event(conn, event_id, event_type, gateway_order_id):
            logger.info(f"Webhook event {event_id} replayed, ignoring")
            return WebhookOutcome(accepted=True, duplicate=True, reason="duplicate event")
        if not payment_id:
            return WebhookOutcome(accepted=True, reason="no payment in event")
        if amount is not None and amount != intent["amount"]:
            logger.warning(
                f"Webhook amount {amount} != expected {intent['amount']} for {gateway_order_id}, ignoring"
            )
            return WebhookOutcome(accepted=True, reason="amount mismatch")

        settlement = await settle(conn, intent, payment_id, "webhook")
    reason = "target already settled, needs refund" if settlement.needs_refund else ""
    return WebhookOutcome(accepted=True, applied=settlement.applied, reason=reason, settlement=settlement)
