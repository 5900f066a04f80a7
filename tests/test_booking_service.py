import asyncio
from decimal import Decimal

import pytest

from shirur_express.config import settings
from shirur_express.errors import (
    AuthorizationError,
    InvalidCodeError,
    InvalidTransitionError,
    StateConflictError,
    ValidationError,
)
from shirur_express.models.auth import RequestContext, UserRole
from shirur_express.models.booking import BookingCreate, BookingStatus
from shirur_express.models.invoice import InvoiceCreate
from shirur_express.models.payment import CreateGatewayOrderRequest
from shirur_express.services import booking_service, reconciliation
from shirur_express.services.signatures import payment_signature

from conftest import _add_provider, _add_user


def booking_request(**overrides):
    data = {
        "service_type": "electrician",
        "user_address": "12 Station Road, Shirur",
        "user_phone": "9876543210",
    }
    data.update(overrides)
    return BookingCreate(**data)


async def walk_to(conn, provider_ctx, booking_id, status):
    """Drive a booking forward with provider actions up to ``status``"""
    booking = None
    if status in (BookingStatus.ACCEPTED, BookingStatus.STARTED, BookingStatus.AWAITING_OTP):
        booking = await booking_service.change_status(conn, provider_ctx, booking_id, BookingStatus.ACCEPTED)
    if status in (BookingStatus.STARTED, BookingStatus.AWAITING_OTP):
        booking = await booking_service.change_status(conn, provider_ctx, booking_id, BookingStatus.STARTED)
    if status == BookingStatus.AWAITING_OTP:
        booking, _ = await booking_service.request_otp(conn, provider_ctx, booking_id)
    return booking


async def test_create_booking_starts_pending(store, conn, customer_ctx, provider):
    booking = await booking_service.create_booking(
        conn, customer_ctx, booking_request(provider_id=provider["provider_id"])
    )
    assert booking["status"] == "pending"
    assert booking["provider_id"] == provider["provider_id"]


async def test_create_booking_rejects_unknown_service(store, conn, customer_ctx):
    with pytest.raises(ValidationError):
        await booking_service.create_booking(conn, customer_ctx, booking_request(service_type="astrology"))


async def test_create_booking_rejects_provider_from_other_category(store, conn, customer_ctx):
    user = _add_user(store, "meena", UserRole.PROVIDER.value)
    salon = _add_provider(store, user, store.beauty, "Meena Salon")
    with pytest.raises(ValidationError):
        await booking_service.create_booking(
            conn, customer_ctx, booking_request(provider_id=salon["provider_id"])
        )


async def test_unassigned_booking_is_claimed_on_accept(store, conn, customer_ctx, provider_ctx):
    booking = await booking_service.create_booking(conn, customer_ctx, booking_request())
    assert booking["provider_id"] is None

    accepted = await booking_service.change_status(conn, provider_ctx, booking["booking_id"], BookingStatus.ACCEPTED)
    assert accepted["status"] == "accepted"
    assert accepted["provider_id"] == provider_ctx.provider_id


async def test_provider_from_other_category_cannot_claim(store, conn, customer_ctx):
    user = _add_user(store, "meena", UserRole.PROVIDER.value)
    salon = _add_provider(store, user, store.beauty, "Meena Salon")
    salon_ctx = RequestContext(
        user_id=user["user_id"], role=UserRole.PROVIDER, username="meena",
        provider_id=salon["provider_id"], provider_category="beauty",
    )
    booking = await booking_service.create_booking(conn, customer_ctx, booking_request())
    with pytest.raises(AuthorizationError):
        await booking_service.change_status(conn, salon_ctx, booking["booking_id"], BookingStatus.ACCEPTED)
    assert store.bookings[booking["booking_id"]]["status"] == "pending"


async def test_customer_cannot_accept(store, conn, customer_ctx, provider):
    booking = await booking_service.create_booking(
        conn, customer_ctx, booking_request(provider_id=provider["provider_id"])
    )
    with pytest.raises(AuthorizationError):
        await booking_service.change_status(conn, customer_ctx, booking["booking_id"], BookingStatus.ACCEPTED)


async def test_skipping_a_step_is_rejected(store, conn, customer_ctx, provider_ctx):
    booking = await booking_service.create_booking(
        conn, customer_ctx, booking_request(provider_id=provider_ctx.provider_id)
    )
    with pytest.raises(InvalidTransitionError):
        await booking_service.change_status(conn, provider_ctx, booking["booking_id"], BookingStatus.STARTED)
    assert store.bookings[booking["booking_id"]]["status"] == "pending"


async def test_simultaneous_accept_and_decline_have_one_winner(store, conn, customer_ctx, provider_ctx):
    booking = await booking_service.create_booking(
        conn, customer_ctx, booking_request(provider_id=provider_ctx.provider_id)
    )
    results = await asyncio.gather(
        booking_service.change_status(conn, provider_ctx, booking["booking_id"], BookingStatus.ACCEPTED),
        booking_service.change_status(conn, provider_ctx, booking["booking_id"], BookingStatus.DECLINED),
        return_exceptions=True,
    )
    winners = [r for r in results if isinstance(r, dict)]
    losers = [r for r in results if isinstance(r, Exception)]
    assert len(winners) == 1 and len(losers) == 1
    assert type(losers[0]) is StateConflictError
    assert store.bookings[booking["booking_id"]]["status"] == winners[0]["status"]


async def test_request_otp_stores_six_digit_code(store, conn, customer_ctx, provider_ctx):
    booking = await booking_service.create_booking(
        conn, customer_ctx, booking_request(provider_id=provider_ctx.provider_id)
    )
    await walk_to(conn, provider_ctx, booking["booking_id"], BookingStatus.STARTED)
    updated, otp = await booking_service.request_otp(conn, provider_ctx, booking["booking_id"])

    assert updated["status"] == "awaiting_otp"
    assert len(otp) == settings.otp_length and otp.isdigit()
    assert store.bookings[booking["booking_id"]]["otp"] == otp


async def test_wrong_code_leaves_state_unchanged(store, conn, customer_ctx, provider_ctx, monkeypatch):
    monkeypatch.setattr(booking_service, "generate_otp", lambda length=6: "111111")
    booking = await booking_service.create_booking(
        conn, customer_ctx, booking_request(provider_id=provider_ctx.provider_id)
    )
    await walk_to(conn, provider_ctx, booking["booking_id"], BookingStatus.AWAITING_OTP)

    with pytest.raises(InvalidCodeError):
        await booking_service.verify_otp(conn, provider_ctx, booking["booking_id"], "222222")
    assert store.bookings[booking["booking_id"]]["status"] == "awaiting_otp"
    assert store.bookings[booking["booking_id"]]["otp"] == "111111"


@pytest.mark.parametrize("code", ["12345", "1234567", "12a456", ""])
async def test_malformed_code_is_a_validation_error(store, conn, customer_ctx, provider_ctx, code):
    booking = await booking_service.create_booking(
        conn, customer_ctx, booking_request(provider_id=provider_ctx.provider_id)
    )
    await walk_to(conn, provider_ctx, booking["booking_id"], BookingStatus.AWAITING_OTP)
    with pytest.raises(ValidationError):
        await booking_service.verify_otp(conn, provider_ctx, booking["booking_id"], code)


async def test_code_verifies_exactly_once(store, conn, customer_ctx, provider_ctx, monkeypatch):
    monkeypatch.setattr(booking_service, "generate_otp", lambda length=6: "483920")
    booking = await booking_service.create_booking(
        conn, customer_ctx, booking_request(provider_id=provider_ctx.provider_id)
    )
    await walk_to(conn, provider_ctx, booking["booking_id"], BookingStatus.AWAITING_OTP)

    verified = await booking_service.verify_otp(conn, provider_ctx, booking["booking_id"], "483920")
    assert verified["status"] == "awaiting_bill"
    assert verified["otp"] is None

    with pytest.raises(InvalidTransitionError):
        await booking_service.verify_otp(conn, provider_ctx, booking["booking_id"], "483920")


async def test_invoice_total_mismatch_is_rejected(store, conn, customer_ctx, provider_ctx, monkeypatch):
    monkeypatch.setattr(booking_service, "generate_otp", lambda length=6: "483920")
    booking = await booking_service.create_booking(
        conn, customer_ctx, booking_request(provider_id=provider_ctx.provider_id)
    )
    await walk_to(conn, provider_ctx, booking["booking_id"], BookingStatus.AWAITING_OTP)
    await booking_service.verify_otp(conn, provider_ctx, booking["booking_id"], "483920")

    invoice = InvoiceCreate(spare_parts=[{"name": "Wire", "price": "50"}], service_charge="200", total="300")
    with pytest.raises(ValidationError, match="total mismatch"):
        await booking_service.submit_invoice(conn, provider_ctx, booking["booking_id"], invoice)
    assert store.bookings[booking["booking_id"]]["status"] == "awaiting_bill"
    assert store.invoices == {}


async def test_cancel_clears_code(store, conn, customer_ctx, provider_ctx):
    booking = await booking_service.create_booking(
        conn, customer_ctx, booking_request(provider_id=provider_ctx.provider_id)
    )
    await walk_to(conn, provider_ctx, booking["booking_id"], BookingStatus.AWAITING_OTP)

    cancelled = await booking_service.cancel_booking(conn, customer_ctx, booking["booking_id"])
    assert cancelled["status"] == "cancelled"
    assert cancelled["otp"] is None
    with pytest.raises(InvalidTransitionError):
        await booking_service.cancel_booking(conn, customer_ctx, booking["booking_id"])


async def test_other_customer_cannot_see_booking(store, conn, customer_ctx):
    booking = await booking_service.create_booking(conn, customer_ctx, booking_request())
    stranger = _add_user(store, "kiran", UserRole.CUSTOMER.value)
    stranger_ctx = RequestContext(user_id=stranger["user_id"], role=UserRole.CUSTOMER, username="kiran")
    with pytest.raises(AuthorizationError):
        await booking_service.get_booking_for(conn, stranger_ctx, booking["booking_id"])


async def test_full_service_scenario(store, conn, customer_ctx, provider_ctx, gateway, monkeypatch):
    monkeypatch.setattr(booking_service, "generate_otp", lambda length=6: "483920")
    booking = await booking_service.create_booking(
        conn, customer_ctx, booking_request(provider_id=provider_ctx.provider_id)
    )
    booking_id = booking["booking_id"]

    await booking_service.change_status(conn, provider_ctx, booking_id, BookingStatus.ACCEPTED)
    started = await booking_service.change_status(conn, provider_ctx, booking_id, BookingStatus.STARTED)
    assert started["started_at"] is not None

    _, otp = await booking_service.request_otp(conn, provider_ctx, booking_id)
    assert otp == "483920"
    await booking_service.verify_otp(conn, provider_ctx, booking_id, "483920")

    updated, invoice = await booking_service.submit_invoice(
        conn, provider_ctx, booking_id,
        InvoiceCreate(spare_parts=[{"name": "Wire", "price": "50"}], service_charge="200"),
    )
    assert invoice["total"] == Decimal("250.00")
    assert updated["status"] == "awaiting_payment"

    intent = await reconciliation.create_gateway_order(
        conn, customer_ctx, gateway, CreateGatewayOrderRequest(booking_id=booking_id)
    )
    assert intent["amount"] == 25000

    payment_id = "pay_scenario001"
    outcome = await reconciliation.confirm_payment(
        conn, intent["gateway_order_id"], payment_id,
        payment_signature(intent["gateway_order_id"], payment_id, settings.razorpay_key_secret),
    )
    assert outcome.verified and not outcome.already_paid
    assert store.bookings[booking_id]["status"] == "completed"
    assert store.bookings[booking_id]["completed_at"] is not None
