# shirur_express/services/notifications.py
"""
Notification dispatch. Runs after a state change is committed; failures are
logged and never propagate to the request that caused them.
"""
import logging
from datetime import datetime
from typing import Optional

import asyncpg

from ..errors import UpstreamError
from ..models.booking import BookingStatus
from ..queries import notification_queries
from .sms import DeliveryResult, TwilioSmsClient

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    BookingStatus.STARTED: "{provider} has started working on your booking.",
    BookingStatus.AWAITING_BILL: "Service completion confirmed. {provider} is preparing your bill.",
    BookingStatus.AWAITING_PAYMENT: "Your bill from {provider} is ready. Please complete the payment.",
    BookingStatus.COMPLETED: "Payment received. Your booking is complete, thank you!",
    BookingStatus.CANCELLED: "Booking has been cancelled.",
}


def booking_status_message(status: BookingStatus, provider_name: str, scheduled_at: Optional[datetime] = None) -> str:
    if status == BookingStatus.ACCEPTED:
        when = f" for {scheduled_at:%d %b %Y, %I:%M %p}" if scheduled_at else ""
        return f"Good news! {provider_name} has accepted your booking{when}. They will contact you soon."
    if status == BookingStatus.DECLINED:
        return f"{provider_name} has declined your booking request. Please try booking with another provider."
    template = STATUS_MESSAGES.get(BookingStatus(status), "Booking status updated to {status}.")
    return template.format(provider=provider_name, status=BookingStatus(status).value)


def otp_message(otp: str) -> str:
    return (
        f"Your service OTP for Shirur Express is {otp}. "
        "Please share this with your technician to complete the service."
    )


async def notify_in_app(conn: asyncpg.Connection, recipient_id: str, message: str) -> None:
    try:
        await notification_queries.create_notification(conn, recipient_id, message)
    except (asyncpg.PostgresError, OSError) as e:
        logger.warning(f"Could not store notification for {recipient_id}: {e!r}")


async def send_sms_best_effort(sms: TwilioSmsClient, to: str, body: str) -> DeliveryResult:
    """Used as a background task; the state change it reports is already committed"""
    try:
        return await sms.send(to, body)
    except UpstreamError as e:
        logger.error(f"SMS to customer not delivered: {e.message}")
        return DeliveryResult(sent=False, error=e.message)
