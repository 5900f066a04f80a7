# shirur_express/services/sms.py
"""
Twilio SMS sender
Talks to the Twilio REST API directly; every call is bounded by a timeout.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import settings
from ..errors import UpstreamError

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


@dataclass
class DeliveryResult:
    sent: bool
    sid: Optional[str] = None
    error: Optional[str] = None


def to_e164(phone: str, default_country_code: str = "+91") -> str:
    """Normalize a local 10-digit number to E.164; numbers with a '+' are kept"""
    cleaned = re.sub(r"[\s\-()]", "", phone or "")
    if cleaned.startswith("+"):
        return cleaned
    if cleaned.startswith("0"):
        cleaned = cleaned[1:]
    return f"{default_country_code}{cleaned}"


class TwilioSmsClient:

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.timeout = timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    async def send(self, to: str, body: str) -> DeliveryResult:
        """
        Send one SMS.

        Returns a not-sent result when SMS is not configured; raises
        UpstreamError when Twilio is unreachable, times out or rejects it.
        """
        if not self.enabled:
            logger.debug("SMS disabled, skipping message")
            return DeliveryResult(sent=False, error="SMS not configured")

        to_phone = to_e164(to)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json",
                    auth=(self.account_sid, self.auth_token),
                    data={"To": to_phone, "From": self.from_number, "Body": body},
                )
        except httpx.HTTPError as e:
            logger.error(f"Twilio request failed: {e!r}")
            raise UpstreamError("SMS provider unreachable, try again") from e

        if response.status_code not in (200, 201):
            error_message = response.json().get("message", "Unknown error") if response.content else "Unknown error"
            logger.error(f"Twilio API error [{response.status_code}]: {error_message}")
            raise UpstreamError(f"SMS provider rejected the message: {error_message}")

        sid = response.json().get("sid")
        logger.info(f"SMS sent to {to_phone} (SID: {sid})")
        return DeliveryResult(sent=True, sid=sid)


def get_sms_client() -> TwilioSmsClient:
    return TwilioSmsClient(
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        from_number=settings.twilio_from_number,
        timeout=settings.sms_timeout_seconds,
    )
