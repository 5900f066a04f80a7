# shirur_express/services/payment_gateway.py
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import settings
from ..errors import UpstreamError

logger = logging.getLogger(__name__)


@dataclass
class GatewayOrder:
    id: str
    amount: int
    currency: str
    status: str


class RazorpayClient:
    """Minimal Razorpay Orders API client"""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_base: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def create_order(
        self,
        amount: int,
        currency: str = "INR",
        receipt: Optional[str] = None,
        notes: Optional[dict] = None,
    ) -> GatewayOrder:
        """
        Create a gateway order for ``amount`` minor units.

        A timeout, network error or non-2xx reply raises UpstreamError;
        nothing is retried here.
        """
        payload = {"amount": amount, "currency": currency}
        if receipt:
            payload["receipt"] = receipt[:40]
        if notes:
            payload["notes"] = notes

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(
                    f"{self.api_base}/orders",
                    json=payload,
                    auth=(self.key_id, self.key_secret),
                )
        except httpx.TimeoutException as e:
            logger.error(f"Gateway order creation timed out after {self.timeout}s")
            raise UpstreamError("Payment gateway timed out, try again") from e
        except httpx.HTTPError as e:
            logger.error(f"Gateway order creation failed: {e!r}")
            raise UpstreamError("Payment gateway unreachable, try again") from e

        if resp.status_code >= 400:
            logger.error(f"Gateway rejected order creation [{resp.status_code}]: {resp.text[:200]}")
            raise UpstreamError("Payment gateway rejected the order")

        data = resp.json()
        logger.info(f"Gateway order {data.get('id')} created for {amount} {currency}")
        return GatewayOrder(
            id=data["id"],
            amount=data.get("amount", amount),
            currency=data.get("currency", currency),
            status=data.get("status", "created"),
        )


def get_payment_gateway() -> RazorpayClient:
    return RazorpayClient(
        key_id=settings.razorpay_key_id,
        key_secret=settings.razorpay_key_secret,
        api_base=settings.razorpay_api_base,
        timeout=settings.gateway_timeout_seconds,
    )
