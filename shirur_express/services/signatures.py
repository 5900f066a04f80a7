"""
Payment signature verification

Both checks recompute an HMAC-SHA256 hex digest with a server-held secret and
compare it in constant time. They return booleans; callers decide how a
mismatch is reported.
"""

import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)


def constant_time_compare(a: str, b: str) -> bool:
    if not a or not b:
        return False
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def compute_hmac_sha256(secret: str, payload: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def payment_signature(gateway_order_id: str, payment_id: str, secret: str) -> str:
    """Signature the gateway hands the client after checkout: HMAC(order_id|payment_id)"""
    return compute_hmac_sha256(secret, f"{gateway_order_id}|{payment_id}".encode("utf-8"))


def verify_payment_signature(gateway_order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    if not secret:
        logger.error("Payment key secret not configured; rejecting signature")
        return False
    expected = payment_signature(gateway_order_id, payment_id, secret)
    return constant_time_compare(expected, signature)


def verify_webhook_signature(raw_body: bytes, signature: str, secret: str) -> bool:
    """HMAC over the raw, unparsed request body"""
    if not secret:
        logger.error("Webhook secret not configured; rejecting webhook")
        return False
    expected = compute_hmac_sha256(secret, raw_body)
    return constant_time_compare(expected, signature)
