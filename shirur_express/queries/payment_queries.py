# shirur_express/queries/payment_queries.py
from typing import Optional, Dict, Any
import asyncpg

from .common import to_dict


async def create_payment_intent(
    conn: asyncpg.Connection,
    gateway_order_id: str,
    target: str,
    amount: int,
    currency: str,
    order_id: Optional[str] = None,
    booking_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Bind a gateway order id to a local order or invoice.

    Raises asyncpg.UniqueViolationError when the target already has an
    unpaid intent.
    """
    row = await conn.fetchrow(
        """
        INSERT INTO payment_intent (
            gateway_order_id, target, order_id, booking_id,
            amount, currency, status
        )
        VALUES ($1, $2, $3, $4, $5, $6, 'created')
        RETURNING *
        """,
        gateway_order_id, target, order_id, booking_id,
        amount, currency
    )
    return to_dict(row)


async def get_payment_intent(
    conn: asyncpg.Connection,
    gateway_order_id: str
) -> Optional[Dict[str, Any]]:
    return to_dict(await conn.fetchrow(
        "SELECT * FROM payment_intent WHERE gateway_order_id = $1",
        gateway_order_id
    ))


async def get_open_intent_for_order(
    conn: asyncpg.Connection,
    order_id: str
) -> Optional[Dict[str, Any]]:
    return to_dict(await conn.fetchrow(
        "SELECT * FROM payment_intent WHERE order_id = $1 AND status = 'created'",
        order_id
    ))


async def get_open_intent_for_booking(
    conn: asyncpg.Connection,
    booking_id: str
) -> Optional[Dict[str, Any]]:
    return to_dict(await conn.fetchrow(
        """
        SELECT * FROM payment_intent
        WHERE booking_id = $1 AND status = 'created'
        """,
        booking_id
    ))


async def mark_intent_paid(
    conn: asyncpg.Connection,
    gateway_order_id: str,
    payment_id: str,
    settled_by: str
) -> Optional[Dict[str, Any]]:
    """created -> paid; None when another path already settled it"""
    return to_dict(await conn.fetchrow(
        """
        UPDATE payment_intent
        SET status = 'paid', payment_id = $2, settled_by = $3, paid_at = NOW()
        WHERE gateway_order_id = $1 AND status = 'created'
        RETURNING *
        """,
        gateway_order_id, payment_id, settled_by
    ))


async def record_webhook_event(
    conn: asyncpg.Connection,
    event_id: str,
    event_type: str,
    gateway_order_id: Optional[str]
) -> bool:
    """True the first time an event id is seen, False for a replay"""
    inserted = await conn.fetchval(
        """
        INSERT INTO webhook_event (event_id, event_type, gateway_order_id)
        VALUES ($1, $2, $3)
        ON CONFLICT (event_id) DO NOTHING
        RETURNING event_id
        """,
        event_id, event_type, gateway_order_id
    )
    return inserted is not None
