# shirur_express/queries/order_queries.py
from decimal import Decimal
from typing import Optional, Dict, Any, List
import asyncpg

from .common import to_dict, to_json

JSON_FIELDS = ("items",)


async def create_order(
    conn: asyncpg.Connection,
    user_id: str,
    items: List[Dict[str, Any]],
    subtotal: Decimal,
    platform_fee: Decimal,
    delivery_fee: Decimal,
    total: Decimal,
    delivery_address: str
) -> Dict[str, Any]:
    """Create a grocery order in 'pending'"""
    row = await conn.fetchrow(
        """
        INSERT INTO grocery_order (
            user_id, items, subtotal, platform_fee,
            delivery_fee, total, delivery_address, status
        )
        VALUES ($1, $2::jsonb, $3, $4, $5, $6, $7, 'pending')
        RETURNING *
        """,
        user_id, to_json(items), subtotal, platform_fee,
        delivery_fee, total, delivery_address
    )
    return to_dict(row, JSON_FIELDS)


async def get_order(
    conn: asyncpg.Connection,
    order_id: str
) -> Optional[Dict[str, Any]]:
    return to_dict(await conn.fetchrow(
        "SELECT * FROM grocery_order WHERE order_id = $1",
        order_id
    ), JSON_FIELDS)


async def attach_payment_intent(
    conn: asyncpg.Connection,
    order_id: str,
    gateway_order_id: str
) -> Optional[Dict[str, Any]]:
    """Record the gateway order on a still-unpaid order that has none yet"""
    return to_dict(await conn.fetchrow(
        """
        UPDATE grocery_order
        SET payment_intent_ref = $2
        WHERE order_id = $1 AND status = 'pending' AND payment_intent_ref IS NULL
        RETURNING *
        """,
        order_id, gateway_order_id
    ), JSON_FIELDS)


async def mark_order_paid_if_pending(
    conn: asyncpg.Connection,
    order_id: str,
    payment_id: str
) -> Optional[Dict[str, Any]]:
    """pending -> paid; None if the order was already paid"""
    return to_dict(await conn.fetchrow(
        """
        UPDATE grocery_order
        SET status = 'paid', payment_id = $2, paid_at = NOW()
        WHERE order_id = $1 AND status = 'pending'
        RETURNING *
        """,
        order_id, payment_id
    ), JSON_FIELDS)
