# shirur_express/queries/invoice_queries.py
from decimal import Decimal
from typing import Optional, Dict, Any, List
import asyncpg

from .common import to_dict, to_json

JSON_FIELDS = ("spare_parts",)


async def create_invoice(
    conn: asyncpg.Connection,
    booking_id: str,
    spare_parts: List[Dict[str, Any]],
    service_charge: Decimal,
    notes: Optional[str],
    total: Decimal
) -> Dict[str, Any]:
    """Insert the bill for a booking; booking_id is unique so a second bill fails"""
    row = await conn.fetchrow(
        """
        INSERT INTO invoice (booking_id, spare_parts, service_charge, notes, total)
        VALUES ($1, $2::jsonb, $3, $4, $5)
        RETURNING *
        """,
        booking_id, to_json(spare_parts), service_charge, notes, total
    )
    return to_dict(row, JSON_FIELDS)


async def get_invoice_by_booking(
    conn: asyncpg.Connection,
    booking_id: str
) -> Optional[Dict[str, Any]]:
    return to_dict(await conn.fetchrow(
        "SELECT * FROM invoice WHERE booking_id = $1",
        booking_id
    ), JSON_FIELDS)
