# shirur_express/queries/table_booking_queries.py
from datetime import date
from typing import Optional, Dict, Any, List
import asyncpg

from .common import to_dict, to_dicts


async def create_table_booking(
    conn: asyncpg.Connection,
    user_id: str,
    provider_id: str,
    booking_date: date,
    booking_time: str,
    party_size: int,
    special_requests: Optional[str] = None
) -> Dict[str, Any]:
    """Reserve a table in 'pending' until the restaurant confirms"""
    row = await conn.fetchrow(
        """
        INSERT INTO table_booking (
            user_id, provider_id, booking_date, booking_time,
            party_size, special_requests, status
        )
        VALUES ($1, $2, $3, $4, $5, $6, 'pending')
        RETURNING *
        """,
        user_id, provider_id, booking_date, booking_time,
        party_size, special_requests
    )
    return to_dict(row)


async def get_table_booking(
    conn: asyncpg.Connection,
    table_booking_id: str
) -> Optional[Dict[str, Any]]:
    return to_dict(await conn.fetchrow(
        "SELECT * FROM table_booking WHERE table_booking_id = $1",
        table_booking_id
    ))


async def get_user_table_bookings(
    conn: asyncpg.Connection,
    user_id: str
) -> List[Dict[str, Any]]:
    return to_dicts(await conn.fetch(
        "SELECT * FROM table_booking WHERE user_id = $1 ORDER BY created_at DESC",
        user_id
    ))


async def get_provider_table_bookings(
    conn: asyncpg.Connection,
    provider_id: str
) -> List[Dict[str, Any]]:
    return to_dicts(await conn.fetch(
        """
        SELECT * FROM table_booking
        WHERE provider_id = $1
        ORDER BY booking_date, booking_time
        """,
        provider_id
    ))


async def update_table_booking_status(
    conn: asyncpg.Connection,
    table_booking_id: str,
    expected_status: str,
    new_status: str
) -> Optional[Dict[str, Any]]:
    """Compare-and-set on status; None when the stored status moved on"""
    return to_dict(await conn.fetchrow(
        """
        UPDATE table_booking
        SET status = $3
        WHERE table_booking_id = $1 AND status = $2
        RETURNING *
        """,
        table_booking_id, expected_status, new_status
    ))
