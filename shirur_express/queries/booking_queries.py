# shirur_express/queries/booking_queries.py
from typing import Optional, Dict, Any, List
import asyncpg
from datetime import datetime

from .common import to_dict, to_dicts

# Columns a transition may write alongside the status
TRANSITION_FIELDS = ("provider_id", "otp", "started_at", "completed_at")


async def create_booking(
    conn: asyncpg.Connection,
    user_id: str,
    service_type: str,
    user_address: str,
    user_phone: str,
    provider_id: Optional[str] = None,
    problem_id: Optional[str] = None,
    scheduled_at: Optional[datetime] = None,
    preferred_time_slots: Optional[List[str]] = None,
    notes: Optional[str] = None
) -> Dict[str, Any]:
    """Create a new booking in 'pending'"""
    row = await conn.fetchrow(
        """
        INSERT INTO booking (
            user_id, provider_id, service_type, problem_id,
            scheduled_at, preferred_time_slots, user_address,
            user_phone, notes, status
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, 'pending')
        RETURNING *
        """,
        user_id, provider_id, service_type, problem_id,
        scheduled_at, preferred_time_slots or [], user_address,
        user_phone, notes
    )
    return to_dict(row)


async def get_booking(
    conn: asyncpg.Connection,
    booking_id: str
) -> Optional[Dict[str, Any]]:
    return to_dict(await conn.fetchrow(
        "SELECT * FROM booking WHERE booking_id = $1",
        booking_id
    ))


async def update_booking_if_status(
    conn: asyncpg.Connection,
    booking_id: str,
    expected_status: str,
    new_status: str,
    fields: Optional[Dict[str, Any]] = None,
    expected_otp: Optional[str] = None,
    claim_provider_id: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    """
    Compare-and-set on booking status.

    The row is only written when its stored status still equals
    ``expected_status`` (and, when given, its stored code equals
    ``expected_otp``). ``claim_provider_id`` lets an unassigned booking be
    claimed in the same statement. Returns the updated row, or None when the
    guard did not match.
    """
    fields = fields or {}
    unknown = set(fields) - set(TRANSITION_FIELDS)
    if unknown:
        raise ValueError(f"Not a transition field: {sorted(unknown)}")

    assignments = ["status = $3", "updated_at = NOW()"]
    params: List[Any] = [booking_id, expected_status, new_status]
    for name, value in fields.items():
        params.append(value)
        assignments.append(f"{name} = ${len(params)}")

    conditions = ["booking_id = $1", "status = $2"]
    if expected_otp is not None:
        params.append(expected_otp)
        conditions.append(f"otp = ${len(params)}")
    if claim_provider_id is not None:
        params.append(claim_provider_id)
        conditions.append(f"(provider_id IS NULL OR provider_id = ${len(params)})")
        assignments.append(f"provider_id = ${len(params)}")

    row = await conn.fetchrow(
        f"""
        UPDATE booking
        SET {", ".join(assignments)}
        WHERE {" AND ".join(conditions)}
        RETURNING *
        """,
        *params
    )
    return to_dict(row)


async def get_user_bookings(
    conn: asyncpg.Connection,
    user_id: str,
    status: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Bookings for a customer with optional status filter"""
    query = "SELECT * FROM booking WHERE user_id = $1"
    params: List[Any] = [user_id]

    if status:
        query += " AND status = $2"
        params.append(status)

    query += " ORDER BY created_at DESC"

    return to_dicts(await conn.fetch(query, *params))


async def get_provider_bookings(
    conn: asyncpg.Connection,
    provider_id: str,
    category_slug: str
) -> List[Dict[str, Any]]:
    """Bookings assigned to the provider plus unclaimed requests in their category"""
    return to_dicts(await conn.fetch(
        """
        SELECT *
        FROM booking
        WHERE provider_id = $1
           OR (provider_id IS NULL AND status = 'pending' AND service_type = $2)
        ORDER BY created_at DESC
        """,
        provider_id, category_slug
    ))
