# shirur_express/queries/review_queries.py
from typing import Optional, Dict, Any, List
import asyncpg

from .common import to_dict, to_dicts


async def create_review(
    conn: asyncpg.Connection,
    booking_id: str,
    user_id: str,
    provider_id: str,
    rating: int,
    comment: Optional[str]
) -> Dict[str, Any]:
    row = await conn.fetchrow(
        """
        INSERT INTO review (booking_id, user_id, provider_id, rating, comment)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING *
        """,
        booking_id, user_id, provider_id, rating, comment
    )
    return to_dict(row)


async def review_exists(
    conn: asyncpg.Connection,
    booking_id: str,
    user_id: str
) -> bool:
    return await conn.fetchval(
        "SELECT EXISTS(SELECT 1 FROM review WHERE booking_id = $1 AND user_id = $2)",
        booking_id, user_id
    )


async def get_provider_rating_stats(
    conn: asyncpg.Connection,
    provider_id: str
) -> Dict[str, Any]:
    """{'average': Decimal | None, 'count': int}"""
    row = await conn.fetchrow(
        """
        SELECT AVG(rating)::numeric(3, 2) AS average, COUNT(*) AS count
        FROM review
        WHERE provider_id = $1
        """,
        provider_id
    )
    return dict(row)


async def get_provider_reviews(
    conn: asyncpg.Connection,
    provider_id: str
) -> List[Dict[str, Any]]:
    return to_dicts(await conn.fetch(
        """
        SELECT r.*, u.username
        FROM review r
        JOIN app_user u ON r.user_id = u.user_id
        WHERE r.provider_id = $1
        ORDER BY r.created_at DESC
        """,
        provider_id
    ))
