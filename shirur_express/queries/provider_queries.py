# shirur_express/queries/provider_queries.py
from decimal import Decimal
from typing import Optional, Dict, Any, List
import asyncpg

from .common import to_dict, to_dicts

PROVIDER_SELECT = """
    SELECT
        p.*,
        c.slug AS category_slug,
        c.name AS category_name,
        u.username,
        u.phone
    FROM service_provider p
    JOIN service_category c ON p.category_id = c.category_id
    JOIN app_user u ON p.user_id = u.user_id
"""

UPDATABLE_FIELDS = (
    "business_name", "description", "experience", "address",
    "latitude", "longitude", "specializations", "is_available"
)


async def create_provider(
    conn: asyncpg.Connection,
    user_id: str,
    category_id: str,
    business_name: str,
    description: Optional[str] = None,
    experience: Optional[int] = None,
    address: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    specializations: Optional[List[str]] = None
) -> Dict[str, Any]:
    provider_id = await conn.fetchval(
        """
        INSERT INTO service_provider (
            user_id, category_id, business_name, description,
            experience, address, latitude, longitude, specializations
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
        RETURNING provider_id
        """,
        user_id, category_id, business_name, description,
        experience, address, latitude, longitude, specializations or []
    )
    return await get_provider(conn, str(provider_id))


async def get_provider(
    conn: asyncpg.Connection,
    provider_id: str
) -> Optional[Dict[str, Any]]:
    """Provider with category and owning user details"""
    return to_dict(await conn.fetchrow(
        PROVIDER_SELECT + " WHERE p.provider_id = $1",
        provider_id
    ))


async def get_provider_by_user_id(
    conn: asyncpg.Connection,
    user_id: str
) -> Optional[Dict[str, Any]]:
    return to_dict(await conn.fetchrow(
        PROVIDER_SELECT + " WHERE p.user_id = $1",
        user_id
    ))


async def list_providers(
    conn: asyncpg.Connection,
    category_slug: Optional[str] = None
) -> List[Dict[str, Any]]:
    query = PROVIDER_SELECT
    params: List[Any] = []
    if category_slug:
        query += " WHERE c.slug = $1"
        params.append(category_slug)
    query += " ORDER BY p.rating DESC, p.review_count DESC"
    return to_dicts(await conn.fetch(query, *params))


async def update_provider(
    conn: asyncpg.Connection,
    provider_id: str,
    updates: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """Apply a partial profile update; unknown keys are rejected"""
    unknown = set(updates) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Not an updatable field: {sorted(unknown)}")
    if updates:
        assignments = []
        params: List[Any] = [provider_id]
        for name, value in updates.items():
            params.append(value)
            assignments.append(f"{name} = ${len(params)}")
        await conn.execute(
            f"UPDATE service_provider SET {', '.join(assignments)} WHERE provider_id = $1",
            *params
        )
    return await get_provider(conn, provider_id)


async def update_provider_rating(
    conn: asyncpg.Connection,
    provider_id: str,
    rating: Decimal,
    review_count: int
) -> None:
    await conn.execute(
        """
        UPDATE service_provider
        SET rating = $2, review_count = $3
        WHERE provider_id = $1
        """,
        provider_id, rating, review_count
    )
