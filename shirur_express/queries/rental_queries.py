# shirur_express/queries/rental_queries.py
from decimal import Decimal
from typing import Optional, Dict, Any, List
import asyncpg

from .common import to_dict, to_dicts

RENTAL_SELECT = """
    SELECT
        r.*,
        u.username AS owner_name,
        u.phone AS owner_phone
    FROM rental_property r
    JOIN app_user u ON r.owner_id = u.user_id
"""


async def create_rental_property(
    conn: asyncpg.Connection,
    owner_id: str,
    title: str,
    property_type: str,
    rent: Decimal,
    locality: str,
    description: Optional[str] = None,
    area: Optional[int] = None,
    bedrooms: Optional[int] = None,
    bathrooms: Optional[int] = None,
    furnishing: Optional[str] = None,
    address: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    amenities: Optional[List[str]] = None,
    images: Optional[List[str]] = None
) -> Dict[str, Any]:
    property_id = await conn.fetchval(
        """
        INSERT INTO rental_property (
            owner_id, title, description, property_type, rent, area,
            bedrooms, bathrooms, furnishing, address, locality,
            latitude, longitude, amenities, images
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14, $15)
        RETURNING property_id
        """,
        owner_id, title, description, property_type, rent, area,
        bedrooms, bathrooms, furnishing, address, locality,
        latitude, longitude, amenities or [], images or []
    )
    return await get_rental_property(conn, str(property_id))


async def get_rental_property(
    conn: asyncpg.Connection,
    property_id: str
) -> Optional[Dict[str, Any]]:
    """Listing with the owner's contact details"""
    return to_dict(await conn.fetchrow(
        RENTAL_SELECT + " WHERE r.property_id = $1",
        property_id
    ))


async def list_rental_properties(
    conn: asyncpg.Connection,
    property_type: Optional[str] = None,
    min_rent: Optional[Decimal] = None,
    max_rent: Optional[Decimal] = None,
    furnishing: Optional[str] = None,
    locality: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Available listings, newest first; locality matches as a substring"""
    conditions = ["r.is_available = TRUE"]
    params: List[Any] = []
    if property_type:
        params.append(property_type)
        conditions.append(f"r.property_type = ${len(params)}")
    if min_rent is not None:
        params.append(min_rent)
        conditions.append(f"r.rent >= ${len(params)}")
    if max_rent is not None:
        params.append(max_rent)
        conditions.append(f"r.rent <= ${len(params)}")
    if furnishing:
        params.append(furnishing)
        conditions.append(f"r.furnishing = ${len(params)}")
    if locality:
        params.append(f"%{locality}%")
        conditions.append(f"r.locality ILIKE ${len(params)}")

    query = RENTAL_SELECT + f" WHERE {' AND '.join(conditions)} ORDER BY r.created_at DESC"
    return to_dicts(await conn.fetch(query, *params))
