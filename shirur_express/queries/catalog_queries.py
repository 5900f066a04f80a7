# shirur_express/queries/catalog_queries.py
from typing import Optional, Dict, Any, List
import asyncpg

from .common import to_dict, to_dicts


async def list_categories(conn: asyncpg.Connection) -> List[Dict[str, Any]]:
    return to_dicts(await conn.fetch(
        "SELECT * FROM service_category ORDER BY name"
    ))


async def get_category_by_slug(
    conn: asyncpg.Connection,
    slug: str
) -> Optional[Dict[str, Any]]:
    return to_dict(await conn.fetchrow(
        "SELECT * FROM service_category WHERE slug = $1",
        slug
    ))


async def list_problems(
    conn: asyncpg.Connection,
    category_id: str,
    parent_id: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Top-level problems (devices) when parent_id is None, else that device's issues"""
    if parent_id is None:
        rows = await conn.fetch(
            """
            SELECT * FROM service_problem
            WHERE category_id = $1 AND parent_id IS NULL
            ORDER BY name
            """,
            category_id
        )
    else:
        rows = await conn.fetch(
            """
            SELECT * FROM service_problem
            WHERE category_id = $1 AND parent_id = $2
            ORDER BY name
            """,
            category_id, parent_id
        )
    return to_dicts(rows)


async def list_grocery_products(
    conn: asyncpg.Connection,
    category: Optional[str] = None,
    search: Optional[str] = None
) -> List[Dict[str, Any]]:
    query = "SELECT * FROM grocery_product WHERE in_stock = TRUE"
    params: List[Any] = []
    if category:
        params.append(category)
        query += f" AND category = ${len(params)}"
    if search:
        params.append(f"%{search}%")
        query += f" AND name ILIKE ${len(params)}"
    query += " ORDER BY name"
    return to_dicts(await conn.fetch(query, *params))


async def get_grocery_products(
    conn: asyncpg.Connection,
    product_ids: List[int]
) -> List[Dict[str, Any]]:
    return to_dicts(await conn.fetch(
        "SELECT * FROM grocery_product WHERE product_id = ANY($1::int[])",
        product_ids
    ))
