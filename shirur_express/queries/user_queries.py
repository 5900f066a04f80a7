# shirur_express/queries/user_queries.py
from typing import Optional, Dict, Any
import asyncpg

from .common import to_dict


async def create_user(
    conn: asyncpg.Connection,
    username: str,
    email: str,
    password_hash: str,
    role: str,
    phone: Optional[str]
) -> Dict[str, Any]:
    row = await conn.fetchrow(
        """
        INSERT INTO app_user (username, email, password_hash, role, phone)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING *
        """,
        username, email, password_hash, role, phone
    )
    return to_dict(row)


async def get_user_by_id(
    conn: asyncpg.Connection,
    user_id: str
) -> Optional[Dict[str, Any]]:
    return to_dict(await conn.fetchrow(
        "SELECT * FROM app_user WHERE user_id = $1",
        user_id
    ))


async def get_user_by_username(
    conn: asyncpg.Connection,
    username: str
) -> Optional[Dict[str, Any]]:
    return to_dict(await conn.fetchrow(
        "SELECT * FROM app_user WHERE username = $1",
        username
    ))


async def get_user_by_email(
    conn: asyncpg.Connection,
    email: str
) -> Optional[Dict[str, Any]]:
    return to_dict(await conn.fetchrow(
        "SELECT * FROM app_user WHERE email = $1",
        email
    ))
