# shirur_express/queries/notification_queries.py
from typing import Dict, Any, List
import asyncpg

from .common import to_dicts


async def create_notification(
    conn: asyncpg.Connection,
    recipient_id: str,
    message: str
) -> None:
    await conn.execute(
        """
        INSERT INTO notification (message, recipient_id)
        VALUES ($1, $2)
        """,
        message, recipient_id
    )


async def get_notifications(
    conn: asyncpg.Connection,
    recipient_id: str,
    status: str = "all"
) -> List[Dict[str, Any]]:
    query = """
        SELECT notification_id, message, created_at, is_read
        FROM notification
        WHERE recipient_id = $1
    """
    if status == "read":
        query += " AND is_read = true"
    elif status == "unread":
        query += " AND is_read = false"
    query += " ORDER BY created_at DESC"
    return to_dicts(await conn.fetch(query, recipient_id))


async def count_unread(conn: asyncpg.Connection, recipient_id: str) -> int:
    return await conn.fetchval(
        """
        SELECT COUNT(*) FROM notification
        WHERE recipient_id = $1 AND is_read = false
        """,
        recipient_id
    )


async def mark_read(
    conn: asyncpg.Connection,
    notification_id: str,
    recipient_id: str
) -> bool:
    result = await conn.execute(
        """
        UPDATE notification
        SET is_read = true
        WHERE notification_id = $1 AND recipient_id = $2
        """,
        notification_id, recipient_id
    )
    return result != "UPDATE 0"


async def mark_all_read(conn: asyncpg.Connection, recipient_id: str) -> None:
    await conn.execute(
        """
        UPDATE notification
        SET is_read = true
        WHERE recipient_id = $1 AND is_read = false
        """,
        recipient_id
    )
