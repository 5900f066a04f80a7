# shirur_express/database.py
from pathlib import Path
from typing import AsyncGenerator

import asyncpg

from .config import settings

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


async def connect() -> asyncpg.Connection:
    return await asyncpg.connect(
        user=settings.database_username,
        password=settings.database_password,
        database=settings.database_name,
        host=settings.database_hostname,
        port=settings.database_port
    )


async def get_db() -> AsyncGenerator[asyncpg.Connection, None]:
    """One connection per request, closed when the response is done"""
    conn = await connect()
    try:
        yield conn
    finally:
        await conn.close()


async def init_schema(conn: asyncpg.Connection) -> None:
    """Create all tables; statements are idempotent (IF NOT EXISTS)"""
    await conn.execute(SCHEMA_PATH.read_text())
