# shirur_express/queries/menu_queries.py
"""
Menu item storage.

Each storefront category keeps its items in its own table with a few extra
columns. ``MENU_REPOSITORIES`` is the closed mapping from ``MenuCategory`` to
the repository that owns that table; routes never build table names from
user input.
"""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List, Tuple
import asyncpg

from ..models.menu import MenuCategory
from .common import to_dict, to_dicts

BASE_COLUMNS = ("name", "description", "price", "image_url", "is_available")


class MenuItemRepository(ABC):
    category: MenuCategory

    @abstractmethod
    async def create(self, conn, provider_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def update(self, conn, item_id: str, provider_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """None when the item does not exist or belongs to another provider"""

    @abstractmethod
    async def delete(self, conn, item_id: str, provider_id: str) -> bool:
        ...

    @abstractmethod
    async def list_by_provider(self, conn, provider_id: str) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def list_available(self, conn, provider_id: Optional[str] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
        ...


class PostgresMenuItemRepository(MenuItemRepository):

    def __init__(self, category: MenuCategory, table: str, extra_columns: Tuple[str, ...] = ()):
        self.category = category
        self.table = table
        self.columns = BASE_COLUMNS + extra_columns

    def writable(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in data.items() if k in self.columns and v is not None}

    def _out(self, row) -> Optional[Dict[str, Any]]:
        item = to_dict(row)
        if item is not None:
            item["category"] = self.category.value
        return item

    async def create(self, conn: asyncpg.Connection, provider_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        values = self.writable(data)
        names = ["provider_id", *values]
        placeholders = ", ".join(f"${i}" for i in range(1, len(names) + 1))
        row = await conn.fetchrow(
            f"INSERT INTO {self.table} ({', '.join(names)}) VALUES ({placeholders}) RETURNING *",
            provider_id, *values.values()
        )
        return self._out(row)

    async def update(self, conn: asyncpg.Connection, item_id: str, provider_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        values = self.writable(updates)
        if not values:
            return self._out(await conn.fetchrow(
                f"SELECT * FROM {self.table} WHERE item_id = $1 AND provider_id = $2",
                item_id, provider_id
            ))
        assignments = ", ".join(f"{name} = ${i}" for i, name in enumerate(values, start=3))
        return self._out(await conn.fetchrow(
            f"""
            UPDATE {self.table}
            SET {assignments}
            WHERE item_id = $1 AND provider_id = $2
            RETURNING *
            """,
            item_id, provider_id, *values.values()
        ))

    async def delete(self, conn: asyncpg.Connection, item_id: str, provider_id: str) -> bool:
        deleted = await conn.fetchval(
            f"DELETE FROM {self.table} WHERE item_id = $1 AND provider_id = $2 RETURNING item_id",
            item_id, provider_id
        )
        return deleted is not None

    async def list_by_provider(self, conn: asyncpg.Connection, provider_id: str) -> List[Dict[str, Any]]:
        rows = await conn.fetch(
            f"SELECT * FROM {self.table} WHERE provider_id = $1 ORDER BY name",
            provider_id
        )
        return [self._out(r) for r in rows]

    async def list_available(self, conn: asyncpg.Connection, provider_id: Optional[str] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
        query = f"SELECT * FROM {self.table} WHERE is_available = TRUE"
        params: List[Any] = []
        if provider_id:
            params.append(provider_id)
            query += f" AND provider_id = ${len(params)}"
        if search:
            params.append(f"%{search}%")
            query += f" AND name ILIKE ${len(params)}"
        query += " ORDER BY name"
        return [self._out(r) for r in await conn.fetch(query, *params)]


MENU_REPOSITORIES: Dict[MenuCategory, MenuItemRepository] = {
    MenuCategory.BEAUTY: PostgresMenuItemRepository(
        MenuCategory.BEAUTY, "beauty_service", ("duration_minutes",)),
    MenuCategory.CAKE_SHOP: PostgresMenuItemRepository(
        MenuCategory.CAKE_SHOP, "cake_product", ("weight", "is_eggless")),
    MenuCategory.STREET_FOOD: PostgresMenuItemRepository(
        MenuCategory.STREET_FOOD, "street_food_item", ("is_veg",)),
    MenuCategory.RESTAURANTS: PostgresMenuItemRepository(
        MenuCategory.RESTAURANTS, "restaurant_menu_item", ("cuisine", "is_veg")),
}


def get_menu_repository(category: MenuCategory) -> MenuItemRepository:
    return MENU_REPOSITORIES[category]
