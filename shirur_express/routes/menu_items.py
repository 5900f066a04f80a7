# shirur_express/routes/menu_items.py
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from uuid import UUID
import logging
import asyncpg

from ..database import get_db
from ..errors import AuthorizationError, NotFoundError
from ..models.auth import RequestContext
from ..models.menu import MenuCategory, MenuItemCreate, MenuItemOut, MenuItemUpdate
from ..queries.menu_queries import MenuItemRepository, get_menu_repository
from ..utils.auth import require_provider

logger = logging.getLogger(__name__)

menu_items_router = APIRouter(tags=["Menu Items"])


def menu_repository(category: MenuCategory) -> MenuItemRepository:
    return get_menu_repository(category)


def own_menu(
    category: MenuCategory,
    ctx: RequestContext = Depends(require_provider)
) -> RequestContext:
    """A provider manages only the menu of their own storefront category"""
    if ctx.provider_category != category.value:
        raise AuthorizationError(f"Your storefront is not in the '{category.value}' category")
    return ctx


@menu_items_router.get("/menu-items/{category}", response_model=List[MenuItemOut])
async def list_menu_items(
    provider_id: Optional[UUID] = None,
    search: Optional[str] = Query(None, max_length=100),
    repo: MenuItemRepository = Depends(menu_repository),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await repo.list_available(conn, provider_id=str(provider_id) if provider_id else None, search=search)

@menu_items_router.post(
    "/provider/menu-items/{category}",
    response_model=MenuItemOut,
    status_code=status.HTTP_201_CREATED
)
async def create_menu_item(
    item: MenuItemCreate,
    ctx: RequestContext = Depends(own_menu),
    repo: MenuItemRepository = Depends(menu_repository),
    conn: asyncpg.Connection = Depends(get_db)
):
    created = await repo.create(conn, ctx.provider_id, item.model_dump())
    logger.info(f"Menu item {created['item_id']} added to {repo.category.value} by {ctx.provider_id}")
    return created

@menu_items_router.get("/provider/menu-items/{category}", response_model=List[MenuItemOut])
async def list_my_menu_items(
    ctx: RequestContext = Depends(own_menu),
    repo: MenuItemRepository = Depends(menu_repository),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await repo.list_by_provider(conn, ctx.provider_id)

@menu_items_router.patch("/provider/menu-items/{category}/{item_id}", response_model=MenuItemOut)
async def update_menu_item(
    item_id: UUID,
    updates: MenuItemUpdate,
    ctx: RequestContext = Depends(own_menu),
    repo: MenuItemRepository = Depends(menu_repository),
    conn: asyncpg.Connection = Depends(get_db)
):
    updated = await repo.update(conn, str(item_id), ctx.provider_id, updates.model_dump(exclude_unset=True))
    if updated is None:
        raise NotFoundError("Menu item not found")
    return updated

@menu_items_router.delete("/provider/menu-items/{category}/{item_id}")
async def delete_menu_item(
    item_id: UUID,
    ctx: RequestContext = Depends(own_menu),
    repo: MenuItemRepository = Depends(menu_repository),
    conn: asyncpg.Connection = Depends(get_db)
):
    if not await repo.delete(conn, str(item_id), ctx.provider_id):
        raise NotFoundError("Menu item not found")
    return {"message": "Menu item deleted"}

__all__ = ["menu_items_router"]
