# shirur_express/routes/orders.py
from fastapi import APIRouter, Depends, status
from uuid import UUID
import asyncpg

from ..database import get_db
from ..models.auth import RequestContext
from ..models.order import OrderCreate, OrderOut
from ..services import order_service
from ..utils.auth import get_current_user, require_customer

orders_router = APIRouter(prefix="/grocery-orders", tags=["Grocery Orders"])

@orders_router.post("/", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
async def create_grocery_order(
    order: OrderCreate,
    ctx: RequestContext = Depends(require_customer),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await order_service.create_order(conn, ctx, order)

@orders_router.get("/{order_id}", response_model=OrderOut)
async def get_grocery_order(
    order_id: UUID,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await order_service.get_order_for(conn, ctx, str(order_id))

__all__ = ["orders_router"]
