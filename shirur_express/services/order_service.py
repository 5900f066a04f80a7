# shirur_express/services/order_service.py
import logging
from decimal import Decimal
from typing import Any, Dict

import asyncpg

from ..config import settings
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..models.auth import RequestContext
from ..models.order import OrderCreate
from ..queries import catalog_queries, order_queries
from .pricing import check_client_total, money, order_totals

logger = logging.getLogger(__name__)


async def create_order(conn: asyncpg.Connection, ctx: RequestContext, data: OrderCreate) -> Dict[str, Any]:
    """Price the cart from the catalog, never from the client, and store it as pending"""
    quantities: Dict[int, int] = {}
    for item in data.items:
        quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity

    products = {
        p["product_id"]: p
        for p in await catalog_queries.get_grocery_products(conn, list(quantities))
    }
    missing = [pid for pid in quantities if pid not in products]
    if missing:
        raise ValidationError(f"Unknown products: {missing}")
    out_of_stock = [pid for pid in quantities if not products[pid]["in_stock"]]
    if out_of_stock:
        raise ValidationError(f"Out of stock: {out_of_stock}")

    lines = []
    subtotal = Decimal("0")
    for product_id, quantity in quantities.items():
        price = money(products[product_id]["price"])
        lines.append({
            "product_id": product_id,
            "name": products[product_id]["name"],
            "quantity": quantity,
            "price": price,
        })
        subtotal += price * quantity

    totals = order_totals(subtotal, settings.platform_fee_rate, settings.delivery_fee)
    check_client_total(data.total, totals["total"], "Order")

    order = await order_queries.create_order(
        conn,
        user_id=ctx.user_id,
        items=lines,
        delivery_address=data.delivery_address,
        **totals,
    )
    logger.info(f"Order {order['order_id']} created by {ctx.user_id}: total {totals['total']}")
    return order


async def get_order_for(conn: asyncpg.Connection, ctx: RequestContext, order_id: str) -> Dict[str, Any]:
    order = await order_queries.get_order(conn, order_id)
    if not order:
        raise NotFoundError("Order not found")
    if not ctx.is_admin and order["user_id"] != ctx.user_id:
        raise AuthorizationError("Not your order")
    return order
