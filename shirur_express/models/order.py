# shirur_express/models/order.py
from decimal import Decimal
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional
from enum import Enum

class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"

class OrderItemIn(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1, le=100)

class OrderItem(BaseModel):
    product_id: int
    name: str
    quantity: int
    price: Decimal

class OrderCreate(BaseModel):
    items: List[OrderItemIn] = Field(..., min_length=1)
    delivery_address: str = Field(..., min_length=5)
    # Client's own figure, compared against the recomputed total if sent
    total: Optional[Decimal] = None

class OrderOut(BaseModel):
    order_id: str
    user_id: str
    items: List[OrderItem]
    subtotal: Decimal
    platform_fee: Decimal
    delivery_fee: Decimal
    total: Decimal
    delivery_address: str
    payment_intent_ref: Optional[str]
    status: OrderStatus
    paid_at: Optional[datetime] = None
    created_at: datetime
