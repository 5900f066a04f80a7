# shirur_express/models/menu.py
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum

class MenuCategory(str, Enum):
    """Storefront categories that carry a provider-managed menu"""
    BEAUTY = "beauty"
    CAKE_SHOP = "cake-shop"
    STREET_FOOD = "street-food"
    RESTAURANTS = "restaurants"

class MenuItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = None
    is_available: bool = True
    # category specific; ignored by tables that lack the column
    duration_minutes: Optional[int] = Field(None, ge=1)
    weight: Optional[str] = None
    is_eggless: Optional[bool] = None
    is_veg: Optional[bool] = None
    cuisine: Optional[str] = None

class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = None
    is_available: Optional[bool] = None
    duration_minutes: Optional[int] = Field(None, ge=1)
    weight: Optional[str] = None
    is_eggless: Optional[bool] = None
    is_veg: Optional[bool] = None
    cuisine: Optional[str] = None

class MenuItemOut(BaseModel):
    item_id: str
    provider_id: str
    category: MenuCategory
    name: str
    description: Optional[str] = None
    price: Decimal
    image_url: Optional[str] = None
    is_available: bool
    duration_minutes: Optional[int] = None
    weight: Optional[str] = None
    is_eggless: Optional[bool] = None
    is_veg: Optional[bool] = None
    cuisine: Optional[str] = None
