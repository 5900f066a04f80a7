# shirur_express/models/provider.py
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional

class CategoryOut(BaseModel):
    category_id: str
    name: str
    slug: str

class ProblemOut(BaseModel):
    problem_id: str
    category_id: str
    name: str
    parent_id: Optional[str]

class ProviderCreate(BaseModel):
    category_slug: str
    business_name: str = Field(..., min_length=2, max_length=120)
    description: Optional[str] = None
    experience: Optional[int] = Field(None, ge=0, le=80)
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    specializations: List[str] = []

    @field_validator('latitude')
    @classmethod
    def validate_latitude(cls, v):
        if v is not None and not (-90 <= v <= 90):
            raise ValueError('Invalid latitude (must be between -90 and 90)')
        return v

    @field_validator('longitude')
    @classmethod
    def validate_longitude(cls, v):
        if v is not None and not (-180 <= v <= 180):
            raise ValueError('Invalid longitude (must be between -180 and 180)')
        return v

class ProviderUpdate(BaseModel):
    business_name: Optional[str] = Field(None, min_length=2, max_length=120)
    description: Optional[str] = None
    experience: Optional[int] = Field(None, ge=0, le=80)
    address: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    specializations: Optional[List[str]] = None
    is_available: Optional[bool] = None

class ProviderOut(BaseModel):
    provider_id: str
    user_id: str
    category_id: str
    category_slug: str
    category_name: str
    business_name: str
    description: Optional[str]
    experience: Optional[int]
    address: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    specializations: List[str]
    rating: Decimal
    review_count: int
    is_available: bool
    username: str
    phone: Optional[str]
    created_at: datetime
    distance_km: Optional[float] = None

class GroceryProductOut(BaseModel):
    product_id: int
    name: str
    category: str
    price: Decimal
    unit: Optional[str]
    image_url: Optional[str]
    in_stock: bool
