# shirur_express/models/rental.py
from decimal import Decimal
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional
from enum import Enum

class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"

class Furnishing(str, Enum):
    FURNISHED = "furnished"
    SEMI_FURNISHED = "semifurnished"
    UNFURNISHED = "unfurnished"

class RentalPropertyCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    property_type: PropertyType
    rent: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    area: Optional[int] = Field(None, ge=1, description="Carpet area in sq. ft.")
    bedrooms: Optional[int] = Field(None, ge=0, le=20)
    bathrooms: Optional[int] = Field(None, ge=0, le=20)
    furnishing: Optional[Furnishing] = None
    address: Optional[str] = None
    locality: str = Field(..., min_length=2)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    amenities: List[str] = []
    images: List[str] = []

class RentalPropertyOut(BaseModel):
    property_id: str
    owner_id: str
    title: str
    description: Optional[str]
    property_type: PropertyType
    rent: Decimal
    area: Optional[int]
    bedrooms: Optional[int]
    bathrooms: Optional[int]
    furnishing: Optional[Furnishing]
    address: Optional[str]
    locality: str
    latitude: Optional[float]
    longitude: Optional[float]
    amenities: List[str]
    images: List[str]
    is_available: bool
    created_at: datetime
    owner_name: Optional[str] = None
    owner_phone: Optional[str] = None
