# shirur_express/models/table_booking.py
from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional
from enum import Enum
from uuid import UUID

class TableBookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

class TableBookingCreate(BaseModel):
    provider_id: UUID
    booking_date: date
    booking_time: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$", description="24h HH:MM")
    party_size: int = Field(..., ge=1, le=50)
    special_requests: Optional[str] = Field(None, max_length=500)

class TableBookingStatusUpdate(BaseModel):
    status: TableBookingStatus

class TableBookingOut(BaseModel):
    table_booking_id: str
    user_id: str
    provider_id: str
    booking_date: date
    booking_time: str
    party_size: int
    special_requests: Optional[str]
    status: TableBookingStatus
    created_at: datetime
