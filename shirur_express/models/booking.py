# shirur_express/models/booking.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Literal, Optional
from enum import Enum
from uuid import UUID

from .invoice import InvoiceOut

class BookingStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    STARTED = "started"
    AWAITING_OTP = "awaiting_otp"
    AWAITING_BILL = "awaiting_bill"
    AWAITING_PAYMENT = "awaiting_payment"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class BookingCreate(BaseModel):
    service_type: str = Field(..., description="Category slug, e.g. 'electrician'")
    provider_id: Optional[UUID] = None
    problem_id: Optional[UUID] = None
    scheduled_at: Optional[datetime] = Field(None, description="Empty means as soon as possible")
    preferred_time_slots: List[str] = []
    user_address: str = Field(..., min_length=5)
    user_phone: str = Field(..., min_length=8, max_length=20)
    notes: Optional[str] = Field(None, max_length=1000)

class BookingOut(BaseModel):
    booking_id: str
    user_id: str
    provider_id: Optional[str]
    service_type: str
    problem_id: Optional[str]
    scheduled_at: Optional[datetime]
    preferred_time_slots: List[str]
    user_address: str
    user_phone: str
    notes: Optional[str]
    status: BookingStatus
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    invoice: Optional[InvoiceOut] = None

class BookingStatusUpdate(BaseModel):
    # completion only happens through payment reconciliation
    status: Literal["accepted", "declined", "started"]

class OtpVerify(BaseModel):
    otp: str

class BookingCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)
