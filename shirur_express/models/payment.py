# shirur_express/models/payment.py
from typing import Optional
from pydantic import BaseModel, model_validator
from enum import Enum
from uuid import UUID

class PaymentTarget(str, Enum):
    ORDER = "order"
    INVOICE = "invoice"

class IntentStatus(str, Enum):
    CREATED = "created"
    PAID = "paid"

class CreateGatewayOrderRequest(BaseModel):
    order_id: Optional[UUID] = None
    booking_id: Optional[UUID] = None

    @model_validator(mode="after")
    def exactly_one_target(self):
        if (self.order_id is None) == (self.booking_id is None):
            raise ValueError("Provide exactly one of order_id or booking_id")
        return self

class GatewayOrderOut(BaseModel):
    razorpay_order_id: str
    razorpay_key_id: str
    amount: int
    currency: str
    target: PaymentTarget

class VerifySignatureRequest(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str
    database_order_id: Optional[str] = None

class VerifySignatureOut(BaseModel):
    status: str
    target: PaymentTarget
    already_paid: bool
    needs_refund: bool = False
