# shirur_express/models/invoice.py
from decimal import Decimal
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

class SparePart(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)

class InvoiceCreate(BaseModel):
    spare_parts: List[SparePart] = []
    service_charge: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = Field(None, max_length=1000)
    # Optional client-side total; only checked against the server's figure
    total: Optional[Decimal] = None

class InvoiceOut(BaseModel):
    invoice_id: str
    booking_id: str
    spare_parts: List[SparePart]
    service_charge: Decimal
    notes: Optional[str]
    total: Decimal
    created_at: datetime
