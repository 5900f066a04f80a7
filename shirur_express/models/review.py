from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime
from uuid import UUID

class ReviewCreate(BaseModel):
    booking_id: UUID
    rating: int = Field(..., ge=1, le=5, description="Rating between 1 and 5")
    comment: Optional[str] = Field(None, max_length=1000)

class ReviewOut(BaseModel):
    review_id: str
    booking_id: str
    user_id: str
    provider_id: str
    rating: int
    comment: Optional[str]
    created_at: datetime
    username: Optional[str] = None
