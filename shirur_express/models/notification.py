from pydantic import BaseModel, Field
from datetime import datetime

class NotificationOut(BaseModel):
    notification_id: str
    message: str = Field(..., max_length=500)
    is_read: bool = False
    created_at: datetime
