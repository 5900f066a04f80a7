# shirur_express/models/auth.py
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from enum import Enum
from typing import Optional

class UserRole(str, Enum):
    CUSTOMER = "customer"
    PROVIDER = "provider"
    ADMIN = "admin"

class Token(BaseModel):
    access_token: str
    token_type: str
    role: UserRole

class SignupRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole = UserRole.CUSTOMER
    phone: Optional[str] = None

class UserOut(BaseModel):
    user_id: str
    username: str
    email: EmailStr
    role: UserRole
    phone: Optional[str]
    created_at: datetime

class RequestContext(BaseModel):
    """Who is calling, resolved once per request from the bearer token"""
    user_id: str
    role: UserRole
    username: str
    phone: Optional[str] = None
    provider_id: Optional[str] = None
    provider_category: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
