# shirur_express/routes/providers.py
from fastapi import APIRouter, Depends, status
from typing import List, Optional
import logging
import asyncpg

from ..database import get_db
from ..errors import AuthorizationError, ValidationError
from ..models.auth import RequestContext, UserRole
from ..models.booking import BookingOut, BookingStatus
from ..models.provider import ProviderCreate, ProviderOut, ProviderUpdate
from ..queries import booking_queries, catalog_queries, provider_queries
from ..utils.auth import get_current_user, require_provider

logger = logging.getLogger(__name__)

provider_router = APIRouter(prefix="/provider", tags=["Provider"])

@provider_router.post("/profile", response_model=ProviderOut, status_code=status.HTTP_201_CREATED)
async def create_profile(
    profile: ProviderCreate,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    if ctx.role != UserRole.PROVIDER:
        raise AuthorizationError("Only provider accounts can create a profile")
    if ctx.provider_id:
        raise ValidationError("Provider profile already exists")

    category = await catalog_queries.get_category_by_slug(conn, profile.category_slug)
    if not category:
        raise ValidationError(f"Unknown category '{profile.category_slug}'")

    provider = await provider_queries.create_provider(
        conn,
        user_id=ctx.user_id,
        category_id=category["category_id"],
        business_name=profile.business_name,
        description=profile.description,
        experience=profile.experience,
        address=profile.address,
        latitude=profile.latitude,
        longitude=profile.longitude,
        specializations=profile.specializations
    )
    logger.info(f"Provider profile {provider['provider_id']} created ({profile.category_slug})")
    return provider

@provider_router.get("/profile", response_model=ProviderOut)
async def get_profile(
    ctx: RequestContext = Depends(require_provider),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await provider_queries.get_provider(conn, ctx.provider_id)

@provider_router.patch("/profile", response_model=ProviderOut)
async def update_profile(
    updates: ProviderUpdate,
    ctx: RequestContext = Depends(require_provider),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await provider_queries.update_provider(
        conn, ctx.provider_id, updates.model_dump(exclude_unset=True)
    )

@provider_router.get("/bookings", response_model=List[BookingOut])
async def get_provider_bookings(
    status: Optional[BookingStatus] = None,
    ctx: RequestContext = Depends(require_provider),
    conn: asyncpg.Connection = Depends(get_db)
):
    """Bookings assigned to the provider plus unclaimed pending ones in their category"""
    bookings = await booking_queries.get_provider_bookings(conn, ctx.provider_id, ctx.provider_category)
    if status:
        bookings = [b for b in bookings if b["status"] == status.value]
    return bookings

__all__ = ["provider_router"]
