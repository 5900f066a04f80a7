# shirur_express/routes/rentals.py
from fastapi import APIRouter, Depends, Query, status
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
import logging
import asyncpg

from ..database import get_db
from ..errors import NotFoundError, ValidationError
from ..models.auth import RequestContext
from ..models.rental import Furnishing, PropertyType, RentalPropertyCreate, RentalPropertyOut
from ..queries import rental_queries
from ..utils.auth import get_current_user

logger = logging.getLogger(__name__)

rentals_router = APIRouter(prefix="/rental-properties", tags=["Rentals"])

@rentals_router.post("/", response_model=RentalPropertyOut, status_code=status.HTTP_201_CREATED)
async def create_rental_property(
    listing: RentalPropertyCreate,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    data = listing.model_dump()
    data["property_type"] = listing.property_type.value
    data["furnishing"] = listing.furnishing.value if listing.furnishing else None
    created = await rental_queries.create_rental_property(conn, owner_id=ctx.user_id, **data)
    logger.info(f"Rental {created['property_id']} listed by {ctx.user_id} in {listing.locality}")
    return created

@rentals_router.get("/", response_model=List[RentalPropertyOut])
async def list_rental_properties(
    property_type: Optional[PropertyType] = None,
    min_rent: Optional[Decimal] = Query(None, ge=0),
    max_rent: Optional[Decimal] = Query(None, ge=0),
    furnishing: Optional[Furnishing] = None,
    locality: Optional[str] = Query(None, min_length=2),
    conn: asyncpg.Connection = Depends(get_db)
):
    if min_rent is not None and max_rent is not None and min_rent > max_rent:
        raise ValidationError("min_rent cannot be greater than max_rent")
    return await rental_queries.list_rental_properties(
        conn,
        property_type=property_type.value if property_type else None,
        min_rent=min_rent,
        max_rent=max_rent,
        furnishing=furnishing.value if furnishing else None,
        locality=locality
    )

@rentals_router.get("/{property_id}", response_model=RentalPropertyOut)
async def get_rental_property(property_id: UUID, conn: asyncpg.Connection = Depends(get_db)):
    listing = await rental_queries.get_rental_property(conn, str(property_id))
    if not listing:
        raise NotFoundError("Property not found")
    return listing

__all__ = ["rentals_router"]
