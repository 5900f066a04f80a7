# shirur_express/routes/catalog.py
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from uuid import UUID
import asyncpg

from ..database import get_db
from ..errors import NotFoundError, ValidationError
from ..models.provider import CategoryOut, GroceryProductOut, ProblemOut, ProviderOut
from ..models.review import ReviewOut
from ..queries import catalog_queries, provider_queries, review_queries
from ..utils.geo import within_radius

catalog_router = APIRouter(tags=["Catalog"])

@catalog_router.get("/service-categories", response_model=List[CategoryOut])
async def list_service_categories(conn: asyncpg.Connection = Depends(get_db)):
    return await catalog_queries.list_categories(conn)

@catalog_router.get("/service-problems", response_model=List[ProblemOut])
async def list_service_problems(
    category: str = Query(..., description="Category slug"),
    parent_id: Optional[UUID] = Query(None, description="Device id; omit for top-level devices"),
    conn: asyncpg.Connection = Depends(get_db)
):
    found = await catalog_queries.get_category_by_slug(conn, category)
    if not found:
        raise NotFoundError(f"Unknown category '{category}'")
    return await catalog_queries.list_problems(conn, found["category_id"], str(parent_id) if parent_id else None)

@catalog_router.get("/service-providers", response_model=List[ProviderOut])
async def list_service_providers(
    category: Optional[str] = None,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: float = Query(10.0, gt=0, le=200, description="Search radius in km"),
    conn: asyncpg.Connection = Depends(get_db)
):
    if (lat is None) != (lng is None):
        raise ValidationError("lat and lng must be given together")

    providers = await provider_queries.list_providers(conn, category)
    if lat is not None:
        return within_radius(providers, lat, lng, radius)
    return providers

@catalog_router.get("/service-providers/{provider_id}", response_model=ProviderOut)
async def get_service_provider(provider_id: UUID, conn: asyncpg.Connection = Depends(get_db)):
    provider = await provider_queries.get_provider(conn, str(provider_id))
    if not provider:
        raise NotFoundError("Provider not found")
    return provider

@catalog_router.get("/service-providers/{provider_id}/reviews", response_model=List[ReviewOut])
async def get_service_provider_reviews(provider_id: UUID, conn: asyncpg.Connection = Depends(get_db)):
    if not await provider_queries.get_provider(conn, str(provider_id)):
        raise NotFoundError("Provider not found")
    return await review_queries.get_provider_reviews(conn, str(provider_id))

@catalog_router.get("/grocery-products", response_model=List[GroceryProductOut])
async def list_grocery_products(
    category: Optional[str] = None,
    search: Optional[str] = Query(None, max_length=100),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await catalog_queries.list_grocery_products(conn, category, search)

__all__ = ["catalog_router"]
