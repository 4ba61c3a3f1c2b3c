"""
Shipping API Endpoints

Shipping regions and the shipping options offered in each.
"""

from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.connection import get_db_dependency
from storefront.services import catalog

router = APIRouter()


class ShippingRegionResponse(BaseModel):
    shipping_region_id: int
    shipping_region: str

    class Config:
        from_attributes = True


class ShippingOptionResponse(BaseModel):
    shipping_id: int
    shipping_type: str
    shipping_cost: Decimal
    shipping_region_id: int

    class Config:
        from_attributes = True


@router.get("/regions", response_model=List[ShippingRegionResponse])
async def list_shipping_regions(
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[ShippingRegionResponse]:
    regions = await catalog.list_shipping_regions(db)
    return [ShippingRegionResponse.model_validate(r) for r in regions]


@router.get("/regions/{shipping_region_id}", response_model=List[ShippingOptionResponse])
async def list_shipping_options(
    shipping_region_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[ShippingOptionResponse]:
    """Shipping options available in a region."""
    options = await catalog.get_shipping_region_options(db, shipping_region_id)
    return [ShippingOptionResponse.model_validate(o) for o in options]
