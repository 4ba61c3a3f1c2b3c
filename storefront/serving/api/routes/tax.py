"""
Tax API Endpoints
"""

from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.connection import get_db_dependency
from storefront.services import catalog

router = APIRouter()


class TaxResponse(BaseModel):
    tax_id: int
    tax_type: str
    tax_percentage: Decimal

    class Config:
        from_attributes = True


@router.get("", response_model=List[TaxResponse])
async def list_taxes(
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[TaxResponse]:
    taxes = await catalog.list_taxes(db)
    return [TaxResponse.model_validate(t) for t in taxes]


@router.get("/{tax_id}", response_model=TaxResponse)
async def get_tax(
    tax_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> TaxResponse:
    tax = await catalog.get_tax(db, tax_id)
    return TaxResponse.model_validate(tax)
