"""
Attributes API Endpoints

Attribute metadata such as sizes and colors. Product level attribute
listings live with the product routes.
"""

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.connection import get_db_dependency
from storefront.services import catalog

router = APIRouter()


class AttributeResponse(BaseModel):
    attribute_id: int
    name: str

    class Config:
        from_attributes = True


class AttributeValueResponse(BaseModel):
    attribute_value_id: int
    value: str

    class Config:
        from_attributes = True


@router.get("", response_model=List[AttributeResponse])
async def list_attributes(
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[AttributeResponse]:
    attributes = await catalog.list_attributes(db)
    return [AttributeResponse.model_validate(a) for a in attributes]


@router.get("/{attribute_id}", response_model=AttributeResponse)
async def get_attribute(
    attribute_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> AttributeResponse:
    attribute = await catalog.get_attribute(db, attribute_id)
    return AttributeResponse.model_validate(attribute)


@router.get("/{attribute_id}/values", response_model=List[AttributeValueResponse])
async def list_attribute_values(
    attribute_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[AttributeValueResponse]:
    values = await catalog.list_attribute_values(db, attribute_id)
    return [AttributeValueResponse.model_validate(v) for v in values]
