"""
Categories API Endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.connection import get_db_dependency
from storefront.services import catalog

router = APIRouter()


class CategoryResponse(BaseModel):
    category_id: int
    department_id: int
    name: str
    description: Optional[str]

    class Config:
        from_attributes = True


class CategoryListResponse(BaseModel):
    count: int
    rows: List[CategoryResponse]


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> CategoryListResponse:
    categories = await catalog.list_categories(db)
    return CategoryListResponse(
        count=len(categories),
        rows=[CategoryResponse.model_validate(c) for c in categories],
    )


@router.get("/inDepartment/{department_id}", response_model=List[CategoryResponse])
async def list_department_categories(
    department_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[CategoryResponse]:
    categories = await catalog.list_department_categories(db, department_id)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get("/inProduct/{product_id}", response_model=List[CategoryResponse])
async def list_product_categories(
    product_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[CategoryResponse]:
    """Categories a product is filed under."""
    categories = await catalog.list_product_categories(db, product_id)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> CategoryResponse:
    category = await catalog.get_category(db, category_id)
    return CategoryResponse.model_validate(category)
