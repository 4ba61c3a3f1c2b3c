"""
Products API Endpoints

Catalog browsing, keyword search, reviews and product attributes.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.connection import get_db_dependency
from storefront.serving.api.dependencies import CustomerIdentity, pagination_params, require_customer
from storefront.services import catalog
from storefront.services.pagination import Pagination

router = APIRouter()


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class ProductSummary(BaseModel):
    """Product as shown in listings"""
    product_id: int
    name: str
    description: str
    price: Decimal
    discounted_price: Decimal
    thumbnail: Optional[str]


class ProductDetail(BaseModel):
    """Full product record"""
    product_id: int
    name: str
    description: str
    price: Decimal
    discounted_price: Decimal
    image: Optional[str]
    image_2: Optional[str]
    thumbnail: Optional[str]
    display: int

    class Config:
        from_attributes = True


class PaginationMeta(BaseModel):
    page: int
    limit: int
    offset: int
    description_length: int


class ProductListResponse(BaseModel):
    """Paginated product list"""
    count: int
    rows: List[ProductSummary]
    pagination: PaginationMeta


class ReviewItem(BaseModel):
    name: str
    review: str
    rating: int
    created_on: datetime


class ReviewCreate(BaseModel):
    review: str = Field(..., min_length=1, max_length=300)
    rating: int = Field(..., ge=1, le=5)


class ReviewResponse(BaseModel):
    review_id: int
    customer_id: int
    product_id: int
    review: str
    rating: int
    created_on: datetime

    class Config:
        from_attributes = True


class ProductAttributeItem(BaseModel):
    attribute_name: str
    attribute_value_id: int
    attribute_value: str


def _product_list(total: int, products, pagination: Pagination) -> ProductListResponse:
    return ProductListResponse(
        count=total,
        rows=[
            ProductSummary(**catalog.summarize_product(p, pagination.description_length))
            for p in products
        ],
        pagination=PaginationMeta(**pagination.to_dict()),
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=ProductListResponse)
async def list_products(
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> ProductListResponse:
    """List all products, paginated."""
    total, products = await catalog.list_products(db, pagination)
    return _product_list(total, products, pagination)


@router.get("/search", response_model=ProductListResponse)
async def search_products(
    query_string: Optional[str] = Query(None, description="Words to search for"),
    all_words: Optional[str] = Query("off", description="'on' to require every word"),
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> ProductListResponse:
    """Search products by name and description."""
    total, products = await catalog.search_products(db, query_string, all_words, pagination)
    return _product_list(total, products, pagination)


@router.get("/inCategory/{category_id}", response_model=ProductListResponse)
async def list_products_in_category(
    category_id: int,
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> ProductListResponse:
    total, products = await catalog.list_products_in_category(db, category_id, pagination)
    return _product_list(total, products, pagination)


@router.get("/inDepartment/{department_id}", response_model=ProductListResponse)
async def list_products_in_department(
    department_id: int,
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> ProductListResponse:
    """Products of every category in the department."""
    total, products = await catalog.list_products_in_department(db, department_id, pagination)
    return _product_list(total, products, pagination)


@router.get("/{product_id}", response_model=ProductDetail)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> ProductDetail:
    """Get product details."""
    product = await catalog.get_product(db, product_id)
    return ProductDetail.model_validate(product)


@router.get("/{product_id}/reviews", response_model=List[ReviewItem])
async def get_product_reviews(
    product_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[ReviewItem]:
    reviews = await catalog.list_reviews(db, product_id)
    return [ReviewItem(**r) for r in reviews]


@router.post(
    "/{product_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_product_review(
    product_id: int,
    body: ReviewCreate,
    customer: CustomerIdentity = Depends(require_customer),
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> ReviewResponse:
    """Review a product; one review per customer and product."""
    review = await catalog.post_review(
        db,
        customer_id=customer.customer_id,
        product_id=product_id,
        review=body.review,
        rating=body.rating,
    )
    return ReviewResponse.model_validate(review)


@router.get("/{product_id}/attributes", response_model=List[ProductAttributeItem])
async def get_product_attributes(
    product_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[ProductAttributeItem]:
    """Attribute values of a product with their attribute names."""
    rows = await catalog.list_product_attributes(db, product_id)
    return [ProductAttributeItem(**row) for row in rows]
