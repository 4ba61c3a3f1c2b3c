"""
Catalog Query Service

Read-only lookups over products, departments, categories, attributes,
taxes and shipping, plus product reviews.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog
from sqlalchemy import and_, or_, select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.models import (
    Attribute,
    AttributeValue,
    Category,
    Customer,
    Department,
    Product,
    ProductAttribute,
    ProductCategory,
    Review,
    Shipping,
    ShippingRegion,
    Tax,
)
from storefront.errors import ConflictError, NotFoundError, ValidationError
from storefront.services.pagination import Pagination, truncate_description

logger = structlog.get_logger(__name__)


def summarize_product(product: Product, description_length: int) -> Dict[str, Any]:
    """Listing projection of a product with a shortened description."""
    return {
        "product_id": product.product_id,
        "name": product.name,
        "description": truncate_description(product.description, description_length),
        "price": product.price,
        "discounted_price": product.discounted_price,
        "thumbnail": product.thumbnail,
    }


async def _get_or_404(db: AsyncSession, model, key: int, entity: str):
    obj = await db.get(model, key)
    if obj is None:
        raise NotFoundError(entity, key)
    return obj


# =============================================================================
# PRODUCTS
# =============================================================================

async def list_products(db: AsyncSession, pagination: Pagination) -> Tuple[int, Sequence[Product]]:
    total = (await db.execute(select(func.count(Product.product_id)))).scalar() or 0

    result = await db.execute(
        select(Product)
        .order_by(Product.product_id)
        .offset(pagination.sql_offset)
        .limit(pagination.limit)
    )
    return total, result.scalars().all()


def _escape_like(word: str) -> str:
    return word.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def search_products(
    db: AsyncSession,
    query_string: Optional[str],
    all_words: Optional[str],
    pagination: Pagination,
) -> Tuple[int, Sequence[Product]]:
    """
    Keyword search over product name and description.

    With all_words == "on" every word has to appear; otherwise any
    single word is enough.
    """
    words = (query_string or "").split()
    if not words:
        raise ValidationError("query_string is required", field="query_string")

    word_conditions = []
    for word in words:
        pattern = f"%{_escape_like(word)}%"
        word_conditions.append(
            or_(
                Product.name.ilike(pattern, escape="\\"),
                Product.description.ilike(pattern, escape="\\"),
            )
        )

    match_all = (all_words or "").lower() == "on"
    condition = and_(*word_conditions) if match_all else or_(*word_conditions)

    total = (await db.execute(
        select(func.count(Product.product_id)).where(condition)
    )).scalar() or 0

    result = await db.execute(
        select(Product)
        .where(condition)
        .order_by(Product.product_id)
        .offset(pagination.sql_offset)
        .limit(pagination.limit)
    )
    products = result.scalars().all()

    logger.debug("Catalog search", words=len(words), all_words=match_all, total=total)
    return total, products


async def list_products_in_category(
    db: AsyncSession,
    category_id: int,
    pagination: Pagination,
) -> Tuple[int, Sequence[Product]]:
    condition = ProductCategory.category_id == category_id

    total = (await db.execute(
        select(func.count(ProductCategory.product_id)).where(condition)
    )).scalar() or 0

    result = await db.execute(
        select(Product)
        .join(ProductCategory, ProductCategory.product_id == Product.product_id)
        .where(condition)
        .order_by(Product.product_id)
        .offset(pagination.sql_offset)
        .limit(pagination.limit)
    )
    return total, result.scalars().all()


async def list_products_in_department(
    db: AsyncSession,
    department_id: int,
    pagination: Pagination,
) -> Tuple[int, Sequence[Product]]:
    """
    Products of every category in a department, as one flat list.

    A product filed under several categories of the department is
    listed once.
    """
    await _get_or_404(db, Department, department_id, "Department")

    category_ids = (
        select(Category.category_id)
        .where(Category.department_id == department_id)
        .scalar_subquery()
    )
    in_department = ProductCategory.category_id.in_(category_ids)

    total = (await db.execute(
        select(func.count(func.distinct(ProductCategory.product_id))).where(in_department)
    )).scalar() or 0

    product_ids = select(ProductCategory.product_id).where(in_department)
    result = await db.execute(
        select(Product)
        .where(Product.product_id.in_(product_ids))
        .order_by(Product.product_id)
        .offset(pagination.sql_offset)
        .limit(pagination.limit)
    )
    return total, result.scalars().all()


async def get_product(db: AsyncSession, product_id: int) -> Product:
    return await _get_or_404(db, Product, product_id, "Product")


# =============================================================================
# DEPARTMENTS & CATEGORIES
# =============================================================================

async def list_departments(db: AsyncSession) -> Sequence[Department]:
    result = await db.execute(select(Department).order_by(Department.department_id))
    return result.scalars().all()


async def get_department(db: AsyncSession, department_id: int) -> Department:
    return await _get_or_404(db, Department, department_id, "Department")


async def list_categories(db: AsyncSession) -> Sequence[Category]:
    result = await db.execute(select(Category).order_by(Category.category_id))
    return result.scalars().all()


async def get_category(db: AsyncSession, category_id: int) -> Category:
    return await _get_or_404(db, Category, category_id, "Category")


async def list_department_categories(db: AsyncSession, department_id: int) -> Sequence[Category]:
    await _get_or_404(db, Department, department_id, "Department")
    result = await db.execute(
        select(Category)
        .where(Category.department_id == department_id)
        .order_by(Category.category_id)
    )
    return result.scalars().all()


async def list_product_categories(db: AsyncSession, product_id: int) -> Sequence[Category]:
    await _get_or_404(db, Product, product_id, "Product")
    result = await db.execute(
        select(Category)
        .join(ProductCategory, ProductCategory.category_id == Category.category_id)
        .where(ProductCategory.product_id == product_id)
        .order_by(Category.category_id)
    )
    return result.scalars().all()


# =============================================================================
# ATTRIBUTES
# =============================================================================

async def list_attributes(db: AsyncSession) -> Sequence[Attribute]:
    result = await db.execute(select(Attribute).order_by(Attribute.attribute_id))
    return result.scalars().all()


async def get_attribute(db: AsyncSession, attribute_id: int) -> Attribute:
    return await _get_or_404(db, Attribute, attribute_id, "Attribute")


async def list_attribute_values(db: AsyncSession, attribute_id: int) -> Sequence[AttributeValue]:
    await _get_or_404(db, Attribute, attribute_id, "Attribute")
    result = await db.execute(
        select(AttributeValue)
        .where(AttributeValue.attribute_id == attribute_id)
        .order_by(AttributeValue.attribute_value_id)
    )
    return result.scalars().all()


async def list_product_attributes(db: AsyncSession, product_id: int) -> List[Dict[str, Any]]:
    """
    Attribute values assigned to a product, with the owning attribute's name.

    Joins product_attribute -> attribute_value -> attribute.
    """
    await _get_or_404(db, Product, product_id, "Product")
    result = await db.execute(
        select(
            Attribute.name.label("attribute_name"),
            AttributeValue.attribute_value_id,
            AttributeValue.value.label("attribute_value"),
        )
        .select_from(ProductAttribute)
        .join(AttributeValue, AttributeValue.attribute_value_id == ProductAttribute.attribute_value_id)
        .join(Attribute, Attribute.attribute_id == AttributeValue.attribute_id)
        .where(ProductAttribute.product_id == product_id)
        .order_by(Attribute.attribute_id, AttributeValue.attribute_value_id)
    )
    return [dict(row._mapping) for row in result.all()]


# =============================================================================
# TAX & SHIPPING
# =============================================================================

async def list_taxes(db: AsyncSession) -> Sequence[Tax]:
    result = await db.execute(select(Tax).order_by(Tax.tax_id))
    return result.scalars().all()


async def get_tax(db: AsyncSession, tax_id: int) -> Tax:
    return await _get_or_404(db, Tax, tax_id, "Tax")


async def list_shipping_regions(db: AsyncSession) -> Sequence[ShippingRegion]:
    result = await db.execute(select(ShippingRegion).order_by(ShippingRegion.shipping_region_id))
    return result.scalars().all()


async def get_shipping_region_options(db: AsyncSession, shipping_region_id: int) -> Sequence[Shipping]:
    await _get_or_404(db, ShippingRegion, shipping_region_id, "Shipping region")
    result = await db.execute(
        select(Shipping)
        .where(Shipping.shipping_region_id == shipping_region_id)
        .order_by(Shipping.shipping_id)
    )
    return result.scalars().all()


# =============================================================================
# REVIEWS
# =============================================================================

async def list_reviews(db: AsyncSession, product_id: int) -> List[Dict[str, Any]]:
    await _get_or_404(db, Product, product_id, "Product")
    result = await db.execute(
        select(
            Customer.name,
            Review.review,
            Review.rating,
            Review.created_on,
        )
        .join(Customer, Customer.customer_id == Review.customer_id)
        .where(Review.product_id == product_id)
        .order_by(Review.created_on.desc(), Review.review_id.desc())
    )
    return [dict(row._mapping) for row in result.all()]


async def post_review(
    db: AsyncSession,
    customer_id: int,
    product_id: int,
    review: str,
    rating: int,
) -> Review:
    """Store a review; a customer may review each product only once."""
    await _get_or_404(db, Product, product_id, "Product")

    existing = await db.execute(
        select(Review.review_id).where(
            and_(Review.customer_id == customer_id, Review.product_id == product_id)
        )
    )
    if existing.first() is not None:
        raise ConflictError("you have already reviewed this product")

    created = Review(
        customer_id=customer_id,
        product_id=product_id,
        review=review,
        rating=rating,
    )
    db.add(created)
    try:
        await db.flush()
    except IntegrityError:
        # Concurrent duplicate caught by uq_review_customer_product
        raise ConflictError("you have already reviewed this product")

    logger.info("Review posted", customer_id=customer_id, product_id=product_id, rating=rating)
    return created
