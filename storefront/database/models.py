"""
Database Models - Storefront Schema

This module defines the relational schema behind the storefront API:

Catalog:
- Department / Category / Product (products join categories many-to-many)
- Attribute / AttributeValue / ProductAttribute

Customers & reference data:
- Customer, ShippingRegion, Shipping, Tax

Checkout:
- ShoppingCart line items keyed by an opaque cart id
- Order header with its OrderDetail snapshot rows
- Review (one per customer and product)

Column types are kept portable so the same models run on PostgreSQL
and on SQLite in the test suite.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, List

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


# =============================================================================
# ENUMERATIONS
# =============================================================================

class OrderStatus(str, Enum):
    """Order status enumeration"""
    PENDING = "pending"
    CONFIRMED = "confirmed"


# =============================================================================
# CATALOG
# =============================================================================

class Department(Base):
    """Top level catalog grouping"""
    __tablename__ = "department"

    department_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(1000))

    categories: Mapped[List["Category"]] = relationship(back_populates="department")


class Category(Base):
    """Catalog category, owned by exactly one department"""
    __tablename__ = "category"

    category_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    department_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("department.department_id"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(1000))

    department: Mapped["Department"] = relationship(back_populates="categories")

    __table_args__ = (
        Index("ix_category_department", "department_id"),
    )


class Product(Base):
    """
    Product Table

    Catalog item. Prices are fixed point; a zero discounted price
    means the product is not on sale.
    """
    __tablename__ = "product"

    product_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(1000), nullable=False, default="")

    # Pricing
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    discounted_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    # Media
    image: Mapped[Optional[str]] = mapped_column(String(150))
    image_2: Mapped[Optional[str]] = mapped_column(String(150))
    thumbnail: Mapped[Optional[str]] = mapped_column(String(150))
    display: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class ProductCategory(Base):
    """Product to category assignment"""
    __tablename__ = "product_category"

    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("product.product_id"), primary_key=True
    )
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("category.category_id"), primary_key=True
    )

    __table_args__ = (
        Index("ix_product_category_category", "category_id"),
    )


class Attribute(Base):
    """Attribute kind, e.g. Size or Color"""
    __tablename__ = "attribute"

    attribute_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    values: Mapped[List["AttributeValue"]] = relationship(back_populates="attribute")


class AttributeValue(Base):
    """A single value of an attribute; always owned by one attribute"""
    __tablename__ = "attribute_value"

    attribute_value_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    attribute_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("attribute.attribute_id"), nullable=False
    )
    value: Mapped[str] = mapped_column(String(100), nullable=False)

    attribute: Mapped["Attribute"] = relationship(back_populates="values")

    __table_args__ = (
        Index("ix_attribute_value_attribute", "attribute_id"),
    )


class ProductAttribute(Base):
    """Product to attribute value assignment"""
    __tablename__ = "product_attribute"

    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("product.product_id"), primary_key=True
    )
    attribute_value_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("attribute_value.attribute_value_id"), primary_key=True
    )


# =============================================================================
# CUSTOMERS & REFERENCE DATA
# =============================================================================

class ShippingRegion(Base):
    """Shipping region"""
    __tablename__ = "shipping_region"

    shipping_region_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shipping_region: Mapped[str] = mapped_column(String(100), nullable=False)

    options: Mapped[List["Shipping"]] = relationship(back_populates="region")


class Shipping(Base):
    """Shipping option available in a region"""
    __tablename__ = "shipping"

    shipping_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shipping_type: Mapped[str] = mapped_column(String(100), nullable=False)
    shipping_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    shipping_region_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("shipping_region.shipping_region_id"), nullable=False
    )

    region: Mapped["ShippingRegion"] = relationship(back_populates="options")


class Tax(Base):
    """Tax rate reference data"""
    __tablename__ = "tax"

    tax_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tax_type: Mapped[str] = mapped_column(String(100), nullable=False)
    tax_percentage: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)


class Customer(Base):
    """
    Customer Table

    Account record. The password column holds a bcrypt hash and must
    never be serialized.
    """
    __tablename__ = "customer"

    customer_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(100), nullable=False)
    credit_card: Mapped[Optional[str]] = mapped_column(Text)

    # Address
    address_1: Mapped[Optional[str]] = mapped_column(String(100))
    address_2: Mapped[Optional[str]] = mapped_column(String(100))
    city: Mapped[Optional[str]] = mapped_column(String(100))
    region: Mapped[Optional[str]] = mapped_column(String(100))
    postal_code: Mapped[Optional[str]] = mapped_column(String(100))
    country: Mapped[Optional[str]] = mapped_column(String(100))
    shipping_region_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("shipping_region.shipping_region_id")
    )

    # Phones
    day_phone: Mapped[Optional[str]] = mapped_column(String(100))
    eve_phone: Mapped[Optional[str]] = mapped_column(String(100))
    mob_phone: Mapped[Optional[str]] = mapped_column(String(100))

    orders: Mapped[List["Order"]] = relationship(back_populates="customer")


# =============================================================================
# CHECKOUT
# =============================================================================

class ShoppingCart(Base):
    """
    Shopping cart line item

    Rows are grouped by an opaque cart id generated on the client side
    and are not tied to a customer until checkout. `buy_now` marks the
    items that belong to the checkout set; order creation only picks up
    rows where it is true.
    """
    __tablename__ = "shopping_cart"

    item_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cart_id: Mapped[str] = mapped_column(String(32), nullable=False)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("product.product_id"), nullable=False
    )
    attributes: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    buy_now: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    added_on: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, server_default=func.now())

    product: Mapped["Product"] = relationship()

    __table_args__ = (
        Index("ix_shopping_cart_cart_id", "cart_id"),
    )


class Order(Base):
    """
    Order header

    Totals are computed once at creation time from the cart snapshot,
    tax rate and shipping cost.
    """
    __tablename__ = "orders"

    order_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    created_on: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, server_default=func.now())
    shipped_on: Mapped[Optional[datetime]] = mapped_column(DateTime)
    status: Mapped[OrderStatus] = mapped_column(
        SQLEnum(OrderStatus), nullable=False, default=OrderStatus.PENDING
    )
    comments: Mapped[Optional[str]] = mapped_column(String(255))
    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customer.customer_id"), nullable=False
    )
    auth_code: Mapped[Optional[str]] = mapped_column(String(50))
    reference: Mapped[Optional[str]] = mapped_column(String(50))
    shipping_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("shipping.shipping_id")
    )
    tax_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("tax.tax_id")
    )

    customer: Mapped["Customer"] = relationship(back_populates="orders")
    items: Mapped[List["OrderDetail"]] = relationship(
        back_populates="order", order_by="OrderDetail.item_id"
    )

    __table_args__ = (
        Index("ix_orders_customer", "customer_id"),
    )


class OrderDetail(Base):
    """Order line item, a copy of a cart row at order creation time"""
    __tablename__ = "order_detail"

    item_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.order_id"), nullable=False
    )
    product_id: Mapped[int] = mapped_column(Integer, nullable=False)
    attributes: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    product_name: Mapped[str] = mapped_column(String(100), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    order: Mapped["Order"] = relationship(back_populates="items")

    __table_args__ = (
        Index("ix_order_detail_order", "order_id"),
    )


class Review(Base):
    """Product review; a customer reviews a product at most once"""
    __tablename__ = "review"

    review_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customer.customer_id"), nullable=False
    )
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("product.product_id"), nullable=False
    )
    review: Mapped[str] = mapped_column(String(300), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    created_on: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, server_default=func.now())

    customer: Mapped["Customer"] = relationship()

    __table_args__ = (
        UniqueConstraint("customer_id", "product_id", name="uq_review_customer_product"),
        Index("ix_review_product", "product_id"),
    )
