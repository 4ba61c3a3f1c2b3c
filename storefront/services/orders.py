"""
Order Workflow

Turns a cart into an order, serves order projections and confirms
orders from a signed confirmation token.

create_order runs inside the request's database session: if anything
fails the session rolls back and no order header or line item is left
behind.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.models import (
    Customer,
    Order,
    OrderDetail,
    OrderStatus,
    Product,
    Shipping,
    ShoppingCart,
    Tax,
)
from storefront.errors import NotFoundError, UnauthorizedError, ValidationError
from storefront.security import tokens
from storefront.services.cart import effective_price

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")


def compute_total(subtotal: Decimal, tax_percentage: Decimal, shipping_cost: Decimal) -> Decimal:
    """Subtotal plus tax plus shipping, rounded to cents."""
    tax = subtotal * tax_percentage / Decimal(100)
    return (subtotal + tax + shipping_cost).quantize(CENT, rounding=ROUND_HALF_UP)


async def create_order(
    db: AsyncSession,
    cart_id: str,
    customer_id: int,
    shipping_id: int,
    tax_id: int,
) -> Order:
    """
    Create an order from the checkout items of a cart.

    Line items are copied with the product's current effective price.
    The cart itself is left as is; emptying it is a separate call.
    """
    shipping = await db.get(Shipping, shipping_id)
    if shipping is None:
        raise NotFoundError("Shipping", shipping_id)
    tax = await db.get(Tax, tax_id)
    if tax is None:
        raise NotFoundError("Tax", tax_id)

    result = await db.execute(
        select(ShoppingCart, Product)
        .join(Product, Product.product_id == ShoppingCart.product_id)
        .where(ShoppingCart.cart_id == cart_id, ShoppingCart.buy_now.is_(True))
        .order_by(ShoppingCart.item_id)
    )
    rows = result.all()
    if not rows:
        raise ValidationError("The cart has no items to order", field="cart_id")

    order = Order(
        customer_id=customer_id,
        shipping_id=shipping_id,
        tax_id=tax_id,
        status=OrderStatus.PENDING,
    )
    db.add(order)
    await db.flush()

    subtotal = Decimal("0.00")
    for row in rows:
        unit_cost = effective_price(row.Product)
        db.add(OrderDetail(
            order_id=order.order_id,
            product_id=row.Product.product_id,
            attributes=row.ShoppingCart.attributes,
            product_name=row.Product.name,
            quantity=row.ShoppingCart.quantity,
            unit_cost=unit_cost,
        ))
        subtotal += unit_cost * row.ShoppingCart.quantity

    order.total_amount = compute_total(subtotal, tax.tax_percentage, shipping.shipping_cost)
    await db.flush()

    logger.info(
        "Order created",
        order_id=order.order_id,
        cart_id=cart_id,
        customer_id=customer_id,
        items=len(rows),
        total_amount=str(order.total_amount),
    )
    return order


async def get_order(db: AsyncSession, order_id: int) -> Order:
    order = await db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order", order_id)
    return order


async def get_order_items(db: AsyncSession, order_id: int) -> List[Dict[str, Any]]:
    """Line items of an existing order; an order without items gives []."""
    await get_order(db, order_id)
    result = await db.execute(
        select(OrderDetail)
        .where(OrderDetail.order_id == order_id)
        .order_by(OrderDetail.item_id)
    )
    return [
        {
            "item_id": item.item_id,
            "product_id": item.product_id,
            "attributes": item.attributes,
            "product_name": item.product_name,
            "quantity": item.quantity,
            "unit_cost": item.unit_cost,
            "subtotal": (item.unit_cost * item.quantity).quantize(CENT),
        }
        for item in result.scalars().all()
    ]


async def get_order_summary(db: AsyncSession, order_id: int) -> Dict[str, Any]:
    items = await get_order_items(db, order_id)
    return {"order_id": order_id, "order_items": items}


def _short_details(order: Order, customer_name: str) -> Dict[str, Any]:
    return {
        "order_id": order.order_id,
        "total_amount": order.total_amount,
        "created_on": order.created_on,
        "shipped_on": order.shipped_on,
        "status": order.status,
        "name": customer_name,
    }


async def get_order_short_details(db: AsyncSession, order_id: int) -> Dict[str, Any]:
    result = await db.execute(
        select(Order, Customer.name)
        .join(Customer, Customer.customer_id == Order.customer_id)
        .where(Order.order_id == order_id)
    )
    row = result.first()
    if row is None:
        raise NotFoundError("Order", order_id)
    return _short_details(row.Order, row.name)


async def list_customer_orders(db: AsyncSession, customer_id: int) -> List[Dict[str, Any]]:
    result = await db.execute(
        select(Order, Customer.name)
        .join(Customer, Customer.customer_id == Order.customer_id)
        .where(Order.customer_id == customer_id)
        .order_by(Order.created_on.desc(), Order.order_id.desc())
    )
    return [_short_details(row.Order, row.name) for row in result.all()]


async def update_order_status(db: AsyncSession, token: str) -> Order:
    """
    Confirm the order named by a confirmation token.

    A valid signature is the only check made. Replaying the token
    leaves the order confirmed.
    """
    payload = tokens.decode(token)
    if payload is None:
        raise UnauthorizedError(disclose=False)

    order_id = payload.get("order_id")
    if not isinstance(order_id, int):
        raise UnauthorizedError(disclose=False)

    order = await get_order(db, order_id)
    order.status = OrderStatus.CONFIRMED
    await db.flush()

    logger.info("Order confirmed", order_id=order_id, customer_id=payload.get("customer_id"))
    return order
