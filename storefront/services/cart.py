"""
Shopping Cart Store

Line items are grouped by an opaque cart id that the client obtains
from generate_cart_id() before adding anything. The cart is not tied
to a customer until an order is created from it.
"""

import uuid
from decimal import Decimal
from typing import Any, Dict, List

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.models import Product, ShoppingCart
from storefront.errors import NotFoundError

logger = structlog.get_logger(__name__)


def generate_cart_id() -> str:
    """Random 32 character cart id (a uuid4 without dashes)."""
    return uuid.uuid4().hex


def effective_price(product: Product) -> Decimal:
    """Sale price when the product is discounted, list price otherwise."""
    if product.discounted_price and product.discounted_price > 0:
        return product.discounted_price
    return product.price


def _line_item(item: ShoppingCart, product: Product) -> Dict[str, Any]:
    price = effective_price(product)
    return {
        "item_id": item.item_id,
        "cart_id": item.cart_id,
        "product_id": item.product_id,
        "name": product.name,
        "attributes": item.attributes,
        "price": price,
        "quantity": item.quantity,
        "subtotal": price * item.quantity,
        "buy_now": item.buy_now,
        "added_on": item.added_on,
    }


async def _get_line_item(db: AsyncSession, item_id: int) -> Dict[str, Any]:
    result = await db.execute(
        select(ShoppingCart, Product)
        .join(Product, Product.product_id == ShoppingCart.product_id)
        .where(ShoppingCart.item_id == item_id)
    )
    row = result.first()
    if row is None:
        raise NotFoundError("Cart item", item_id)
    return _line_item(row.ShoppingCart, row.Product)


async def add_item(
    db: AsyncSession,
    cart_id: str,
    product_id: int,
    attributes: str,
    quantity: int = 1,
) -> Dict[str, Any]:
    """
    Add a line item to a cart.

    Items added through the API always join the checkout set
    (buy_now=True); create_order only snapshots those rows.
    """
    product = await db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)

    item = ShoppingCart(
        cart_id=cart_id,
        product_id=product_id,
        attributes=attributes,
        quantity=quantity,
        buy_now=True,
    )
    db.add(item)
    await db.flush()

    logger.info("Cart item added", cart_id=cart_id, item_id=item.item_id, product_id=product_id)
    return _line_item(item, product)


async def get_cart(db: AsyncSession, cart_id: str) -> List[Dict[str, Any]]:
    result = await db.execute(
        select(ShoppingCart, Product)
        .join(Product, Product.product_id == ShoppingCart.product_id)
        .where(ShoppingCart.cart_id == cart_id)
        .order_by(ShoppingCart.item_id)
    )
    items = [_line_item(row.ShoppingCart, row.Product) for row in result.all()]
    if not items:
        raise NotFoundError("Cart", cart_id)
    return items


async def update_item(db: AsyncSession, item_id: int, quantity: int) -> Dict[str, Any]:
    item = await db.get(ShoppingCart, item_id)
    if item is None:
        raise NotFoundError("Cart item", item_id)

    item.quantity = quantity
    await db.flush()

    logger.info("Cart item updated", item_id=item_id, quantity=quantity)
    return await _get_line_item(db, item_id)


async def empty_cart(db: AsyncSession, cart_id: str) -> int:
    """Delete every line item of a cart; returns the number removed."""
    result = await db.execute(delete(ShoppingCart).where(ShoppingCart.cart_id == cart_id))
    logger.info("Cart emptied", cart_id=cart_id, removed=result.rowcount)
    return result.rowcount


async def remove_item(db: AsyncSession, item_id: int) -> None:
    item = await db.get(ShoppingCart, item_id)
    if item is None:
        raise NotFoundError("Cart item", item_id)

    await db.delete(item)
    await db.flush()
    logger.info("Cart item removed", item_id=item_id, cart_id=item.cart_id)
