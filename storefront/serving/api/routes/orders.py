"""
Orders API Endpoints

Order creation from a cart, order projections and the confirmation
link target.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.connection import get_db_dependency
from storefront.database.models import OrderStatus
from storefront.serving.api.dependencies import CustomerIdentity, require_customer
from storefront.services import orders as order_service

router = APIRouter()


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class CreateOrderRequest(BaseModel):
    cart_id: str = Field(..., min_length=1, max_length=32)
    shipping_id: int = Field(..., ge=1)
    tax_id: int = Field(..., ge=1)


class CreateOrderResponse(BaseModel):
    order_id: int


class OrderItem(BaseModel):
    item_id: int
    product_id: int
    attributes: str
    product_name: str
    quantity: int
    unit_cost: Decimal
    subtotal: Decimal


class OrderSummary(BaseModel):
    """Order with its line items"""
    order_id: int
    order_items: List[OrderItem]


class OrderShortDetail(BaseModel):
    order_id: int
    total_amount: Decimal
    created_on: datetime
    shipped_on: Optional[datetime]
    status: OrderStatus
    name: str


class MessageResponse(BaseModel):
    message: str


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/orders", response_model=CreateOrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    body: CreateOrderRequest,
    customer: CustomerIdentity = Depends(require_customer),
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> CreateOrderResponse:
    """Create an order for the logged in customer from a cart."""
    order = await order_service.create_order(
        db,
        cart_id=body.cart_id,
        customer_id=customer.customer_id,
        shipping_id=body.shipping_id,
        tax_id=body.tax_id,
    )
    return CreateOrderResponse(order_id=order.order_id)


@router.get("/order/status/{token}", response_model=MessageResponse)
async def update_order_status(
    token: str,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> MessageResponse:
    """Confirmation link target; the token names the order to confirm."""
    await order_service.update_order_status(db, token)
    return MessageResponse(message="Status updated successfully")


@router.get(
    "/orders/inCustomer/{customer_id}",
    response_model=List[OrderShortDetail],
    dependencies=[Depends(require_customer)],
)
async def get_customer_orders(
    customer_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[OrderShortDetail]:
    rows = await order_service.list_customer_orders(db, customer_id)
    return [OrderShortDetail(**row) for row in rows]


@router.get(
    "/orders/shortDetail/{order_id}",
    response_model=OrderShortDetail,
    dependencies=[Depends(require_customer)],
)
async def get_order_short_details(
    order_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> OrderShortDetail:
    row = await order_service.get_order_short_details(db, order_id)
    return OrderShortDetail(**row)


@router.get(
    "/orders/{order_id}",
    response_model=OrderSummary,
    dependencies=[Depends(require_customer)],
)
async def get_order_summary(
    order_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> OrderSummary:
    summary = await order_service.get_order_summary(db, order_id)
    return OrderSummary(**summary)
