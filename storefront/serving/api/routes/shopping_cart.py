"""
Shopping Cart API Endpoints

Cart ids are generated without authentication; every operation on
cart contents requires a session token.
"""

from datetime import datetime
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.connection import get_db_dependency
from storefront.serving.api.dependencies import require_customer
from storefront.services import cart as cart_service

router = APIRouter()


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class CartIdResponse(BaseModel):
    cart_id: str


class AddItemRequest(BaseModel):
    cart_id: str = Field(..., min_length=1, max_length=32)
    product_id: int = Field(..., ge=1)
    attributes: str = Field("", max_length=1000)
    quantity: int = Field(1, ge=1)


class UpdateItemRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class CartItem(BaseModel):
    """Cart line item with current product price"""
    item_id: int
    cart_id: str
    product_id: int
    name: str
    attributes: str
    price: Decimal
    quantity: int
    subtotal: Decimal
    buy_now: bool
    added_on: datetime


class MessageResponse(BaseModel):
    message: str


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/generateUniqueId", response_model=CartIdResponse)
async def generate_unique_cart_id() -> CartIdResponse:
    """Hand out a fresh cart id; nothing is stored."""
    return CartIdResponse(cart_id=cart_service.generate_cart_id())


@router.post("/add", response_model=CartItem, dependencies=[Depends(require_customer)])
async def add_item_to_cart(
    body: AddItemRequest,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> CartItem:
    item = await cart_service.add_item(
        db,
        cart_id=body.cart_id,
        product_id=body.product_id,
        attributes=body.attributes,
        quantity=body.quantity,
    )
    return CartItem(**item)


@router.put("/update/{item_id}", response_model=CartItem, dependencies=[Depends(require_customer)])
async def update_cart_item(
    item_id: int,
    body: UpdateItemRequest,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> CartItem:
    item = await cart_service.update_item(db, item_id, body.quantity)
    return CartItem(**item)


@router.delete("/empty/{cart_id}", response_model=List[CartItem], dependencies=[Depends(require_customer)])
async def empty_cart(
    cart_id: str,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[CartItem]:
    await cart_service.empty_cart(db, cart_id)
    return []


@router.delete(
    "/removeProduct/{item_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_customer)],
)
async def remove_item_from_cart(
    item_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> MessageResponse:
    await cart_service.remove_item(db, item_id)
    return MessageResponse(message="successfully removed")


@router.get("/{cart_id}", response_model=List[CartItem], dependencies=[Depends(require_customer)])
async def get_cart(
    cart_id: str,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[CartItem]:
    items = await cart_service.get_cart(db, cart_id)
    return [CartItem(**item) for item in items]
