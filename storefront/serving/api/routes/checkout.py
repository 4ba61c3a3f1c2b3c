"""
Checkout API Endpoints

Stripe payment for an existing order.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.connection import get_db_dependency
from storefront.serving.api.dependencies import CustomerIdentity, require_customer
from storefront.services import checkout
from storefront.services.notifications import Mailer, get_mailer
from storefront.services.payments import PaymentGateway, get_payment_gateway

router = APIRouter()


class ChargeRequest(BaseModel):
    stripeToken: str = Field(..., min_length=1)
    order_id: int = Field(..., ge=1)
    email: EmailStr


class ChargeResponse(BaseModel):
    stripeToken: str
    description: Optional[str]
    amount: int
    currency: str
    message: str


@router.post("/charge", response_model=ChargeResponse, status_code=status.HTTP_201_CREATED)
async def process_stripe_payment(
    body: ChargeRequest,
    customer: CustomerIdentity = Depends(require_customer),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    mailer: Mailer = Depends(get_mailer),
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> ChargeResponse:
    """
    Charge the order total and email a confirmation link.

    No idempotency key is sent to the gateway; a retried request can
    charge twice.
    """
    result = await checkout.process_stripe_payment(
        db,
        order_id=body.order_id,
        email=body.email,
        stripe_token=body.stripeToken,
        customer_id=customer.customer_id,
        gateway=gateway,
        mailer=mailer,
    )
    return ChargeResponse(**result)
