"""
Payment Adapter

Wraps Stripe charge creation. The SDK is synchronous, so calls run in
a worker thread to keep the event loop free.
"""

import asyncio
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional, Protocol

import stripe
import structlog

from storefront.config import get_settings
from storefront.errors import PaymentGatewayError

logger = structlog.get_logger(__name__)


@dataclass
class ChargeResult:
    """Subset of a gateway charge the API reports back"""
    id: str
    amount: int
    currency: str
    status: str
    description: Optional[str] = None


class PaymentGateway(Protocol):
    async def create_charge(
        self,
        amount: int,
        currency: str,
        source: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> ChargeResult:
        ...


def to_minor_units(amount: Decimal) -> int:
    """
    Convert a money amount to integer minor units (cents).

    Example:
        >>> to_minor_units(Decimal("12.30"))
        1230
    """
    cents = (Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(cents)


class StripePaymentGateway:
    """Charge creation against the Stripe API."""

    def __init__(self, api_key: str):
        self.api_key = api_key

    def _create(self, **params) -> "stripe.Charge":
        return stripe.Charge.create(api_key=self.api_key, **params)

    async def create_charge(
        self,
        amount: int,
        currency: str,
        source: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> ChargeResult:
        try:
            charge = await asyncio.to_thread(
                self._create,
                amount=amount,
                currency=currency,
                source=source,
                metadata=metadata or {},
            )
        except stripe.StripeError as e:
            logger.error(
                "Stripe charge failed",
                error_type=type(e).__name__,
                error=str(e),
                amount=amount,
                currency=currency,
            )
            raise PaymentGatewayError(str(e))

        logger.info("Stripe charge created", charge_id=charge.id, amount=charge.amount, status=charge.status)
        return ChargeResult(
            id=charge.id,
            amount=charge.amount,
            currency=charge.currency,
            status=charge.status,
            description=charge.description,
        )


def get_payment_gateway() -> PaymentGateway:
    """FastAPI dependency returning the configured gateway."""
    return StripePaymentGateway(get_settings().payments.secret_key.get_secret_value())
