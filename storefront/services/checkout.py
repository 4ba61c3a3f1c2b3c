"""
Checkout

Charges an order through the payment gateway and mails the customer a
link that confirms the order. The steps run in sequence with no retry
or compensation: if the email fails after a successful charge the
error still reaches the client.
"""

from decimal import Decimal
from html import escape
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.config import get_settings
from storefront.security import issue_confirmation_token
from storefront.services import orders
from storefront.services.notifications import Mailer
from storefront.services.payments import PaymentGateway, to_minor_units

logger = structlog.get_logger(__name__)


def confirmation_link(token: str) -> str:
    """Public URL of the order status route, including API_PREFIX."""
    settings = get_settings()
    base_url = settings.public_base_url.rstrip("/")
    prefix = settings.api_prefix.rstrip("/")
    return f"{base_url}{prefix}/order/status/{token}"


def render_confirmation_email(items: List[Dict[str, Any]], amount: Decimal, link: str) -> str:
    lines = "".join(
        f"<li>quantity <b>{item['quantity']}</b> of <b>{escape(item['product_name'])}</b></li>"
        for item in items
    )
    return (
        f"<p>You have just ordered:</p><ul>{lines}</ul>"
        f"<p>Total charged: ${amount:.2f}</p>"
        f'<a href="{escape(link)}">Confirm this purchase</a>'
    )


async def process_stripe_payment(
    db: AsyncSession,
    order_id: int,
    email: str,
    stripe_token: str,
    customer_id: Optional[int],
    gateway: PaymentGateway,
    mailer: Mailer,
) -> Dict[str, Any]:
    """
    Charge the order total and send the confirmation email.

    The amount charged is the order total_amount, which already includes
    tax and shipping, rather than the subtotal of a single line item.

    Returns the charge metadata echoed to the client.
    """
    order = await orders.get_order(db, order_id)
    items = await orders.get_order_items(db, order_id)

    amount = to_minor_units(order.total_amount)
    currency = get_settings().payments.currency

    charge = await gateway.create_charge(
        amount=amount,
        currency=currency,
        source=stripe_token,
        metadata={"order_id": str(order_id)},
    )

    token = issue_confirmation_token(customer_id, order_id)
    html = render_confirmation_email(items, order.total_amount, confirmation_link(token))
    await mailer.send(email, get_settings().mail.subject, html)

    logger.info(
        "Checkout completed",
        order_id=order_id,
        customer_id=customer_id,
        charge_id=charge.id,
        amount=charge.amount,
    )
    return {
        "stripeToken": stripe_token,
        "description": charge.description,
        "amount": charge.amount,
        "currency": charge.currency,
        "message": "Successful Checkout",
    }
