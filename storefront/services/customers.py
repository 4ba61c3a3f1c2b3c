"""
Customer Account Service

Registration, login and profile updates.
"""

from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.models import Customer, ShippingRegion
from storefront.errors import ConflictError, NotFoundError, UnauthorizedError
from storefront.security import hash_password, verify_password

logger = structlog.get_logger(__name__)


def mask_credit_card(credit_card: Optional[str]) -> Optional[str]:
    """Keep only the last four digits of a card number."""
    if not credit_card:
        return credit_card
    return "X" * max(len(credit_card) - 4, 0) + credit_card[-4:]


async def _find_by_email(db: AsyncSession, email: str) -> Optional[Customer]:
    result = await db.execute(
        select(Customer).where(func.lower(Customer.email) == email.lower())
    )
    return result.scalar_one_or_none()


async def _flush_unique_email(db: AsyncSession) -> None:
    try:
        await db.flush()
    except IntegrityError:
        raise ConflictError("The email already exists")


async def register(db: AsyncSession, name: str, email: str, password: str) -> Customer:
    if await _find_by_email(db, email) is not None:
        raise ConflictError("The email already exists")

    customer = Customer(name=name, email=email, password=hash_password(password))
    db.add(customer)
    await _flush_unique_email(db)

    logger.info("Customer registered", customer_id=customer.customer_id)
    return customer


async def authenticate(db: AsyncSession, email: str, password: str) -> Customer:
    """Return the customer owning these credentials."""
    customer = await _find_by_email(db, email)
    if customer is None or not verify_password(password, customer.password):
        logger.info("Login rejected")
        raise UnauthorizedError("Email or Password is invalid")
    return customer


async def get_customer(db: AsyncSession, customer_id: int) -> Customer:
    customer = await db.get(Customer, customer_id)
    if customer is None:
        raise NotFoundError("Customer", customer_id)
    return customer


async def update_profile(
    db: AsyncSession,
    customer_id: int,
    name: str,
    email: str,
    password: Optional[str] = None,
    day_phone: Optional[str] = None,
    eve_phone: Optional[str] = None,
    mob_phone: Optional[str] = None,
) -> Customer:
    customer = await get_customer(db, customer_id)

    if email.lower() != customer.email.lower():
        other = await _find_by_email(db, email)
        if other is not None and other.customer_id != customer_id:
            raise ConflictError("The email already exists")

    customer.name = name
    customer.email = email
    if password:
        customer.password = hash_password(password)
    customer.day_phone = day_phone
    customer.eve_phone = eve_phone
    customer.mob_phone = mob_phone
    await _flush_unique_email(db)

    logger.info("Customer profile updated", customer_id=customer_id)
    return customer


async def update_address(
    db: AsyncSession,
    customer_id: int,
    address_1: str,
    city: str,
    region: str,
    postal_code: str,
    country: str,
    shipping_region_id: int,
    address_2: Optional[str] = None,
) -> Customer:
    customer = await get_customer(db, customer_id)
    if await db.get(ShippingRegion, shipping_region_id) is None:
        raise NotFoundError("Shipping region", shipping_region_id)

    customer.address_1 = address_1
    customer.address_2 = address_2
    customer.city = city
    customer.region = region
    customer.postal_code = postal_code
    customer.country = country
    customer.shipping_region_id = shipping_region_id
    await db.flush()

    logger.info("Customer address updated", customer_id=customer_id)
    return customer


async def update_credit_card(db: AsyncSession, customer_id: int, credit_card: str) -> Customer:
    customer = await get_customer(db, customer_id)
    customer.credit_card = credit_card
    await db.flush()

    logger.info("Customer credit card updated", customer_id=customer_id)
    return customer
