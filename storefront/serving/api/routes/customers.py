"""
Customers API Endpoints

Registration, login and account maintenance.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, EmailStr, Field, field_serializer
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from storefront.config import get_settings
from storefront.database.connection import get_db_dependency
from storefront.security import issue_session_token
from storefront.serving.api.dependencies import USER_KEY_HEADER, require_customer
from storefront.services import customers as customer_service

router = APIRouter()
logger = structlog.get_logger(__name__)


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: Optional[str] = Field(None, min_length=1, max_length=100)
    day_phone: Optional[str] = None
    eve_phone: Optional[str] = None
    mob_phone: Optional[str] = None


class AddressUpdate(BaseModel):
    address_1: str = Field(..., min_length=1)
    address_2: Optional[str] = None
    city: str = Field(..., min_length=1)
    region: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    shipping_region_id: int = Field(..., ge=1)


class CreditCardUpdate(BaseModel):
    credit_card: str = Field(..., pattern=r"^\d{12,19}$")


class CustomerResponse(BaseModel):
    """Customer record; the card number is masked and the password never leaves"""
    customer_id: int
    name: str
    email: str
    address_1: Optional[str]
    address_2: Optional[str]
    city: Optional[str]
    region: Optional[str]
    postal_code: Optional[str]
    country: Optional[str]
    shipping_region_id: Optional[int]
    day_phone: Optional[str]
    eve_phone: Optional[str]
    mob_phone: Optional[str]
    credit_card: Optional[str]

    class Config:
        from_attributes = True

    @field_serializer("credit_card")
    def _mask_card(self, credit_card: Optional[str]) -> Optional[str]:
        return customer_service.mask_credit_card(credit_card)


class AuthResponse(BaseModel):
    customer: CustomerResponse
    accessToken: str
    expires_in: str


def _auth_response(customer, response: Response) -> AuthResponse:
    token = issue_session_token(customer.customer_id, customer.name, customer.email)
    response.headers[USER_KEY_HEADER] = token
    return AuthResponse(
        customer=CustomerResponse.model_validate(customer),
        accessToken=f"Bearer {token}",
        expires_in=f"{get_settings().security.jwt_expiration_hours}h",
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/customers", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_customer(
    body: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> AuthResponse:
    """Create a customer account and log it in."""
    customer = await customer_service.register(db, body.name, body.email, body.password)
    return _auth_response(customer, response)


@router.post("/customers/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> AuthResponse:
    """
    Exchange credentials for a session token.

    The token is returned in the `user-key` response header and as
    `accessToken` in the body.
    """
    customer = await customer_service.authenticate(db, body.email, body.password)
    logger.info("Customer logged in", customer_id=customer.customer_id)
    return _auth_response(customer, response)


@router.get(
    "/customer/{customer_id}",
    response_model=CustomerResponse,
    dependencies=[Depends(require_customer)],
)
async def get_customer_profile(
    customer_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> CustomerResponse:
    customer = await customer_service.get_customer(db, customer_id)
    return CustomerResponse.model_validate(customer)


@router.put(
    "/customer/address/{customer_id}",
    response_model=CustomerResponse,
    dependencies=[Depends(require_customer)],
)
async def update_customer_address(
    customer_id: int,
    body: AddressUpdate,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> CustomerResponse:
    customer = await customer_service.update_address(db, customer_id, **body.model_dump())
    return CustomerResponse.model_validate(customer)


@router.put(
    "/customer/creditCard/{customer_id}",
    response_model=CustomerResponse,
    dependencies=[Depends(require_customer)],
)
async def update_credit_card(
    customer_id: int,
    body: CreditCardUpdate,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> CustomerResponse:
    customer = await customer_service.update_credit_card(db, customer_id, body.credit_card)
    return CustomerResponse.model_validate(customer)


@router.put(
    "/customer/{customer_id}",
    response_model=CustomerResponse,
    dependencies=[Depends(require_customer)],
)
async def update_customer_profile(
    customer_id: int,
    body: ProfileUpdate,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> CustomerResponse:
    """Update name, email, password and phone numbers."""
    customer = await customer_service.update_profile(db, customer_id, **body.model_dump())
    return CustomerResponse.model_validate(customer)
