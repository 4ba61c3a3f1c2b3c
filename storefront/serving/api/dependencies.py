"""
Shared FastAPI dependencies

- require_customer: the authentication gate for protected routes
- pagination_params: lenient pagination query parsing
"""

from typing import Optional

import structlog
from fastapi import Query, Request
from pydantic import BaseModel

from storefront.errors import MissingTokenError, UnauthorizedError
from storefront.security import tokens
from storefront.services.pagination import Pagination, normalize_pagination

logger = structlog.get_logger(__name__)

USER_KEY_HEADER = "user-key"
BEARER_PREFIX = "bearer "


class CustomerIdentity(BaseModel):
    """Identity carried by a session token"""
    customer_id: int
    name: Optional[str] = None
    email: Optional[str] = None


def _strip_scheme(authorization: str) -> str:
    value = authorization.strip()
    if value.lower().startswith(BEARER_PREFIX):
        return value[len(BEARER_PREFIX):].strip()
    return value


async def require_customer(request: Request) -> CustomerIdentity:
    """
    Resolve the customer from the `user-key` header.

    The token is the whole credential; nothing is looked up server side.
    A missing header gets a 401 explaining what is expected, a bad token
    gets a bare 401.
    """
    authorization = request.headers.get(USER_KEY_HEADER)
    if authorization is None:
        raise MissingTokenError(USER_KEY_HEADER)

    payload = tokens.decode(_strip_scheme(authorization))
    user = payload.get("user") if payload else None
    if not isinstance(user, dict) or not isinstance(user.get("customer_id"), int):
        logger.info("Rejected session token", path=request.url.path)
        raise UnauthorizedError(disclose=False)

    identity = CustomerIdentity(
        customer_id=user["customer_id"],
        name=user.get("name"),
        email=user.get("email"),
    )
    request.state.customer = identity
    return identity


def pagination_params(
    page: Optional[str] = Query(None, description="Page number, defaults to 1"),
    limit: Optional[str] = Query(None, description="Page size, defaults to 20"),
    offset: Optional[str] = Query(None, description="Row offset, overrides page"),
    description_length: Optional[str] = Query(None, description="Description cut-off, defaults to 200"),
) -> Pagination:
    return normalize_pagination(page, limit, offset, description_length)
