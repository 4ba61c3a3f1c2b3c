"""
Token Codec

Signs and verifies the bearer tokens used for customer sessions and for
order confirmation links. Both uses share one format (HS256 JWT signed
with the process-wide secret); only the payload differs:

- session:       {"user": {"customer_id", "name", "email"}, "exp"}
- confirmation:  {"customer_id", "order_id"}

Tokens are self-contained. There is no revocation list, so a session
token stays valid until it expires.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
import structlog

from storefront.config import get_settings

logger = structlog.get_logger(__name__)


def sign(payload: Dict[str, Any], expires_in: Optional[timedelta] = None) -> str:
    """
    Sign a payload into an opaque token.

    Args:
        payload: JSON-serializable claims
        expires_in: Optional lifetime, adds an ``exp`` claim

    Returns:
        Encoded token string
    """
    security = get_settings().security
    claims = dict(payload)
    if expires_in is not None:
        claims["exp"] = datetime.now(timezone.utc) + expires_in

    return jwt.encode(
        claims,
        security.jwt_secret_key.get_secret_value(),
        algorithm=security.jwt_algorithm,
    )


def decode(token: Any) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a token.

    Returns None for anything that is not a validly signed, unexpired
    token issued with the configured secret.
    """
    if not isinstance(token, str) or not token:
        return None

    security = get_settings().security
    try:
        payload = jwt.decode(
            token,
            security.jwt_secret_key.get_secret_value(),
            algorithms=[security.jwt_algorithm],
        )
    except jwt.PyJWTError as e:
        logger.debug("Token rejected", reason=type(e).__name__)
        return None

    if not isinstance(payload, dict):
        return None
    return payload


def issue_session_token(customer_id: int, name: str, email: str) -> str:
    """Session token carrying the customer identity."""
    hours = get_settings().security.jwt_expiration_hours
    return sign(
        {"user": {"customer_id": customer_id, "name": name, "email": email}},
        expires_in=timedelta(hours=hours),
    )


def issue_confirmation_token(customer_id: Optional[int], order_id: int) -> str:
    """Order confirmation token embedded in the checkout email link."""
    return sign({"customer_id": customer_id, "order_id": order_id})
