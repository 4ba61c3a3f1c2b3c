"""Custom exceptions for the storefront API.

Service functions raise these; the API layer maps them to HTTP
responses in one place (see ``storefront.serving.api.errors``).
"""

from typing import Optional


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    status_code = 500
    code = "SRV_01"

    def __init__(self, message: str = "Internal server error"):
        self.message = message
        super().__init__(message)


class ValidationError(StorefrontError):
    """Raised when request data is well formed but not acceptable."""

    status_code = 400
    code = "VAL_01"

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class UnauthorizedError(StorefrontError):
    """Raised when credentials or a signed token are missing or invalid."""

    status_code = 401
    code = "AUT_01"

    def __init__(self, message: str = "Access Unauthorized", disclose: bool = True):
        # disclose=False renders an empty 401 body
        self.disclose = disclose
        super().__init__(message)


class MissingTokenError(UnauthorizedError):
    """Raised when a protected route is called without the auth header."""

    code = "AUT_02"

    def __init__(self, header: str):
        self.field = header.upper()
        super().__init__("please provide an authorization token")


class NotFoundError(StorefrontError):
    """Raised when a requested entity does not exist."""

    status_code = 404
    code = "NF_01"

    def __init__(self, entity: str, key: Optional[object] = None):
        self.entity = entity
        self.key = key
        msg = f"{entity} not found"
        if key is not None:
            msg = f"{entity} with id {key} does not exist"
        super().__init__(msg)


class ConflictError(StorefrontError):
    """Raised when a write collides with existing data."""

    status_code = 409
    code = "CON_01"


class UpstreamError(StorefrontError):
    """Raised when an external collaborator fails.

    The message is logged, never returned to the client.
    """

    status_code = 502
    code = "UPS_01"
    public_message = "Upstream service failure"


class PaymentGatewayError(UpstreamError):
    """Raised when the payment gateway rejects or fails a charge."""

    public_message = "Payment could not be processed"


class NotificationError(UpstreamError):
    """Raised when the email provider fails to accept a message."""

    public_message = "Confirmation email could not be sent"
