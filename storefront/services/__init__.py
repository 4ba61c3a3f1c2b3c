"""
Services Module

Business operations behind the HTTP routes. Each function takes the
request's AsyncSession as its first argument.
"""
from .pagination import Pagination, normalize_pagination
from .payments import PaymentGateway, StripePaymentGateway, get_payment_gateway, to_minor_units
from .notifications import Mailer, SendGridMailer, get_mailer

__all__ = [
    "Pagination",
    "normalize_pagination",
    "PaymentGateway",
    "StripePaymentGateway",
    "get_payment_gateway",
    "to_minor_units",
    "Mailer",
    "SendGridMailer",
    "get_mailer",
]
