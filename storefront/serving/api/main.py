"""
FastAPI Application Factory

Creates and configures the Storefront API application.
"""

from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from storefront.config import get_settings
from storefront.serving.api.dependencies import require_customer
from storefront.serving.api.errors import register_exception_handlers
from storefront.serving.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from storefront.serving.api.routes import (
    attributes_router,
    categories_router,
    checkout_router,
    customers_router,
    departments_router,
    health_router,
    orders_router,
    products_router,
    shipping_router,
    shopping_cart_router,
    tax_router,
)


def create_api_app(lifespan=None, settings=None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        lifespan: Optional lifespan context manager
        settings: Settings instance, defaults to the cached one

    Returns:
        Configured FastAPI app instance
    """
    settings = settings or get_settings()
    prefix = settings.api_prefix.rstrip("/")

    app = FastAPI(
        title="Storefront API",
        description="Customers, catalog, cart, orders and Stripe checkout",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # Add CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["user-key"],
    )

    # Add compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.is_production)

    register_exception_handlers(app)

    authenticated = [Depends(require_customer)]

    app.include_router(health_router, tags=["Health"])
    app.include_router(customers_router, prefix=prefix, tags=["Customers"])
    app.include_router(
        products_router, prefix=f"{prefix}/products", tags=["Products"], dependencies=authenticated
    )
    app.include_router(
        departments_router, prefix=f"{prefix}/departments", tags=["Departments"], dependencies=authenticated
    )
    app.include_router(
        categories_router, prefix=f"{prefix}/categories", tags=["Categories"], dependencies=authenticated
    )
    app.include_router(
        attributes_router, prefix=f"{prefix}/attributes", tags=["Attributes"], dependencies=authenticated
    )
    app.include_router(tax_router, prefix=f"{prefix}/tax", tags=["Tax"], dependencies=authenticated)
    app.include_router(
        shipping_router, prefix=f"{prefix}/shipping", tags=["Shipping"], dependencies=authenticated
    )
    app.include_router(shopping_cart_router, prefix=f"{prefix}/shoppingcart", tags=["Shopping Cart"])
    app.include_router(orders_router, prefix=prefix, tags=["Orders"])
    app.include_router(checkout_router, prefix=f"{prefix}/stripe", tags=["Checkout"])

    return app
