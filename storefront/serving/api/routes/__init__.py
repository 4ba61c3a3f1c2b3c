"""
API Routes Module
"""
from .health import router as health_router
from .customers import router as customers_router
from .products import router as products_router
from .departments import router as departments_router
from .categories import router as categories_router
from .attributes import router as attributes_router
from .tax import router as tax_router
from .shipping import router as shipping_router
from .shopping_cart import router as shopping_cart_router
from .orders import router as orders_router
from .checkout import router as checkout_router

__all__ = [
    "health_router",
    "customers_router",
    "products_router",
    "departments_router",
    "categories_router",
    "attributes_router",
    "tax_router",
    "shipping_router",
    "shopping_cart_router",
    "orders_router",
    "checkout_router",
]
