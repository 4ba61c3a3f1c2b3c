"""
Storefront API

E-commerce backend: customer accounts, catalog browsing, shopping
carts, orders, tax and shipping lookup and Stripe checkout.
"""

__version__ = "1.0.0"
