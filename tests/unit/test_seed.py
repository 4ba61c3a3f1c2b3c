"""
Unit Tests - Reference data loader
"""
from sqlalchemy import func, select

from storefront.database.connection import get_db
from storefront.database.models import Product, ProductCategory, Shipping
from storefront.database.seed import PRODUCTS, SHIPPING_OPTIONS, seed_catalog


class TestSeedCatalog:
    """Tests for seed_catalog"""

    async def test_loads_reference_data(self, database):
        async with get_db() as db:
            assert await seed_catalog(db) is True

        async with get_db() as db:
            assert await db.scalar(select(func.count()).select_from(Product)) == len(PRODUCTS)
            assert await db.scalar(select(func.count()).select_from(Shipping)) == len(SHIPPING_OPTIONS)
            assert await db.scalar(select(func.count()).select_from(ProductCategory)) > 0

    async def test_second_run_is_skipped(self, database):
        async with get_db() as db:
            await seed_catalog(db)

        async with get_db() as db:
            assert await seed_catalog(db) is False
            assert await db.scalar(select(func.count()).select_from(Product)) == len(PRODUCTS)
