"""
Reference data loader

Departments, categories, products, attributes, taxes and shipping
options the storefront needs before customers can shop. Loading is
skipped when departments already exist.
"""

from decimal import Decimal
from typing import Any, Dict, List

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.models import (
    Attribute,
    AttributeValue,
    Category,
    Department,
    Product,
    ProductAttribute,
    ProductCategory,
    Shipping,
    ShippingRegion,
    Tax,
)

logger = structlog.get_logger(__name__)

DEPARTMENTS: List[Dict[str, Any]] = [
    {"department_id": 1, "name": "Regional", "description": "Proud of your country? Wear a T-shirt with a national symbol stamp!"},
    {"department_id": 2, "name": "Nature", "description": "Find beautiful T-shirts with animals and flowers in our Nature department!"},
    {"department_id": 3, "name": "Seasonal", "description": "Each time of the year has a special flavor. Our seasonal T-shirts express traditional symbols."},
]

CATEGORIES: List[Dict[str, Any]] = [
    {"category_id": 1, "department_id": 1, "name": "French", "description": "The French have always had an eye for beauty."},
    {"category_id": 2, "department_id": 1, "name": "Italian", "description": "The full and resplendent treasure chest of art."},
    {"category_id": 3, "department_id": 1, "name": "Irish", "description": "It was Irish scribes who first written down the legends."},
    {"category_id": 4, "department_id": 2, "name": "Animal", "description": "Our favorite animals on T-shirts."},
    {"category_id": 5, "department_id": 2, "name": "Flower", "description": "Flowers bloom on our T-shirts all year round."},
    {"category_id": 6, "department_id": 3, "name": "Christmas", "description": "Christmas T-shirts for the whole family."},
    {"category_id": 7, "department_id": 3, "name": "Valentine's", "description": "For the more timid, all you have to do is wear your heart on your sleeve."},
]

PRODUCTS: List[Dict[str, Any]] = [
    {"product_id": 1, "name": "Arc d'Triomphe", "description": "This beautiful and iconic T-shirt will no doubt lead you to your own triumph.", "price": "14.99", "discounted_price": "0.00", "image": "arc-d-triomphe.gif", "image_2": "arc-d-triomphe-2.gif", "thumbnail": "arc-d-triomphe-thumbnail.gif", "display": 0},
    {"product_id": 2, "name": "Chartres Cathedral", "description": "The Fur Merchants donated this window to Chartres Cathedral in France.", "price": "16.95", "discounted_price": "15.95", "image": "chartres-cathedral.gif", "image_2": "chartres-cathedral-2.gif", "thumbnail": "chartres-cathedral-thumbnail.gif", "display": 2},
    {"product_id": 3, "name": "Coat of Arms", "description": "There's good reason why the ship plays a prominent part on this shield!", "price": "14.50", "discounted_price": "0.00", "image": "coat-of-arms.gif", "image_2": "coat-of-arms-2.gif", "thumbnail": "coat-of-arms-thumbnail.gif", "display": 0},
    {"product_id": 4, "name": "Gallic Cock", "description": "This fancy chicken is perhaps the most beloved of French symbols.", "price": "18.99", "discounted_price": "16.99", "image": "gallic-cock.gif", "image_2": "gallic-cock-2.gif", "thumbnail": "gallic-cock-thumbnail.gif", "display": 2},
    {"product_id": 5, "name": "Italian Flag", "description": "The flag of Italy on a comfortable cotton T-shirt.", "price": "15.99", "discounted_price": "0.00", "image": "italian-flag.gif", "image_2": "italian-flag-2.gif", "thumbnail": "italian-flag-thumbnail.gif", "display": 0},
    {"product_id": 6, "name": "Celtic Cross", "description": "The Celtic cross is a symbol of Irish heritage.", "price": "16.50", "discounted_price": "0.00", "image": "celtic-cross.gif", "image_2": "celtic-cross-2.gif", "thumbnail": "celtic-cross-thumbnail.gif", "display": 1},
    {"product_id": 7, "name": "Afghan Flower", "description": "This beautiful image was issued to celebrate National Teachers' Day.", "price": "18.50", "discounted_price": "16.99", "image": "afghan-flower.gif", "image_2": "afghan-flower-2.gif", "thumbnail": "afghan-flower-thumbnail.gif", "display": 0},
    {"product_id": 8, "name": "Pintail Duck", "description": "A pintail duck in flight, printed on soft cotton.", "price": "17.99", "discounted_price": "0.00", "image": "pintail-duck.gif", "image_2": "pintail-duck-2.gif", "thumbnail": "pintail-duck-thumbnail.gif", "display": 0},
    {"product_id": 9, "name": "Santa Claus", "description": "Santa with his bag of presents and a merry Christmas greeting.", "price": "14.99", "discounted_price": "12.99", "image": "santa-claus.gif", "image_2": "santa-claus-2.gif", "thumbnail": "santa-claus-thumbnail.gif", "display": 3},
    {"product_id": 10, "name": "Love Birds", "description": "Two birds and a heart for Valentine's Day. Also great for flower lovers.", "price": "19.99", "discounted_price": "17.99", "image": "love-birds.gif", "image_2": "love-birds-2.gif", "thumbnail": "love-birds-thumbnail.gif", "display": 1},
]

PRODUCT_CATEGORIES: List[Dict[str, int]] = [
    {"product_id": 1, "category_id": 1},
    {"product_id": 2, "category_id": 1},
    {"product_id": 3, "category_id": 1},
    {"product_id": 4, "category_id": 1},
    {"product_id": 5, "category_id": 2},
    {"product_id": 6, "category_id": 3},
    {"product_id": 7, "category_id": 5},
    {"product_id": 8, "category_id": 4},
    {"product_id": 9, "category_id": 6},
    {"product_id": 10, "category_id": 4},
    {"product_id": 10, "category_id": 5},
    {"product_id": 10, "category_id": 7},
]

ATTRIBUTES: List[Dict[str, Any]] = [
    {"attribute_id": 1, "name": "Size"},
    {"attribute_id": 2, "name": "Color"},
]

ATTRIBUTE_VALUES: List[Dict[str, Any]] = [
    {"attribute_value_id": 1, "attribute_id": 1, "value": "S"},
    {"attribute_value_id": 2, "attribute_id": 1, "value": "M"},
    {"attribute_value_id": 3, "attribute_id": 1, "value": "L"},
    {"attribute_value_id": 4, "attribute_id": 1, "value": "XL"},
    {"attribute_value_id": 5, "attribute_id": 2, "value": "White"},
    {"attribute_value_id": 6, "attribute_id": 2, "value": "Black"},
    {"attribute_value_id": 7, "attribute_id": 2, "value": "Red"},
]

TAXES: List[Dict[str, Any]] = [
    {"tax_id": 1, "tax_type": "Sales Tax at 8.5%", "tax_percentage": "8.50"},
    {"tax_id": 2, "tax_type": "No Tax", "tax_percentage": "0.00"},
]

SHIPPING_REGIONS: List[Dict[str, Any]] = [
    {"shipping_region_id": 1, "shipping_region": "Please Select"},
    {"shipping_region_id": 2, "shipping_region": "US / Canada"},
    {"shipping_region_id": 3, "shipping_region": "Europe"},
    {"shipping_region_id": 4, "shipping_region": "Rest of World"},
]

SHIPPING_OPTIONS: List[Dict[str, Any]] = [
    {"shipping_id": 1, "shipping_type": "Next Day Delivery ($20)", "shipping_cost": "20.00", "shipping_region_id": 2},
    {"shipping_id": 2, "shipping_type": "3-4 Days ($10)", "shipping_cost": "10.00", "shipping_region_id": 2},
    {"shipping_id": 3, "shipping_type": "7 Days ($5)", "shipping_cost": "5.00", "shipping_region_id": 2},
    {"shipping_id": 4, "shipping_type": "By air (7 days, $25)", "shipping_cost": "25.00", "shipping_region_id": 3},
    {"shipping_id": 5, "shipping_type": "By sea (28 days, $10)", "shipping_cost": "10.00", "shipping_region_id": 3},
    {"shipping_id": 6, "shipping_type": "By air (10 days, $35)", "shipping_cost": "35.00", "shipping_region_id": 4},
    {"shipping_id": 7, "shipping_type": "By sea (28 days, $30)", "shipping_cost": "30.00", "shipping_region_id": 4},
]

MONEY_FIELDS = ("price", "discounted_price", "tax_percentage", "shipping_cost")


def _rows(model: Any, records: List[Dict[str, Any]]) -> List[Any]:
    rows = []
    for record in records:
        values = {
            key: Decimal(value) if key in MONEY_FIELDS else value
            for key, value in record.items()
        }
        rows.append(model(**values))
    return rows


async def seed_catalog(db: AsyncSession) -> bool:
    """
    Insert the reference data.

    Returns:
        False when the catalog was already loaded
    """
    existing = await db.scalar(select(func.count()).select_from(Department))
    if existing:
        logger.info("Catalog already seeded", departments=existing)
        return False

    # Parents first; ids are explicit so later batches can reference them
    batches = [
        (Department, DEPARTMENTS),
        (Category, CATEGORIES),
        (Product, PRODUCTS),
        (ProductCategory, PRODUCT_CATEGORIES),
        (Attribute, ATTRIBUTES),
        (AttributeValue, ATTRIBUTE_VALUES),
        (Tax, TAXES),
        (ShippingRegion, SHIPPING_REGIONS),
        (Shipping, SHIPPING_OPTIONS),
    ]
    for model, records in batches:
        db.add_all(_rows(model, records))
        await db.flush()
        logger.info(f"Inserted {len(records)} records into {model.__tablename__}")

    product_attributes = [
        {"product_id": product["product_id"], "attribute_value_id": value["attribute_value_id"]}
        for product in PRODUCTS
        for value in ATTRIBUTE_VALUES
    ]
    db.add_all(_rows(ProductAttribute, product_attributes))
    await db.flush()
    logger.info(f"Inserted {len(product_attributes)} records into {ProductAttribute.__tablename__}")

    return True
