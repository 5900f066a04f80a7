# seed_catalog.py
"""Create the schema and load service categories and electrician problems.

Usage: python seed_catalog.py  (reads database settings from .env)
"""
import asyncio
import logging
from decimal import Decimal

from shirur_express.database import connect, init_schema

logger = logging.getLogger(__name__)

CATEGORIES = [
    ("Electrician", "electrician"),
    ("Plumber", "plumber"),
    ("Carpenter", "carpenter"),
    ("Painter", "painter"),
    ("Beauty & Salon", "beauty"),
    ("Cake Shop", "cake-shop"),
    ("Street Food", "street-food"),
    ("Restaurants", "restaurants"),
]

ELECTRICIAN_PROBLEMS = {
    "Air Conditioner (AC)": [
        "Not cooling properly", "Water leakage", "Unusual noises",
        "Remote not working", "Frozen coils", "High electricity consumption",
    ],
    "Refrigerator": [
        "Not cooling or overcooling", "Water leakage", "Ice maker not working",
        "Frost build-up in freezer", "Compressor issues", "Door not closing properly",
    ],
    "Television (TV)": [
        "No display / black screen", "No sound", "HDMI/AV ports not functioning",
        "Distorted image or colors", "Wall mount installation needed",
    ],
    "Water Heater (Geyser)": [
        "Not heating water", "Water leakage", "Electrical tripping when turned on",
        "Thermostat not working",
    ],
    "Washing Machine": [
        "Not spinning", "Not draining water", "Door not opening", "Excessive vibration",
    ],
    "Wiring & Switchboards": [
        "Short circuit", "Sparking switch", "New point installation", "MCB tripping",
    ],
}

GROCERY_PRODUCTS = [
    ("Bananas", "fruits", Decimal("40.00"), "dozen"),
    ("Tomatoes", "vegetables", Decimal("30.00"), "kg"),
    ("Milk", "dairy", Decimal("27.00"), "500 ml"),
    ("Bread", "bakery", Decimal("45.00"), "loaf"),
    ("Masala Chips", "snacks", Decimal("20.00"), "pack"),
    ("Tea Powder", "beverages", Decimal("120.00"), "250 g"),
]


async def seed() -> None:
    conn = await connect()
    try:
        await init_schema(conn)
        async with conn.transaction():
            for name, slug in CATEGORIES:
                await conn.execute(
                    """
                    INSERT INTO service_category (name, slug) VALUES ($1, $2)
                    ON CONFLICT (slug) DO NOTHING
                    """,
                    name, slug
                )
            category_id = await conn.fetchval(
                "SELECT category_id FROM service_category WHERE slug = 'electrician'"
            )
            if await conn.fetchval(
                "SELECT EXISTS(SELECT 1 FROM service_problem WHERE category_id = $1)", category_id
            ):
                logger.info("Electrician problems already seeded")
            else:
                for device, issues in ELECTRICIAN_PROBLEMS.items():
                    device_id = await conn.fetchval(
                        "INSERT INTO service_problem (category_id, name) VALUES ($1, $2) RETURNING problem_id",
                        category_id, device
                    )
                    await conn.executemany(
                        "INSERT INTO service_problem (category_id, name, parent_id) VALUES ($1, $2, $3)",
                        [(category_id, issue, device_id) for issue in issues]
                    )
            if not await conn.fetchval("SELECT EXISTS(SELECT 1 FROM grocery_product)"):
                await conn.executemany(
                    "INSERT INTO grocery_product (name, category, price, unit) VALUES ($1, $2, $3, $4)",
                    GROCERY_PRODUCTS
                )
        logger.info("Catalog seeded")
    finally:
        await conn.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())
