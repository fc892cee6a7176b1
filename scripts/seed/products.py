"""Seed demo categories and products. Safe to re-run: existing SKUs are skipped."""

import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root))
load_dotenv(project_root / os.environ.get("ENV_FILE", ".env"), override=True)

from libs.db.config import AsyncSessionLocal, dispose_engine
from services.shop_service.models import Category, Product
from sqlalchemy import select

CATEGORIES = {
    "Filters": "Oil, air and cabin filters",
    "Brakes": "Pads, discs and brake fluid",
    "Electrical": "Bulbs, fuses and batteries",
}

PRODUCTS = [
    {"name": "Oil filter W 712/95", "sku": "FLT-001", "price": 18.50, "category": "Filters", "stock": 40, "is_featured": True},
    {"name": "Air filter C 30 130", "sku": "FLT-002", "price": 24.00, "sale_price": 19.90, "category": "Filters", "stock": 25},
    {"name": "Front brake pads", "sku": "BRK-101", "price": 65.00, "category": "Brakes", "stock": 12, "artikul": "0 986 494 199"},
    {"name": "Brake disc 280mm", "sku": "BRK-102", "price": 89.00, "category": "Brakes", "stock": 8, "is_featured": True},
    {"name": "H7 halogen bulb", "sku": "ELC-201", "price": 6.50, "category": "Electrical", "stock": 120},
    {"name": "Battery 60Ah", "sku": "ELC-202", "price": 145.00, "sale_price": 129.00, "category": "Electrical", "stock": 6},
]


async def seed_products():
    async with AsyncSessionLocal() as db:
        category_ids = {}
        for name, description in CATEGORIES.items():
            existing = (
                await db.execute(select(Category).where(Category.name == name))
            ).scalars().first()
            if existing is None:
                existing = Category(name=name, description=description)
                db.add(existing)
                await db.flush()
                print(f"  ✓ category {name}")
            category_ids[name] = existing.id

        created = 0
        for row in PRODUCTS:
            row = dict(row)
            category = row.pop("category")
            exists = (
                await db.execute(select(Product.id).where(Product.sku == row["sku"]))
            ).first()
            if exists:
                print(f"  - {row['sku']} exists, skipped")
                continue
            db.add(Product(category_id=category_ids[category], images=[], **row))
            created += 1
            print(f"  ✓ product {row['name']}")

        await db.commit()
    await dispose_engine()
    print(f"✅ Seeded {created} product(s)")


if __name__ == "__main__":
    asyncio.run(seed_products())
