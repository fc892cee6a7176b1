"""Create every shop table that does not exist yet.

Usage: ENV_FILE=.env.prod python scripts/database/create_tables.py
"""

import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root))
load_dotenv(project_root / os.environ.get("ENV_FILE", ".env"), override=True)

from libs.db.base import Base
from libs.db.config import dispose_engine, get_engine
from services.shop_service import models  # noqa: F401


async def create_tables():
    engine = get_engine()
    print(f"Creating tables on {engine.url.render_as_string(hide_password=True)}...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    for table in Base.metadata.sorted_tables:
        print(f"  ✓ {table.name}")
    await dispose_engine()
    print("✅ Schema ready")


if __name__ == "__main__":
    asyncio.run(create_tables())
