"""List the tables in the configured database and flag missing shop tables."""

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
from sqlalchemy import inspect


async def check_tables() -> bool:
    engine = get_engine()
    print(f"Connecting to: {engine.url.render_as_string(hide_password=True)}")

    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    await dispose_engine()

    print(f"Tables found ({len(tables)}):")
    for table in sorted(tables):
        print(f"- {table}")

    missing = sorted(set(Base.metadata.tables) - set(tables))
    if missing:
        print(f"\nWARNING: missing tables: {missing}")
        print("Run scripts/database/create_tables.py to create them.")
        return False
    print("\nAll shop tables are present.")
    return True


if __name__ == "__main__":
    sys.exit(0 if asyncio.run(check_tables()) else 1)
