"""Drop and recreate every shop table. All data is lost.

Usage:
    python scripts/database/reset_db.py --yes

Targets that look like production additionally require typing the phrase
printed by the script.
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root))
load_dotenv(project_root / os.environ.get("ENV_FILE", ".env"), override=True)

from libs.common.config import get_settings
from libs.db.base import Base
from libs.db.config import dispose_engine, get_engine
from services.shop_service import models  # noqa: F401

CONFIRM_PHRASE = "reset production database"
PRODUCTION_MARKERS = ("prod", "supabase", "neon", "vercel", "amazonaws")


def looks_like_production(url: str) -> bool:
    settings = get_settings()
    return settings.ENVIRONMENT == "production" or any(
        marker in url.lower() for marker in PRODUCTION_MARKERS
    )


async def reset_database():
    engine = get_engine()
    print("Dropping all shop tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        print("Recreating tables...")
        await conn.run_sync(Base.metadata.create_all)
    await dispose_engine()
    print("✅ Database reset complete")


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--yes", action="store_true", help="skip the first confirmation")
    args = parser.parse_args()

    url = get_settings().DATABASE_URL
    safe_url = get_engine().url.render_as_string(hide_password=True)
    print(f"Target: {safe_url}")

    if not args.yes:
        answer = input("This deletes ALL data. Continue? [y/N] ")
        if answer.strip().lower() != "y":
            print("Aborted.")
            return 1

    if looks_like_production(url):
        typed = input(f'Target looks like production. Type "{CONFIRM_PHRASE}" to continue: ')
        if typed.strip() != CONFIRM_PHRASE:
            print("Aborted.")
            return 1

    asyncio.run(reset_database())
    return 0


if __name__ == "__main__":
    sys.exit(main())
