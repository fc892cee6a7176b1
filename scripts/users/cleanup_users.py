"""Delete unapproved customer accounts older than a cutoff (default 24h).

Usage: python scripts/users/cleanup_users.py [--hours 24] [--dry-run]
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

from libs.common.datetime_utils import hours_ago
from libs.db.config import AsyncSessionLocal, dispose_engine
from services.shop_service.models import User, UserRole
from services.shop_service.services import user_ops
from sqlalchemy import select


async def cleanup(hours: int, dry_run: bool):
    cutoff = hours_ago(hours)
    print(f"Looking for unapproved users created before {cutoff.isoformat()}...")

    async with AsyncSessionLocal() as db:
        if dry_run:
            result = await db.execute(
                select(User.email).where(
                    User.is_approved.is_(False),
                    User.role != UserRole.ADMIN,
                    User.created_at < cutoff,
                )
            )
            emails = list(result.scalars().all())
        else:
            emails = await user_ops.delete_stale_unapproved(db, cutoff)
    await dispose_engine()

    for email in emails:
        print(f"  {'would delete' if dry_run else '✓ deleted'} {email}")
    print(f"✅ {len(emails)} user(s) {'matched' if dry_run else 'removed'}")


def main():
    parser = argparse.ArgumentParser(description="Remove stale unapproved users")
    parser.add_argument("--hours", type=int, default=24)
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()
    asyncio.run(cleanup(args.hours, args.dry_run))


if __name__ == "__main__":
    main()
