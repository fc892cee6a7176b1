"""Approve every user that is still waiting for approval."""

import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root))
load_dotenv(project_root / os.environ.get("ENV_FILE", ".env"), override=True)

from libs.db.config import AsyncSessionLocal, dispose_engine
from services.shop_service.services import user_ops


async def approve_all():
    print("Approving pending users...")
    async with AsyncSessionLocal() as db:
        users = await user_ops.approve_pending_users(db)
    await dispose_engine()

    if not users:
        print("✅ No pending users")
        return
    for user in users:
        print(f"  ✓ {user.email}")
    print(f"✅ Approved {len(users)} user(s)")


if __name__ == "__main__":
    asyncio.run(approve_all())
