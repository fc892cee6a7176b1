"""Create the admin account, or promote and re-enable it if it exists.

Usage:
    ADMIN_PASSWORD=... python scripts/users/create_admin.py [--email admin@example.com]
"""

import argparse
import asyncio
import getpass
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root))
load_dotenv(project_root / os.environ.get("ENV_FILE", ".env"), override=True)

from libs.auth.passwords import hash_password
from libs.common.config import get_settings
from libs.db.config import AsyncSessionLocal, dispose_engine
from services.shop_service.models import UserRole
from services.shop_service.services import user_ops


async def create_admin(email: str, password: str):
    async with AsyncSessionLocal() as db:
        user = await user_ops.get_user_by_email(db, email)
        if user:
            user.role = UserRole.ADMIN
            user.is_approved = True
            user.is_active = True
            user.password_hash = hash_password(password)
            await db.commit()
            print(f"✅ Existing user {user.email} promoted to ADMIN (password reset)")
        else:
            user = await user_ops.create_user(
                db,
                email=email,
                password=password,
                role=UserRole.ADMIN,
                is_approved=True,
                first_name="Admin",
            )
            print(f"✅ Admin user created: {user.email} ({user.id})")
    await dispose_engine()


def main():
    parser = argparse.ArgumentParser(description="Create or promote the admin user")
    parser.add_argument("--email", default=get_settings().ADMIN_EMAIL)
    args = parser.parse_args()

    password = os.environ.get("ADMIN_PASSWORD") or getpass.getpass("Admin password: ")
    if len(password) < 6:
        print("❌ Password must be at least 6 characters")
        sys.exit(1)

    asyncio.run(create_admin(args.email, password))


if __name__ == "__main__":
    main()
