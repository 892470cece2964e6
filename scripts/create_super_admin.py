#!/usr/bin/env python3
"""
Create the first Super Admin account.

Usage:
    python scripts/create_super_admin.py admin@example.com "First" "Last"

The password is read from SUPER_ADMIN_PASSWORD or prompted for.
"""

import argparse
import asyncio
import getpass
import os
import sys

import dotenv

dotenv.load_dotenv()

from app.core.exceptions import ConflictException  # noqa: E402
from app.database import AsyncSessionLocal, engine  # noqa: E402
from app.schemas.admins import AdminCreate, AdminRole  # noqa: E402
from app.services.admin_service import AdminService  # noqa: E402


async def create_super_admin(email: str, first_name: str, last_name: str, password: str) -> None:
    """Insert a Super Admin."""
    admin_data = AdminCreate(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password,
        role=AdminRole.SUPER_ADMIN,
    )

    async with AsyncSessionLocal() as db:
        try:
            admin = await AdminService.create_admin(db, admin_data)
        except ConflictException as e:
            print(f"✗ {e.message}", file=sys.stderr)
            sys.exit(1)
        finally:
            await engine.dispose()

    print(f"✓ Super Admin created: {admin['email']} ({admin['id']})")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a Super Admin account")
    parser.add_argument("email")
    parser.add_argument("first_name")
    parser.add_argument("last_name")
    args = parser.parse_args()

    password = os.getenv("SUPER_ADMIN_PASSWORD") or getpass.getpass("Password: ")
    asyncio.run(create_super_admin(args.email, args.first_name, args.last_name, password))


if __name__ == "__main__":
    main()
