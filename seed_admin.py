#!/usr/bin/env python
"""
Create (or reset) the back-office admin account
"""

import argparse
import asyncio
import getpass
import os
import sys


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create the admin user for the back office")
    parser.add_argument("--email", required=True, help="Admin login email")
    parser.add_argument("--name", default="Store Admin", help="Display name")
    parser.add_argument("--password", help="Password (prompted when omitted)")
    parser.add_argument("--reset", action="store_true", help="Delete and recreate an existing admin")
    parser.add_argument("--demo", action="store_true", help="Also insert the sample catalog, customer and order")
    return parser.parse_args(argv)


async def seed(email: str, password: str, name: str, reset: bool, demo: bool = False) -> int:
    from medstore.db.session import async_session, engine
    from medstore.services.auth import ensure_admin
    from medstore.services.demo import seed_demo_catalog

    demo_created = None
    try:
        async with async_session() as db:
            admin, created = await ensure_admin(db, email, password, name, reset=reset)
            if demo:
                demo_created = await seed_demo_catalog(db)
    finally:
        await engine.dispose()

    if created:
        print(f"✅ Admin user ready: {admin.email}")
    else:
        print(f"Admin user already exists: {admin.email} (use --reset to recreate)")
    if demo_created is not None:
        print(f"🌱 Demo data: {demo_created['categories']} categories, {demo_created['products']} products, "
              f"{demo_created['customers']} customers, {demo_created['orders']} orders created")
    return 0


def main(argv=None) -> int:
    if os.path.exists('.env'):
        from dotenv import load_dotenv
        load_dotenv()

    args = parse_args(argv)
    password = args.password or getpass.getpass("Admin password: ")
    if not password:
        print("❌ Password must not be empty")
        return 1

    return asyncio.run(seed(args.email, password, args.name, args.reset, args.demo))


if __name__ == "__main__":
    sys.exit(main())
