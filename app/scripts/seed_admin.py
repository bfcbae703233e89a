"""Seed script to create or update an admin user and print a bearer token.

Usage:
    python -m app.scripts.seed_admin --email=admin@example.com --first-name=Anna

NEVER hardcode credentials in this file. Always pass via CLI arguments.
"""

import argparse
import asyncio
import sys
from sqlalchemy import select

from app.core.database import async_session
from app.models.user import ROLE_ADMIN, User
from app.services.auth import create_access_token


async def create_or_update_admin(email: str, first_name: str, phone: str | None = None) -> str:
    """Create a new admin or promote an existing user. Returns a fresh token."""
    async with async_session() as db:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user:
            print(f"✅ User {email} already exists. Updating to admin role...")
            user.role = ROLE_ADMIN
            user.is_active = True
            if phone:
                user.phone = phone
        else:
            print(f"🆕 Creating new admin user: {email}...")
            user = User(
                email=email,
                first_name=first_name,
                phone=phone,
                role=ROLE_ADMIN,
                is_active=True,
            )
            db.add(user)
        await db.commit()

        print("\n🎉 Admin setup complete!")
        print(f"   Email: {email}")
        print(f"   Role: {ROLE_ADMIN}")
        return create_access_token({"sub": str(user.id)})


def main():
    """Parse CLI arguments and run the seed script."""
    parser = argparse.ArgumentParser(description="Create or update an admin user for the booking API")
    parser.add_argument("--email", required=True, help="Admin email address")
    parser.add_argument("--first-name", default="Admin", help="Display name")
    parser.add_argument("--phone", default=None, help="Phone number for SMS (E.164)")

    args = parser.parse_args()

    # Validate email format (basic check)
    if "@" not in args.email or "." not in args.email:
        print("❌ Error: Invalid email format.", file=sys.stderr)
        sys.exit(1)

    token = asyncio.run(create_or_update_admin(args.email, args.first_name, args.phone))
    print(f"   Token: {token}")


if __name__ == "__main__":
    main()
