"""Create an administrator account.

Usage:
    python scripts/create_admin.py --email admin@melimou.com --name "Site Admin"

The password is read from --password or prompted for. Existing accounts are
left untouched.
"""

import argparse
import asyncio
import getpass
import sys
from datetime import datetime, timezone

from sqlalchemy import select

from melimou.core.security import hash_password
from melimou.db.base import close_db, get_session_factory, init_db
from melimou.db.models.user import User
from melimou.services.auth_service import MIN_PASSWORD_LENGTH


async def create_admin(email: str, password: str, name: str | None) -> bool:
    """Insert the admin row. Returns False if the email is already registered."""
    await init_db()
    try:
        async with get_session_factory()() as session:
            existing = await session.scalar(select(User.id).where(User.email == email))
            if existing is not None:
                return False

            session.add(
                User(
                    email=email,
                    name=name,
                    password_hash=hash_password(password),
                    role="admin",
                    has_completed_onboarding=True,
                    subscription_tier="premium",
                    subscription_status="active",
                    email_verified=datetime.now(timezone.utc),
                )
            )
            await session.commit()
        return True
    finally:
        await close_db()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a MeliMou admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default=None)
    parser.add_argument("--password", default=None)
    args = parser.parse_args()

    password = args.password or getpass.getpass("Admin password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        sys.exit(1)

    email = args.email.strip().lower()
    if asyncio.run(create_admin(email, password, args.name)):
        print(f"Admin account created: {email}")
    else:
        print(f"An account already exists for {email}; nothing changed.")


if __name__ == "__main__":
    main()
