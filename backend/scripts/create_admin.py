#!/usr/bin/env python3
"""
Admin account creation script.

Creates an ADMIN account, or promotes an existing account with --force.
Use this instead of the ADMIN_EMAIL/ADMIN_PASSWORD startup bootstrap when
credentials should not live in the environment.

Usage:
    # Interactive mode (prompts for password)
    python scripts/create_admin.py --email admin@company.com

    # Non-interactive mode (uses environment variables)
    ADMIN_EMAIL=admin@company.com ADMIN_PASSWORD=SecureP@ss123 python scripts/create_admin.py

    # Force (resets the password and grants ADMIN to an existing account)
    python scripts/create_admin.py --force
"""
import asyncio
import getpass
import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

MIN_PASSWORD_LENGTH = 8


async def create_admin(email: str, password: str, name: str, force: bool = False) -> bool:
    """
    Create or promote an admin account.

    Args:
        email: Admin email
        password: Admin password
        name: Display name for a new account
        force: If True, reset an existing account's password and role

    Returns:
        True if the account was created/updated, False otherwise
    """
    from chatbot_studio.core.database import async_session_maker, init_db
    from chatbot_studio.models.user import UserRole
    from chatbot_studio.services.auth_service import AuthService

    await init_db()

    async with async_session_maker() as session:
        existing_user = await AuthService.get_user_by_email(session, email)

        if existing_user:
            if force:
                existing_user.password_hash = AuthService.hash_password(password)
                existing_user.role = UserRole.ADMIN
                await session.commit()
                print(f"✓ Updated existing account as admin: {email}")
                return True
            else:
                print(f"✗ Account already exists: {email}")
                print("  Use --force to reset its password and grant admin")
                return False

        await AuthService.create_user(
            db=session,
            email=email,
            password=password,
            name=name,
            role=UserRole.ADMIN,
        )
        print(f"✓ Created admin account: {email}")
        return True


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Create or update an admin account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Reset an existing account's password and grant admin",
    )
    parser.add_argument(
        "--email",
        help="Admin email (or set ADMIN_EMAIL env var)",
    )
    parser.add_argument(
        "--name",
        default=os.getenv("ADMIN_NAME", "Administrator"),
        help="Display name (or set ADMIN_NAME env var)",
    )
    parser.add_argument(
        "--password",
        help="Admin password (or set ADMIN_PASSWORD env var, or enter interactively)",
    )
    args = parser.parse_args()

    email = args.email or os.getenv("ADMIN_EMAIL")
    if not email:
        email = input("Enter admin email: ").strip()
        if not email:
            print("✗ Email is required")
            sys.exit(1)

    password = args.password or os.getenv("ADMIN_PASSWORD")
    if not password:
        password = getpass.getpass("Enter admin password: ")
        if not password:
            print("✗ Password is required")
            sys.exit(1)

        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("✗ Passwords do not match")
            sys.exit(1)

    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"✗ Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        sys.exit(1)

    success = asyncio.run(create_admin(email, password, args.name, args.force))
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
