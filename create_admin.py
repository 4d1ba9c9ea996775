"""
Create the first branch and super admin.

Run once against an empty database:

    python create_admin.py --email owner@example.com --password secret123
"""

import argparse
import sys
import os

# Add the project root to the Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from backend.fastapi.core.init_settings import global_settings
from backend.fastapi.crud.user import bootstrap_super_admin
from backend.fastapi.dependencies.database import SessionLocal, init_db


def create_initial_admin(email: str, password: str, branch_name: str, branch_code: str):
    """Create the initial super admin user (and branch) if no user exists."""
    init_db()
    db = SessionLocal()

    try:
        admin = bootstrap_super_admin(db, email, password, branch_name, branch_code)
        if admin is None:
            print("Users already exist, nothing to do.")
            return None

        print("Successfully created super admin:")
        print(f"   ID: {admin.id}")
        print(f"   Email: {admin.email}")
        print(f"   Branch: {admin.branch.name} ({admin.branch.code})")
        print("\nLogin at POST http://localhost:8000/api/v1/auth/login")
        return admin

    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the first branch and super admin")
    parser.add_argument("--email", default=global_settings.INITIAL_ADMIN_EMAIL)
    parser.add_argument("--password", default=global_settings.INITIAL_ADMIN_PASSWORD)
    parser.add_argument("--branch-name", default=global_settings.INITIAL_BRANCH_NAME)
    parser.add_argument("--branch-code", default=global_settings.INITIAL_BRANCH_CODE)
    args = parser.parse_args()

    if not args.email or not args.password:
        parser.error("--email and --password are required (or set INITIAL_ADMIN_EMAIL / INITIAL_ADMIN_PASSWORD)")

    print("Creating initial super admin...")
    create_initial_admin(args.email, args.password, args.branch_name, args.branch_code)
