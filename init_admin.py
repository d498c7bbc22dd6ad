"""
Quick script to seed the late threshold and an initial admin user
Run this if you don't have an admin user yet

    python init_admin.py [--email admin@company.com] [--password secret]
"""
import argparse
import sys

from app.db.session import SessionLocal
from app.db.init_db import bootstrap_initial_admin
from app.services.settings_service import seed_late_threshold


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create the initial admin user")
    parser.add_argument("--email", help="Admin email (default: INITIAL_ADMIN_EMAIL)")
    parser.add_argument("--password", help="Admin password (default: INITIAL_ADMIN_PASSWORD)")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        if seed_late_threshold(db):
            print("Seeded default late threshold")
        user = bootstrap_initial_admin(db, email=args.email, password=args.password)
        if user is None:
            print("Admin user already exists, skipping initialization")
        else:
            print("\nDatabase initialized!")
            print(f"Login email: {user.email}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
