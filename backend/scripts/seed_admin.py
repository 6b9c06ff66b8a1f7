#!/usr/bin/env python3
"""
Seed script to create an admin user
Run with: python scripts/seed_admin.py <email> <password> [name]
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from agency.auth import get_password_hash
from agency.db import Base, SessionLocal, engine
from agency.models import User, Role


def seed_admin(email: str, password: str, name: str = "Admin"):
    """Create an admin user unless the email is taken"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        if db.query(User).filter(User.email == email).first():
            print("User already exists!")
            return

        db.add(User(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            role=Role.ADMIN,
            is_active=True
        ))
        db.commit()
        print(f"Admin user created: {email}")
    except Exception as e:
        print(f"Error creating admin user: {e}")
        db.rollback()
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(1)
    seed_admin(*sys.argv[1:4])
