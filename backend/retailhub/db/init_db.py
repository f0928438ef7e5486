"""Create all tables. Run on app startup.

The first start creates a super_admin with a random password printed once;
change it after the first login.
"""
import logging
import secrets

from retailhub.db.base import Base
from retailhub.db.session import engine, SessionLocal
from retailhub import models  # noqa: F401 - register models
from retailhub.models.user import User
from retailhub.core.permissions import SUPER_ADMIN
from retailhub.core.security import get_password_hash

logger = logging.getLogger(__name__)


def init_db():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if db.query(User).count() == 0:
            default_password = secrets.token_urlsafe(16)
            db.add(User(
                email="admin@retailhub.example.com",
                hashed_password=get_password_hash(default_password),
                full_name="Administrator",
                role=SUPER_ADMIN,
            ))
            db.commit()
            logger.warning("Default super_admin created: admin@retailhub.example.com")

            print("\n" + "=" * 70)
            print("DEFAULT ADMIN USER CREATED")
            print("=" * 70)
            print("Email:    admin@retailhub.example.com")
            print(f"Password: {default_password}")
            print("\nChange this password immediately after first login!")
            print("=" * 70 + "\n")
    finally:
        db.close()
