"""Shared fixtures: in-memory database, seeded catalog, API client per role."""
import os

# Settings are read at import time
os.environ["ALLOWED_HOSTS"] = "testserver,localhost,127.0.0.1"
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from retailhub import models  # noqa: F401 - register models
from retailhub.api.deps import get_db
from retailhub.core.permissions import SOCIAL_COMMERCE_MANAGER, STORE_MANAGER, SUPER_ADMIN
from retailhub.core.security import create_access_token
from retailhub.db.base import Base
from retailhub.db.session import enable_sqlite_foreign_keys
from retailhub.main import app
from retailhub.models.batch import Batch
from retailhub.models.product import Product
from retailhub.models.store import Store, STORE_TYPE_STORE, STORE_TYPE_WAREHOUSE
from retailhub.models.user import User
from retailhub.services import batch_service

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "Str0ng!Passw0rd"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def product(db) -> Product:
    record = Product(name="Cotton T-Shirt", attributes={"Size": ["M", "L"]})
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def make_batch(db, product):
    """Factory: a fresh batch of `quantity` units of the fixture product."""
    def _make(quantity: int = 2, cost_price: str = "100.00", selling_price: str = "150.00") -> Batch:
        return batch_service.create_batch(db, product.id, cost_price, selling_price, quantity)

    return _make


@pytest.fixture
def warehouse(db) -> Store:
    store = Store(name="Central Warehouse", type=STORE_TYPE_WAREHOUSE)
    db.add(store)
    db.commit()
    db.refresh(store)
    return store


@pytest.fixture
def outlet(db) -> Store:
    store = Store(name="Dhanmondi", type=STORE_TYPE_STORE)
    db.add(store)
    db.commit()
    db.refresh(store)
    return store


def _user(db, email: str, role: str, store_id=None) -> User:
    # Token-based fixtures skip bcrypt; only the login test needs a real hash
    user = User(email=email, hashed_password="not-a-bcrypt-hash", role=role, store_id=store_id)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db) -> User:
    return _user(db, "admin@example.com", SUPER_ADMIN)


@pytest.fixture
def manager(db) -> User:
    return _user(db, "manager@example.com", STORE_MANAGER)


@pytest.fixture
def social_manager(db) -> User:
    return _user(db, "social@example.com", SOCIAL_COMMERCE_MANAGER)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=str(user.id))}"}


@pytest.fixture
def client(db):
    """TestClient sharing the fixture engine; the lifespan (init_db) is not run."""
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
