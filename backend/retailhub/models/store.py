from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from retailhub.db.base import Base

STORE_TYPE_STORE = "Store"
STORE_TYPE_WAREHOUSE = "Warehouse"
STORE_TYPES = (STORE_TYPE_STORE, STORE_TYPE_WAREHOUSE)


class Store(Base):
    """An outlet or the warehouse. Inventory `location` holds the store name."""
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    location = Column(String(512), nullable=True)  # street address
    type = Column(String(32), nullable=False, default=STORE_TYPE_STORE)
    is_online = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
