from sqlalchemy import Column, Integer, String, ForeignKey, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from retailhub.db.base import Base


class User(Base):
    """Staff account. `role` drives what the API allows (see core.permissions)."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=True)
    role = Column(String(64), nullable=False, default="store_manager")
    store_id = Column(Integer, ForeignKey("stores.id", ondelete="SET NULL"), nullable=True)  # outlet a store manager runs
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    store = relationship("Store")
