"""
Dispatch: one unit travelling between two stores.
Status flow: in-transit -> completed (when scanned in at the destination).
"""
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.sql import func
from retailhub.db.base import Base

DISPATCH_IN_TRANSIT = "in-transit"
DISPATCH_COMPLETED = "completed"


class Dispatch(Base):
    __tablename__ = "dispatches"

    id = Column(Integer, primary_key=True, index=True)
    inventory_id = Column(Integer, ForeignKey("inventory_items.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    barcode = Column(String(128), nullable=False, index=True)
    from_store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    from_store = Column(String(255), nullable=False)  # names kept for the history view
    to_store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    to_store = Column(String(255), nullable=False)
    status = Column(String(32), nullable=False, default=DISPATCH_IN_TRANSIT)
    dispatched_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    dispatched_at = Column(DateTime(timezone=True), server_default=func.now())
    received_at = Column(DateTime(timezone=True), nullable=True)
