from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from retailhub.db.base import Base

STATUS_AVAILABLE = "available"
STATUS_DAMAGED = "damaged"
STATUS_IN_TRANSIT = "in-transit"
STATUS_SOLD = "sold"
INVENTORY_STATUSES = (STATUS_AVAILABLE, STATUS_DAMAGED, STATUS_IN_TRANSIT, STATUS_SOLD)


class InventoryItem(Base):
    """
    One physical unit, identified by its barcode.

    Barcodes are unique store-wide; the UNIQUE constraint backs the
    duplicate check done during admission.
    """
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=True, index=True)
    barcode = Column(String(128), nullable=False, unique=True, index=True)
    cost_price = Column(Numeric(12, 2), nullable=False)  # snapshot from batch
    selling_price = Column(Numeric(12, 2), nullable=False)
    location = Column(String(255), nullable=False)  # store name or "In Transit to <store>"
    status = Column(String(32), nullable=False, default=STATUS_AVAILABLE)
    admitted_at = Column(DateTime(timezone=True), server_default=func.now())
    sold_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    product = relationship("Product")
    batch = relationship("Batch")
