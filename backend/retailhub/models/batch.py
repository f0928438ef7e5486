"""
Batch: one purchase lot of a single product.

Status flow: admitted "no" -> "yes" once every unit has an inventory record.
`version` is an optimistic concurrency token; every accepted admission
bumps it so two scanners racing on the last slot cannot both commit.
"""
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from retailhub.db.base import Base

ADMITTED_NO = "no"
ADMITTED_YES = "yes"
BASE_CODE_PREFIX = "BATCH"


class Batch(Base):
    __tablename__ = "batches"

    id = Column(Integer, primary_key=True, index=True)
    base_code = Column(String(64), unique=True, nullable=True)  # BATCH<id>, set right after insert
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    cost_price = Column(Numeric(12, 2), nullable=False)
    selling_price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    admitted = Column(String(8), nullable=False, default=ADMITTED_NO)
    last_admitted_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship("Product")

    __mapper_args__ = {"version_id_col": version}
