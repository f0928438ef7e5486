"""Batch lifecycle outside of admission: create, edit, delete, label codes."""
import logging
from decimal import Decimal
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from retailhub.core.exceptions import (
    PersistenceFailure,
    RecordInUse,
    RecordNotFound,
    ValidationFailed,
)
from retailhub.models.batch import Batch, ADMITTED_NO, ADMITTED_YES, BASE_CODE_PREFIX
from retailhub.models.inventory import InventoryItem
from retailhub.models.product import Product

logger = logging.getLogger(__name__)


def unit_code(base_code: str, position: int) -> str:
    """Label for the n-th unit (1-based): BATCH12-01, BATCH12-02, ... BATCH12-100."""
    return f"{base_code}-{position:02d}"


def label_codes(batch: Batch) -> List[str]:
    """Every unit label of the batch, in print order."""
    return [unit_code(batch.base_code, n) for n in range(1, batch.quantity + 1)]


def admitted_count(db: Session, batch_id: int) -> int:
    return db.query(func.count(InventoryItem.id)).filter(InventoryItem.batch_id == batch_id).scalar() or 0


def get_batch(db: Session, batch_id: int) -> Batch:
    batch = db.get(Batch, batch_id)
    if batch is None:
        raise RecordNotFound("Batch", batch_id)
    return batch


def _check_prices_and_quantity(cost_price, selling_price, quantity):
    if cost_price is not None and Decimal(str(cost_price)) <= 0:
        raise ValidationFailed("Cost price must be positive")
    if selling_price is not None and Decimal(str(selling_price)) <= 0:
        raise ValidationFailed("Selling price must be positive")
    if quantity is not None and int(quantity) <= 0:
        raise ValidationFailed("Quantity must be a positive whole number")


def create_batch(db: Session, product_id: int, cost_price, selling_price, quantity: int) -> Batch:
    """Register a purchase lot. The base code is derived from the new id."""
    if not product_id or cost_price is None or selling_price is None or not quantity:
        raise ValidationFailed("Missing batch data")
    _check_prices_and_quantity(cost_price, selling_price, quantity)
    if db.get(Product, product_id) is None:
        raise RecordNotFound("Product", product_id)

    batch = Batch(
        product_id=product_id,
        cost_price=Decimal(str(cost_price)),
        selling_price=Decimal(str(selling_price)),
        quantity=int(quantity),
        admitted=ADMITTED_NO,
    )
    try:
        db.add(batch)
        db.flush()  # assigns id
        batch.base_code = f"{BASE_CODE_PREFIX}{batch.id}"
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceFailure("Failed to save batch", e) from e
    db.refresh(batch)
    logger.info(f"[BATCH] Created {batch.base_code}: product={product_id} qty={batch.quantity}")
    return batch


def update_batch(db: Session, batch_id: int, patch: dict) -> Batch:
    """
    Edit prices or quantity. `admitted` is always recomputed so that it reads
    "yes" exactly when every unit has been admitted.
    """
    batch = get_batch(db, batch_id)
    _check_prices_and_quantity(patch.get("cost_price"), patch.get("selling_price"), patch.get("quantity"))

    count = admitted_count(db, batch.id)
    if patch.get("quantity") is not None and int(patch["quantity"]) < count:
        raise ValidationFailed(
            f"Quantity cannot be lower than the {count} units already admitted"
        )

    for name in ("cost_price", "selling_price"):
        if patch.get(name) is not None:
            setattr(batch, name, Decimal(str(patch[name])))
    if patch.get("quantity") is not None:
        batch.quantity = int(patch["quantity"])
    batch.admitted = ADMITTED_YES if count == batch.quantity else ADMITTED_NO

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceFailure("Failed to update batch", e) from e
    db.refresh(batch)
    return batch


def delete_batch(db: Session, batch_id: int) -> Batch:
    """Delete a batch nothing has been admitted from yet."""
    batch = get_batch(db, batch_id)
    base_code = batch.base_code
    count = admitted_count(db, batch.id)
    if count:
        raise RecordInUse(
            f"Batch {base_code} has {count} admitted units and cannot be deleted"
        )
    try:
        db.delete(batch)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceFailure("Failed to delete batch", e) from e
    logger.info(f"[BATCH] Deleted {base_code}")
    return batch
