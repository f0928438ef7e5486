"""Inventory units outside admission: manual entry, status changes, stock summary.

Units that reference a batch count towards its quantity. Manual entry and
delete lock the batch row and keep `admitted` equal to "yes" exactly when
the unit count reaches quantity, in the same commit as the unit change.
"""
import logging
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from retailhub.core.exceptions import (
    AdmissionConflict,
    DuplicateBarcode,
    PersistenceFailure,
    RecordNotFound,
    ValidationFailed,
)
from retailhub.models.inventory import (
    InventoryItem,
    INVENTORY_STATUSES,
    STATUS_AVAILABLE,
    STATUS_DAMAGED,
    STATUS_IN_TRANSIT,
    STATUS_SOLD,
)
from retailhub.models.batch import Batch, ADMITTED_NO, ADMITTED_YES
from retailhub.models.product import Product
from retailhub.services.batch_service import admitted_count
from retailhub.services.category_service import CategoryTree
from retailhub.services.record_store import RecordStore
from retailhub.services.store_service import resolve_warehouse_location

logger = logging.getLogger(__name__)


def inventory_store(db: Session) -> RecordStore[InventoryItem]:
    return RecordStore(db, InventoryItem, "Inventory item")


def check_status(status: str) -> str:
    if status not in INVENTORY_STATUSES:
        raise ValidationFailed(f"Status must be one of: {', '.join(INVENTORY_STATUSES)}")
    return status


def _lock_batch(db: Session, batch_id: int) -> Batch:
    batch = db.query(Batch).filter(Batch.id == batch_id).with_for_update().first()
    if batch is None:
        raise RecordNotFound("Batch", batch_id)
    return batch


def _set_unit_count(batch: Batch, count: int):
    """Set `admitted` from the unit count the pending change leaves behind."""
    batch.admitted = ADMITTED_YES if count == batch.quantity else ADMITTED_NO
    batch.last_admitted_at = datetime.now(timezone.utc)  # bumps batch.version


def _commit_unit_change(db: Session, operation: str, barcode: str):
    try:
        db.commit()
    except StaleDataError as e:
        db.rollback()
        raise AdmissionConflict(
            "This batch was updated by another scan. Please try again."
        ) from e
    except IntegrityError as e:
        db.rollback()
        raise DuplicateBarcode(barcode) from e
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceFailure(f"Failed to {operation} inventory item", e) from e


def add_item(db: Session, data: Dict) -> InventoryItem:
    """
    Manual entry of a unit (stock taken over from outside the batch flow).

    With a batch_id the unit takes one of the batch's remaining slots; a full
    batch is rejected.
    """
    barcode = (data.get("barcode") or "").strip()
    if not data.get("product_id") or not barcode or not data.get("cost_price") or not data.get("selling_price"):
        raise ValidationFailed("Missing required fields")
    if db.get(Product, data["product_id"]) is None:
        raise RecordNotFound("Product", data["product_id"])

    batch = None
    if data.get("batch_id") is not None:
        batch = _lock_batch(db, data["batch_id"])
        if batch.product_id != data["product_id"]:
            raise ValidationFailed(f"Batch {batch.base_code} holds a different product")
        units_before = admitted_count(db, batch.id)
        if units_before >= batch.quantity:
            raise ValidationFailed(
                f"All {batch.quantity} units of batch {batch.base_code} are already in inventory"
            )

    if inventory_store(db).find(barcode=barcode):
        raise DuplicateBarcode(barcode)

    item = InventoryItem(
        product_id=data["product_id"],
        batch_id=batch.id if batch is not None else None,
        barcode=barcode,
        cost_price=Decimal(str(data["cost_price"])),
        selling_price=Decimal(str(data["selling_price"])),
        location=data.get("location") or resolve_warehouse_location(db),
        status=check_status(data.get("status") or STATUS_AVAILABLE),
        admitted_at=datetime.now(timezone.utc),
    )
    db.add(item)
    if batch is not None:
        _set_unit_count(batch, units_before + 1)
    _commit_unit_change(db, "save", barcode)
    db.refresh(item)
    return item


def delete_item(db: Session, item_id: int) -> InventoryItem:
    """Remove a unit. Its batch, if any, drops back to not admitted."""
    item = inventory_store(db).get(item_id)
    barcode = item.barcode
    if item.batch_id is not None:
        batch = _lock_batch(db, item.batch_id)
        _set_unit_count(batch, admitted_count(db, batch.id) - 1)
    db.delete(item)
    _commit_unit_change(db, "delete", barcode)
    logger.info(f"[INVENTORY] Deleted {barcode}")
    return item


def update_item(db: Session, item_id: int, patch: Dict) -> InventoryItem:
    """Partial update. Marking a unit sold stamps sold_at."""
    patch = {k: v for k, v in patch.items() if v is not None}
    if "barcode" in patch:
        raise ValidationFailed("Barcode cannot be changed")
    if "status" in patch:
        check_status(patch["status"])
        if patch["status"] == STATUS_SOLD:
            patch.setdefault("sold_at", datetime.now(timezone.utc))
    for name in ("cost_price", "selling_price"):
        if name in patch:
            patch[name] = Decimal(str(patch[name]))
    return inventory_store(db).update(item_id, patch)


def stock_summary(db: Session) -> List[Dict]:
    """
    Per product: category path, total available units, and per location the
    counts of available, damaged and in-transit units. Sold units are skipped.
    """
    category_paths = CategoryTree(db).paths()
    products = db.query(Product).order_by(Product.name).all()
    items = db.query(InventoryItem).filter(InventoryItem.status != STATUS_SOLD).all()

    per_product = defaultdict(list)
    for item in items:
        per_product[item.product_id].append(item)

    summary = []
    for product in products:
        outlets = defaultdict(lambda: {"available": 0, "damaged": 0, "in_transit": 0})
        for item in per_product.get(product.id, []):
            counts = outlets[item.location]
            if item.status == STATUS_AVAILABLE:
                counts["available"] += 1
            elif item.status == STATUS_DAMAGED:
                counts["damaged"] += 1
            elif item.status == STATUS_IN_TRANSIT:
                counts["in_transit"] += 1
        summary.append({
            "product_id": product.id,
            "product_name": product.name,
            "category": category_paths.get(product.category_id, ""),
            "total_stock": sum(c["available"] for c in outlets.values()),
            "outlets": dict(outlets),
        })
    return summary
