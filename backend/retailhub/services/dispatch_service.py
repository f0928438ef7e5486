"""
Stock transfer between stores.

dispatch: available units at the source become in-transit, one Dispatch row
per unit. receive: the destination scans a unit in, it becomes available
there and the Dispatch row completes. Each call is one transaction.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from retailhub.core.audit import AuditLog
from retailhub.core.exceptions import PersistenceFailure, RecordNotFound, ValidationFailed
from retailhub.models.dispatch import Dispatch, DISPATCH_COMPLETED, DISPATCH_IN_TRANSIT
from retailhub.models.inventory import InventoryItem, STATUS_AVAILABLE, STATUS_IN_TRANSIT
from retailhub.models.store import Store

logger = logging.getLogger(__name__)


def _get_store(db: Session, store_id: int) -> Store:
    store = db.get(Store, store_id)
    if store is None:
        raise RecordNotFound("Store", store_id)
    return store


def _pick_units(db: Session, source: Store, barcodes: List[str], products: List[Dict]) -> List[InventoryItem]:
    picked: List[InventoryItem] = []
    picked_ids = set()

    for barcode in barcodes:
        item = db.query(InventoryItem).filter(InventoryItem.barcode == barcode.strip()).first()
        if item is None:
            raise ValidationFailed(f"Barcode {barcode} not found in inventory")
        if item.location != source.name or item.status != STATUS_AVAILABLE:
            raise ValidationFailed(f"Barcode {barcode} is not available at {source.name}")
        if item.id not in picked_ids:
            picked.append(item)
            picked_ids.add(item.id)

    for line in products:
        product_id, quantity = line["product_id"], int(line["quantity"])
        if quantity <= 0:
            continue
        q = db.query(InventoryItem).filter(
            InventoryItem.product_id == product_id,
            InventoryItem.location == source.name,
            InventoryItem.status == STATUS_AVAILABLE,
        )
        if picked_ids:
            q = q.filter(InventoryItem.id.notin_(picked_ids))
        units = q.order_by(InventoryItem.id).limit(quantity).all()
        if len(units) < quantity:
            raise ValidationFailed(
                f"Not enough stock for product {product_id}. "
                f"Available: {len(units)}, Requested: {quantity}"
            )
        picked.extend(units)
        picked_ids.update(unit.id for unit in units)

    return picked


def dispatch_stock(db: Session, from_store_id: int, to_store_id: int,
                   barcodes: Optional[List[str]] = None, products: Optional[List[Dict]] = None,
                   user=None) -> List[Dispatch]:
    """Send units from one store to another. Nothing is written unless every unit qualifies."""
    if from_store_id == to_store_id:
        raise ValidationFailed("Source and destination store must differ")
    source = _get_store(db, from_store_id)
    destination = _get_store(db, to_store_id)

    units = _pick_units(db, source, barcodes or [], products or [])
    if not units:
        raise ValidationFailed("Please scan items or select products with valid quantities to transfer")

    records = []
    for unit in units:
        records.append(Dispatch(
            inventory_id=unit.id,
            product_id=unit.product_id,
            barcode=unit.barcode,
            from_store_id=source.id,
            from_store=source.name,
            to_store_id=destination.id,
            to_store=destination.name,
            status=DISPATCH_IN_TRANSIT,
            dispatched_by=user.id if user is not None else None,
        ))
        unit.status = STATUS_IN_TRANSIT
        unit.location = f"In Transit to {destination.name}"
    db.add_all(records)

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceFailure("Failed to transfer stock", e) from e

    for record in records:
        db.refresh(record)
    AuditLog.log_action("dispatch", "store", source.id, user, changes={
        "to_store": destination.name, "units": [unit.barcode for unit in units],
    })
    logger.info(f"[DISPATCH] {len(records)} units from {source.name} to {destination.name}")
    return records


def receive_unit(db: Session, store_id: int, barcode: str, user=None) -> Dispatch:
    """Scan an in-transit unit in at its destination store."""
    barcode = (barcode or "").strip()
    if not barcode:
        raise ValidationFailed("Barcode is required")
    store = _get_store(db, store_id)

    record = (
        db.query(Dispatch)
        .filter(
            Dispatch.barcode == barcode,
            Dispatch.to_store_id == store.id,
            Dispatch.status == DISPATCH_IN_TRANSIT,
        )
        .order_by(Dispatch.id.desc())
        .first()
    )
    if record is None:
        raise RecordNotFound("Upcoming stock", barcode)

    unit = db.get(InventoryItem, record.inventory_id)
    unit.status = STATUS_AVAILABLE
    unit.location = store.name
    record.status = DISPATCH_COMPLETED
    record.received_at = datetime.now(timezone.utc)

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceFailure("Failed to admit product to store", e) from e

    db.refresh(record)
    AuditLog.log_action("receive", "inventory", unit.id, user, changes={"barcode": barcode, "store": store.name})
    return record


def list_dispatches(db: Session, from_store: Optional[str] = None, to_store: Optional[str] = None,
                    status: Optional[str] = None) -> List[Dispatch]:
    q = db.query(Dispatch)
    if from_store:
        q = q.filter(Dispatch.from_store == from_store)
    if to_store:
        q = q.filter(Dispatch.to_store == to_store)
    if status:
        q = q.filter(Dispatch.status == status)
    return q.order_by(Dispatch.id.desc()).all()
