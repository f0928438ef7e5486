"""Products and their custom attribute fields."""
from typing import Dict

from sqlalchemy.orm import Session

from retailhub.core.exceptions import RecordConflict, RecordInUse, RecordNotFound, ValidationFailed
from retailhub.models.batch import Batch
from retailhub.models.category import Category
from retailhub.models.field import Field, FIELD_MODES, FIELD_TYPES
from retailhub.models.inventory import InventoryItem
from retailhub.models.product import Product
from retailhub.services.record_store import RecordStore


def field_store(db: Session) -> RecordStore[Field]:
    return RecordStore(db, Field, "Field")


def product_store(db: Session) -> RecordStore[Product]:
    return RecordStore(db, Product, "Product")


def _check_field(name, type_, mode):
    if not name or not name.strip() or not type_:
        raise ValidationFailed("Field name and type are required")
    if type_ not in FIELD_TYPES:
        raise ValidationFailed(f"Field type must be one of: {', '.join(FIELD_TYPES)}")
    if mode not in FIELD_MODES:
        raise ValidationFailed(f"Selection mode must be one of: {', '.join(FIELD_MODES)}")


def create_field(db: Session, name: str, type: str, mode: str = "Single") -> Field:
    _check_field(name, type, mode)
    store = field_store(db)
    if store.find(name=name.strip()):
        raise RecordConflict(f"Field '{name.strip()}' already exists")
    return store.create(name=name.strip(), type=type, mode=mode)


def update_field(db: Session, field_id: int, patch: Dict) -> Field:
    store = field_store(db)
    current = store.get(field_id)
    merged = {
        "name": patch.get("name") or current.name,
        "type": patch.get("type") or current.type,
        "mode": patch.get("mode") or current.mode,
    }
    _check_field(merged["name"], merged["type"], merged["mode"])
    merged["name"] = merged["name"].strip()
    return store.update(field_id, merged)


def _check_category(db: Session, category_id):
    if category_id is not None and db.get(Category, category_id) is None:
        raise RecordNotFound("Category", category_id)


def create_product(db: Session, name: str, category_id=None, attributes=None) -> Product:
    if not name or not name.strip():
        raise ValidationFailed("Product name is required")
    _check_category(db, category_id)
    return product_store(db).create(name=name.strip(), category_id=category_id, attributes=attributes or {})


def update_product(db: Session, product_id: int, patch: Dict) -> Product:
    if "name" in patch and (not patch["name"] or not patch["name"].strip()):
        raise ValidationFailed("Product name is required")
    if "category_id" in patch:
        _check_category(db, patch["category_id"])
    if patch.get("name"):
        patch["name"] = patch["name"].strip()
    if "attributes" in patch and patch["attributes"] is None:
        patch["attributes"] = {}
    return product_store(db).update(product_id, patch)


def delete_product(db: Session, product_id: int) -> Product:
    store = product_store(db)
    product = store.get(product_id)
    in_batches = db.query(Batch.id).filter(Batch.product_id == product.id).count()
    in_stock = db.query(InventoryItem.id).filter(InventoryItem.product_id == product.id).count()
    if in_batches or in_stock:
        raise RecordInUse(
            f"Product '{product.name}' has {in_batches} batches and {in_stock} units and cannot be deleted"
        )
    return store.delete(product_id)
