"""Inventory units: listing, manual entry, status changes, stock summary."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from retailhub.api.deps import get_db, get_current_user, require_roles
from retailhub.core.audit import AuditLog
from retailhub.core.permissions import STOCK_HANDLERS
from retailhub.models.user import User
from retailhub.schemas.inventory import InventoryCreate, InventoryUpdate, InventoryResponse, ProductStock
from retailhub.services import inventory_service

router = APIRouter()


@router.get("", response_model=List[InventoryResponse])
def list_inventory(
    batch_id: Optional[int] = Query(None),
    product_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    barcode: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return inventory_service.inventory_store(db).list_all(
        batch_id=batch_id, product_id=product_id, status=status, location=location, barcode=barcode,
    )


@router.get("/summary", response_model=List[ProductStock])
def get_stock_summary(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    """Stock per product and outlet for the inventory overview."""
    return inventory_service.stock_summary(db)


@router.get("/{item_id}", response_model=InventoryResponse)
def get_inventory_item(item_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return inventory_service.inventory_store(db).get(item_id)


@router.post("", response_model=InventoryResponse, status_code=201)
def create_inventory_item(
    data: InventoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STOCK_HANDLERS)),
):
    item = inventory_service.add_item(db, data.model_dump())
    AuditLog.log_action("create", "inventory", item.id, current_user, changes={"barcode": item.barcode})
    return item


@router.patch("/{item_id}", response_model=InventoryResponse)
def update_inventory_item(
    item_id: int,
    data: InventoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STOCK_HANDLERS)),
):
    """Change status (sold, damaged, ...), location or prices of one unit."""
    patch = data.model_dump(exclude_unset=True)
    item = inventory_service.update_item(db, item_id, patch)
    AuditLog.log_action("update", "inventory", item.id, current_user, changes=patch)
    return item


@router.delete("/{item_id}")
def delete_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STOCK_HANDLERS)),
):
    """Remove a unit; its batch loses the admitted flag if it had it."""
    item = inventory_service.delete_item(db, item_id)
    AuditLog.log_action("delete", "inventory", item_id, current_user, changes={"barcode": item.barcode})
    return {"success": True, "message": "Inventory item deleted", "id": item_id}
