"""Stores: outlets and the warehouse."""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from retailhub.api.deps import get_db, get_current_user, require_roles
from retailhub.core.audit import AuditLog
from retailhub.core.exceptions import ValidationFailed
from retailhub.core.permissions import CATALOG_ADMINS
from retailhub.models.store import Store
from retailhub.models.user import User
from retailhub.schemas.store import StoreCreate, StoreUpdate, StoreResponse
from retailhub.services.record_store import RecordStore
from retailhub.services.store_service import normalize_store_type

router = APIRouter()


def _stores(db: Session) -> RecordStore[Store]:
    return RecordStore(db, Store, "Store")


@router.get("", response_model=List[StoreResponse])
def list_stores(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return _stores(db).list_all()


@router.get("/{store_id}", response_model=StoreResponse)
def get_store(store_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return _stores(db).get(store_id)


@router.post("", response_model=StoreResponse, status_code=201)
def create_store(
    data: StoreCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    if not data.name.strip():
        raise ValidationFailed("Store name is required")
    store = _stores(db).create(
        name=data.name.strip(),
        location=data.location,
        type=normalize_store_type(data.type),
        is_online=data.is_online,
    )
    AuditLog.log_action("create", "store", store.id, current_user, changes={"name": store.name, "type": store.type})
    return store


@router.put("/{store_id}", response_model=StoreResponse)
def update_store(
    store_id: int,
    data: StoreUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    """Update; fields not sent keep their value."""
    patch = data.model_dump(exclude_unset=True, exclude_none=True)
    if "type" in patch:
        patch["type"] = normalize_store_type(patch["type"])
    if "name" in patch:
        if not patch["name"].strip():
            raise ValidationFailed("Store name is required")
        patch["name"] = patch["name"].strip()
    store = _stores(db).update(store_id, patch)
    AuditLog.log_action("update", "store", store.id, current_user, changes=patch)
    return store


@router.delete("/{store_id}")
def delete_store(
    store_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    store = _stores(db).delete(store_id)
    AuditLog.log_action("delete", "store", store_id, current_user)
    return {"message": f"Deleted {store.name}", "id": store_id}
