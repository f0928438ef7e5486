"""Product fields: custom attributes products can carry."""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from retailhub.api.deps import get_db, get_current_user, require_roles
from retailhub.core.permissions import CATALOG_ADMINS
from retailhub.models.user import User
from retailhub.schemas.field import FieldCreate, FieldUpdate, FieldResponse
from retailhub.services import catalog_service

router = APIRouter()


@router.get("", response_model=List[FieldResponse])
def list_fields(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return catalog_service.field_store(db).list_all()


@router.post("", response_model=FieldResponse, status_code=201)
def create_field(data: FieldCreate, db: Session = Depends(get_db), _: User = Depends(require_roles(*CATALOG_ADMINS))):
    return catalog_service.create_field(db, data.name, data.type, data.mode)


@router.put("/{field_id}", response_model=FieldResponse)
def update_field(
    field_id: int,
    data: FieldUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    return catalog_service.update_field(db, field_id, data.model_dump(exclude_unset=True))


@router.delete("/{field_id}")
def delete_field(field_id: int, db: Session = Depends(get_db), _: User = Depends(require_roles(*CATALOG_ADMINS))):
    catalog_service.field_store(db).delete(field_id)
    return {"message": "Field deleted successfully", "id": field_id}
