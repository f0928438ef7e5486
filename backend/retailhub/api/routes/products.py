"""Products."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from retailhub.api.deps import get_db, get_current_user, require_roles
from retailhub.core.audit import AuditLog
from retailhub.core.permissions import CATALOG_ADMINS
from retailhub.models.product import Product
from retailhub.models.user import User
from retailhub.schemas.product import ProductCreate, ProductUpdate, ProductResponse
from retailhub.services import catalog_service

router = APIRouter()


@router.get("", response_model=List[ProductResponse])
def list_products(
    search: Optional[str] = Query(None),
    category_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    q = catalog_service.product_store(db).query(category_id=category_id)
    if search:
        q = q.filter(Product.name.ilike(f"%{search}%"))
    return q.order_by(Product.name).all()


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return catalog_service.product_store(db).get(product_id)


@router.post("", response_model=ProductResponse, status_code=201)
def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    product = catalog_service.create_product(db, data.name, data.category_id, data.attributes)
    AuditLog.log_action("create", "product", product.id, current_user, changes={"name": product.name})
    return product


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    patch = data.model_dump(exclude_unset=True)
    product = catalog_service.update_product(db, product_id, patch)
    AuditLog.log_action("update", "product", product.id, current_user, changes=patch)
    return product


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    catalog_service.delete_product(db, product_id)
    AuditLog.log_action("delete", "product", product_id, current_user)
    return {"message": "Product deleted successfully", "id": product_id}
