"""Stock transfers between stores."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from retailhub.api.deps import get_db, require_roles
from retailhub.core.exceptions import BusinessError
from retailhub.core.permissions import STOCK_HANDLERS, user_can_handle_store
from retailhub.models.user import User
from retailhub.schemas.dispatch import DispatchResponse, ReceiveRequest, TransferRequest
from retailhub.services import dispatch_service

router = APIRouter()


@router.get("", response_model=List[DispatchResponse])
def list_dispatches(
    from_store: Optional[str] = Query(None),
    to_store: Optional[str] = Query(None),
    status: Optional[str] = Query(None, description="in-transit or completed"),
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*STOCK_HANDLERS)),
):
    return dispatch_service.list_dispatches(db, from_store=from_store, to_store=to_store, status=status)


@router.post("", response_model=List[DispatchResponse], status_code=201)
def transfer_stock(
    data: TransferRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STOCK_HANDLERS)),
):
    """Send scanned units and/or a quantity per product to another store."""
    if not user_can_handle_store(current_user, data.from_store_id):
        raise BusinessError.forbidden(f"user {current_user.id} dispatching from store {data.from_store_id}")
    return dispatch_service.dispatch_stock(
        db,
        data.from_store_id,
        data.to_store_id,
        barcodes=data.barcodes,
        products=[line.model_dump() for line in data.products],
        user=current_user,
    )


@router.post("/receive", response_model=DispatchResponse)
def receive_stock(
    data: ReceiveRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STOCK_HANDLERS)),
):
    """Scan an incoming unit in at the destination store."""
    if not user_can_handle_store(current_user, data.store_id):
        raise BusinessError.forbidden(f"user {current_user.id} receiving at store {data.store_id}")
    return dispatch_service.receive_unit(db, data.store_id, data.barcode, user=current_user)
