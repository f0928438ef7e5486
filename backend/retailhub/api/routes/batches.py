"""Batches: purchase lots, their label codes, and unit-by-unit admission."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from retailhub.api.deps import get_db, get_current_user, require_roles
from retailhub.core.audit import AuditLog
from retailhub.core.permissions import CATALOG_ADMINS, STOCK_HANDLERS
from retailhub.models.batch import Batch
from retailhub.models.user import User
from retailhub.schemas.admission import (
    AdmissionResultResponse,
    AdmissionStateResponse,
    AdmissionSubmit,
)
from retailhub.schemas.batch import BatchCreate, BatchUpdate, BatchResponse, BatchCodes
from retailhub.services import batch_service
from retailhub.services.admission_service import AdmissionState, BatchAdmission

router = APIRouter()


def _state_response(state: AdmissionState) -> AdmissionStateResponse:
    return AdmissionStateResponse(
        batch_id=state.batch_id,
        base_code=state.base_code,
        quantity=state.quantity,
        admitted_count=state.admitted_count,
        remaining=state.remaining,
        expected_code=state.expected_code,
        state=state.state,
    )


@router.get("", response_model=List[BatchResponse])
def list_batches(
    admitted: Optional[str] = Query(None, description="'no' lists batches waiting for admission"),
    product_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    q = db.query(Batch)
    if admitted:
        q = q.filter(Batch.admitted == admitted)
    if product_id is not None:
        q = q.filter(Batch.product_id == product_id)
    return q.order_by(Batch.id.desc()).all()


@router.get("/{batch_id}", response_model=BatchResponse)
def get_batch(batch_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return batch_service.get_batch(db, batch_id)


@router.post("", response_model=BatchResponse, status_code=201)
def create_batch(
    data: BatchCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    batch = batch_service.create_batch(db, data.product_id, data.cost_price, data.selling_price, data.quantity)
    AuditLog.log_action("create", "batch", batch.id, current_user, changes={
        "base_code": batch.base_code, "quantity": batch.quantity,
    })
    return batch


@router.patch("/{batch_id}", response_model=BatchResponse)
def update_batch(
    batch_id: int,
    data: BatchUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    patch = data.model_dump(exclude_unset=True)
    batch = batch_service.update_batch(db, batch_id, patch)
    AuditLog.log_action("update", "batch", batch.id, current_user, changes=patch)
    return batch


@router.delete("/{batch_id}")
def delete_batch(
    batch_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    """Only batches with no admitted units can be deleted."""
    batch_service.delete_batch(db, batch_id)
    AuditLog.log_action("delete", "batch", batch_id, current_user)
    return {"message": "Batch deleted", "id": batch_id}


@router.get("/{batch_id}/codes", response_model=BatchCodes)
def get_label_codes(batch_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    """Every unit label of the batch, for the label printer."""
    batch = batch_service.get_batch(db, batch_id)
    return BatchCodes(batch_id=batch.id, base_code=batch.base_code, codes=batch_service.label_codes(batch))


@router.get("/{batch_id}/admission", response_model=AdmissionStateResponse)
def get_admission_state(
    batch_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*STOCK_HANDLERS)),
):
    """Progress of the batch and the code expected next."""
    return _state_response(BatchAdmission(db, batch_id).state())


@router.post("/{batch_id}/admission", response_model=AdmissionResultResponse, status_code=201)
def submit_admission_code(
    batch_id: int,
    data: AdmissionSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STOCK_HANDLERS)),
):
    """
    Admit one unit by scanned or typed code.

    400: empty code, wrong batch prefix, batch already complete
    409: barcode already admitted, or another scan won the race
    """
    result = BatchAdmission(db, batch_id).submit(data.code, user=current_user)
    return AdmissionResultResponse(
        message=result.message,
        item=result.item,
        admission=_state_response(result.state),
        batch_flag_persisted=result.batch_flag_persisted,
    )
