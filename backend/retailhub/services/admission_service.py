"""
Batch admission: turning a purchase lot into barcoded inventory units.

FLOW (one call per scan or typed code):
1. Reject an empty code
2. Reject when the batch is already fully admitted (terminal state)
3. Reject a barcode that exists anywhere in inventory
4. Accept the expected next code, or any code carrying the batch base code
5. Create the inventory unit at the warehouse and commit
6. On the last unit, flag the batch admitted (best-effort, separate commit)

The expected code is only a suggestion: any code with the batch prefix is
accepted out of order, and repeated codes are stopped by the barcode check.

CONCURRENCY: the unit insert also bumps the batch version (optimistic lock).
Two scanners that read the same admitted count cannot both commit; the
loser gets AdmissionConflict and scans again.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from retailhub.core.audit import AuditLog
from retailhub.core.exceptions import (
    AdmissionConflict,
    CodeMismatch,
    DuplicateBarcode,
    PersistenceFailure,
    RecordNotFound,
    ValidationFailed,
)
from retailhub.models.batch import Batch, ADMITTED_YES
from retailhub.models.inventory import InventoryItem, STATUS_AVAILABLE
from retailhub.services.batch_service import admitted_count, unit_code
from retailhub.services.store_service import resolve_warehouse_location

logger = logging.getLogger(__name__)

STATE_ACTIVE = "active"
STATE_TERMINAL = "terminal"


@dataclass
class AdmissionState:
    batch_id: int
    base_code: str
    quantity: int
    admitted_count: int

    @property
    def state(self) -> str:
        return STATE_TERMINAL if self.admitted_count >= self.quantity else STATE_ACTIVE

    @property
    def remaining(self) -> int:
        return max(self.quantity - self.admitted_count, 0)

    @property
    def expected_code(self) -> Optional[str]:
        if self.state == STATE_TERMINAL:
            return None
        return unit_code(self.base_code, self.admitted_count + 1)


@dataclass
class AdmissionResult:
    item: InventoryItem
    state: AdmissionState
    # False when the last unit was saved but the batch flag could not be saved
    batch_flag_persisted: bool = True

    @property
    def message(self) -> str:
        if self.state.state == STATE_TERMINAL:
            return "All products from this batch have been admitted!"
        return f"Product {self.item.barcode} admitted successfully!"


def _write_admitted_flag(db: Session, batch: Batch):
    batch.admitted = ADMITTED_YES
    db.commit()


class BatchAdmission:
    """Admission state machine for one batch. State is re-read from the database on every call."""

    def __init__(self, db: Session, batch_id: int):
        self.db = db
        self.batch_id = batch_id

    def _load_batch(self, for_update: bool = False) -> Batch:
        q = self.db.query(Batch).filter(Batch.id == self.batch_id)
        if for_update:
            q = q.with_for_update()
        batch = q.first()
        if batch is None:
            raise RecordNotFound("Batch", self.batch_id)
        return batch

    def _state_for(self, batch: Batch) -> AdmissionState:
        return AdmissionState(
            batch_id=batch.id,
            base_code=batch.base_code,
            quantity=batch.quantity,
            admitted_count=admitted_count(self.db, batch.id),
        )

    def state(self) -> AdmissionState:
        return self._state_for(self._load_batch())

    def submit(self, code: Optional[str], user=None) -> AdmissionResult:
        code = (code or "").strip()
        if not code:
            raise ValidationFailed("Product code is required")

        batch = self._load_batch(for_update=True)
        current = self._state_for(batch)
        if current.state == STATE_TERMINAL:
            raise ValidationFailed(f"All units of batch {batch.base_code} have already been admitted")

        # Barcodes are unique across the whole store, not only this batch
        if self.db.query(InventoryItem.id).filter(InventoryItem.barcode == code).first():
            raise DuplicateBarcode(code)

        if code != current.expected_code and not code.startswith(batch.base_code):
            raise CodeMismatch(code, batch.base_code)

        item = InventoryItem(
            product_id=batch.product_id,
            batch_id=batch.id,
            barcode=code,
            cost_price=batch.cost_price,
            selling_price=batch.selling_price,
            location=resolve_warehouse_location(self.db),
            status=STATUS_AVAILABLE,
            admitted_at=datetime.now(timezone.utc),
        )
        self.db.add(item)
        batch.last_admitted_at = item.admitted_at  # bumps batch.version

        try:
            self.db.commit()
        except StaleDataError as e:
            self.db.rollback()
            logger.info(f"[ADMISSION] Concurrent admission on batch {self.batch_id}: {e}")
            raise AdmissionConflict(
                "This batch was updated by another scan. Please scan the code again."
            ) from e
        except IntegrityError as e:
            # Lost a race against another scan of the same barcode
            self.db.rollback()
            raise DuplicateBarcode(code) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailure("Failed to admit product", e) from e

        self.db.refresh(item)
        state = self._state_for(batch)
        AuditLog.log_action("admit", "inventory", item.id, user, changes={
            "barcode": code, "batch_id": batch.id, "location": item.location,
        })
        logger.info(f"[ADMISSION] {code} admitted ({state.admitted_count}/{state.quantity})")

        flag_persisted = True
        if state.state == STATE_TERMINAL:
            flag_persisted = self._complete(batch, user)

        return AdmissionResult(item=item, state=state, batch_flag_persisted=flag_persisted)

    def _complete(self, batch: Batch, user=None) -> bool:
        """Flag the batch admitted. Failure is reported, the admitted unit stays."""
        try:
            _write_admitted_flag(self.db, batch)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"[ADMISSION] Batch {self.batch_id} fully admitted but its status was not saved: {e}",
                exc_info=True,
            )
            return False
        AuditLog.log_action("complete", "batch", self.batch_id, user, changes={"admitted": ADMITTED_YES})
        return True
