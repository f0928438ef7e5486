"""
Generic CRUD over one model ("collection").

list_all / get / create / update / delete, each committing its own
transaction. Multi-step workflows (admission, dispatch) use the session
directly so their checks and writes share one transaction.
"""
import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from retailhub.core.exceptions import PersistenceFailure, RecordConflict, RecordNotFound

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class RecordStore(Generic[ModelT]):
    def __init__(self, db: Session, model: Type[ModelT], resource: str):
        self.db = db
        self.model = model
        self.resource = resource

    def query(self, **filters):
        q = self.db.query(self.model)
        for name, value in filters.items():
            if value is not None:
                q = q.filter(getattr(self.model, name) == value)
        return q

    def list_all(self, **filters) -> List[ModelT]:
        """All records, optionally filtered by equality; None filters are ignored."""
        return self.query(**filters).order_by(self.model.id).all()

    def get(self, record_id: int) -> ModelT:
        record = self.db.get(self.model, record_id)
        if record is None:
            raise RecordNotFound(self.resource, record_id)
        return record

    def find(self, **filters) -> Optional[ModelT]:
        return self.query(**filters).first()

    def create(self, **fields) -> ModelT:
        record = self.model(**fields)
        self.db.add(record)
        self._commit("create")
        self.db.refresh(record)
        logger.debug(f"[{self.resource}] created id={record.id}")
        return record

    def update(self, record_id: int, patch: Dict[str, Any]) -> ModelT:
        record = self.get(record_id)
        for name, value in patch.items():
            setattr(record, name, value)
        self._commit("update")
        self.db.refresh(record)
        return record

    def delete(self, record_id: int) -> ModelT:
        record = self.get(record_id)
        self.db.delete(record)
        self._commit("delete")
        return record

    def _commit(self, operation: str):
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info(f"[{self.resource}] {operation} rejected by constraint: {e.orig}")
            raise RecordConflict(f"{self.resource} conflicts with an existing record") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailure(f"Failed to {operation} {self.resource.lower()}", e) from e
