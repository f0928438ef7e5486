"""Stores: type normalisation and warehouse lookup for admission."""
import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from retailhub.core.config import settings
from retailhub.core.exceptions import ValidationFailed
from retailhub.models.store import Store, STORE_TYPES, STORE_TYPE_STORE, STORE_TYPE_WAREHOUSE

logger = logging.getLogger(__name__)


def normalize_store_type(value: str | None) -> str:
    """'warehouse', 'WAREHOUSE ' -> 'Warehouse'. Empty means a regular outlet."""
    if not value or not value.strip():
        return STORE_TYPE_STORE
    for known in STORE_TYPES:
        if value.strip().lower() == known.lower():
            return known
    raise ValidationFailed(f"Store type must be one of: {', '.join(STORE_TYPES)}")


def resolve_warehouse_location(db: Session) -> str:
    """
    Name of the store flagged as warehouse, used as location for admitted units.

    Falls back to settings.DEFAULT_WAREHOUSE_LOCATION when no warehouse exists
    or the lookup fails; admission must not stop over a missing location.
    """
    try:
        warehouse = (
            db.query(Store)
            .filter(func.lower(Store.type) == STORE_TYPE_WAREHOUSE.lower())
            .order_by(Store.id)
            .first()
        )
    except SQLAlchemyError as e:
        logger.warning(f"[ADMISSION] Warehouse lookup failed, using default location: {e}")
        return settings.DEFAULT_WAREHOUSE_LOCATION

    if warehouse is None:
        return settings.DEFAULT_WAREHOUSE_LOCATION
    return warehouse.name
