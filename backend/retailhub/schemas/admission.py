from typing import Optional
from pydantic import BaseModel

from retailhub.schemas.inventory import InventoryResponse


class AdmissionSubmit(BaseModel):
    code: Optional[str] = None


class AdmissionStateResponse(BaseModel):
    batch_id: int
    base_code: str
    quantity: int
    admitted_count: int
    remaining: int
    expected_code: Optional[str] = None
    state: str


class AdmissionResultResponse(BaseModel):
    message: str
    item: InventoryResponse
    admission: AdmissionStateResponse
    batch_flag_persisted: bool
