from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel


class TransferLine(BaseModel):
    product_id: int
    quantity: int


class TransferRequest(BaseModel):
    from_store_id: int
    to_store_id: int
    barcodes: List[str] = []
    products: List[TransferLine] = []


class ReceiveRequest(BaseModel):
    store_id: int
    barcode: Optional[str] = None


class DispatchResponse(BaseModel):
    id: int
    inventory_id: int
    product_id: int
    barcode: str
    from_store_id: int
    from_store: str
    to_store_id: int
    to_store: str
    status: str
    dispatched_at: Optional[datetime] = None
    received_at: Optional[datetime] = None

    class Config:
        from_attributes = True
