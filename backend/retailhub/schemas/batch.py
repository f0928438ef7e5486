from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel


class BatchCreate(BaseModel):
    product_id: Optional[int] = None
    cost_price: Optional[Decimal] = None
    selling_price: Optional[Decimal] = None
    quantity: Optional[int] = None


class BatchUpdate(BaseModel):
    cost_price: Optional[Decimal] = None
    selling_price: Optional[Decimal] = None
    quantity: Optional[int] = None


class BatchResponse(BaseModel):
    id: int
    base_code: str
    product_id: int
    cost_price: Decimal
    selling_price: Decimal
    quantity: int
    admitted: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BatchCodes(BaseModel):
    batch_id: int
    base_code: str
    codes: List[str]
