from typing import Dict, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel


class InventoryCreate(BaseModel):
    product_id: Optional[int] = None
    batch_id: Optional[int] = None
    barcode: Optional[str] = None
    cost_price: Optional[Decimal] = None
    selling_price: Optional[Decimal] = None
    location: Optional[str] = None
    status: Optional[str] = None


class InventoryUpdate(BaseModel):
    cost_price: Optional[Decimal] = None
    selling_price: Optional[Decimal] = None
    location: Optional[str] = None
    status: Optional[str] = None


class InventoryResponse(BaseModel):
    id: int
    product_id: int
    batch_id: Optional[int] = None
    barcode: str
    cost_price: Decimal
    selling_price: Decimal
    location: str
    status: str
    admitted_at: Optional[datetime] = None
    sold_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OutletStock(BaseModel):
    available: int = 0
    damaged: int = 0
    in_transit: int = 0


class ProductStock(BaseModel):
    product_id: int
    product_name: str
    category: str = ""
    total_stock: int
    outlets: Dict[str, OutletStock] = {}
