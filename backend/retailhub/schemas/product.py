from typing import Any, Dict, Optional
from pydantic import BaseModel


class ProductCreate(BaseModel):
    name: Optional[str] = None
    category_id: Optional[int] = None
    attributes: Dict[str, Any] = {}


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    category_id: Optional[int] = None
    attributes: Optional[Dict[str, Any]] = None


class ProductResponse(BaseModel):
    id: int
    name: str
    category_id: Optional[int] = None
    attributes: Dict[str, Any] = {}

    class Config:
        from_attributes = True
