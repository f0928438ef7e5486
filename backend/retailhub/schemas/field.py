from typing import Optional
from pydantic import BaseModel


class FieldCreate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    mode: str = "Single"


class FieldUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    mode: Optional[str] = None


class FieldResponse(BaseModel):
    id: int
    name: str
    type: str
    mode: str

    class Config:
        from_attributes = True
