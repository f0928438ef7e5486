from typing import Optional
from pydantic import AliasChoices, BaseModel, Field


class StoreCreate(BaseModel):
    # storeName / address are the names the store form posts
    name: str = Field(validation_alias=AliasChoices("name", "storeName"))
    location: Optional[str] = Field(default=None, validation_alias=AliasChoices("location", "address"))
    type: Optional[str] = None
    is_online: bool = Field(default=False, validation_alias=AliasChoices("is_online", "isOnline"))


class StoreUpdate(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    type: Optional[str] = None
    is_online: Optional[bool] = None


class StoreResponse(BaseModel):
    id: int
    name: str
    location: Optional[str] = None
    type: str
    is_online: bool = False

    class Config:
        from_attributes = True
