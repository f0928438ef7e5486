from typing import List, Optional
from pydantic import BaseModel


class CategoryCreate(BaseModel):
    title: str
    slug: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[int] = None


class CategoryUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    # Present (even as null) means move; null moves to the root level
    move_to_parent_id: Optional[int] = None


class CategoryResponse(BaseModel):
    id: int
    parent_id: Optional[int] = None
    title: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None

    class Config:
        from_attributes = True


class CategoryNode(BaseModel):
    id: int
    parent_id: Optional[int] = None
    title: str
    slug: str
    description: str = ""
    image: str = ""
    subcategories: List["CategoryNode"] = []


CategoryNode.model_rebuild()
