"""Category tree."""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from retailhub.api.deps import get_db, get_current_user, require_roles
from retailhub.core.audit import AuditLog
from retailhub.core.permissions import CATALOG_ADMINS
from retailhub.models.user import User
from retailhub.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse, CategoryNode
from retailhub.services.category_service import CategoryTree

router = APIRouter()


@router.get("", response_model=List[CategoryNode])
def get_tree(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    """Whole tree, roots first, children nested under `subcategories`."""
    return CategoryTree(db).tree()


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    """Add a root category, or a subcategory when parent_id is given."""
    return CategoryTree(db).create(
        title=data.title,
        slug=data.slug,
        parent_id=data.parent_id,
        description=data.description,
        image=data.image,
    )


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    data: CategoryUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    """Edit fields; sending move_to_parent_id (null for root) also moves the node."""
    tree = CategoryTree(db)
    patch = data.model_dump(exclude_unset=True)
    move = "move_to_parent_id" in patch
    new_parent_id = patch.pop("move_to_parent_id", None)

    node = tree.update(category_id, patch) if patch else tree.get(category_id)
    if move:
        node = tree.move(category_id, new_parent_id)
    return node


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CATALOG_ADMINS)),
):
    """Delete a category together with its subcategories."""
    removed = CategoryTree(db).delete(category_id)
    AuditLog.log_action("delete", "category", category_id, current_user, changes={"removed": removed})
    return {"success": True, "removed": removed}
