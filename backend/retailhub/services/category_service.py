"""
Category tree over flat parent-indexed rows.

Nodes are addressed by id through one dict built per call, so insert, move
and delete touch only the rows involved instead of rewriting the tree.
"""
import logging
import re
from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from retailhub.core.exceptions import (
    PersistenceFailure,
    RecordConflict,
    RecordNotFound,
    ValidationFailed,
)
from retailhub.models.category import Category
from retailhub.models.product import Product

logger = logging.getLogger(__name__)


def slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "category"


def _title_path(by_id: Dict[int, Category], category_id: int) -> str:
    titles, current, seen = [], by_id.get(category_id), set()
    while current is not None and current.id not in seen:
        seen.add(current.id)
        titles.append(current.title)
        current = by_id.get(current.parent_id)
    return " > ".join(reversed(titles))


class CategoryTree:
    def __init__(self, db: Session):
        self.db = db

    def _index(self):
        nodes = self.db.query(Category).order_by(Category.id).all()
        by_id = {node.id: node for node in nodes}
        children = defaultdict(list)
        for node in nodes:
            children[node.parent_id].append(node)
        return by_id, children

    def get(self, category_id: int) -> Category:
        node = self.db.get(Category, category_id)
        if node is None:
            raise RecordNotFound("Category", category_id)
        return node

    def tree(self) -> List[Dict]:
        """Nested view: root nodes with `subcategories` filled recursively."""
        _, children = self._index()

        def build(node: Category) -> Dict:
            return {
                "id": node.id,
                "parent_id": node.parent_id,
                "title": node.title,
                "slug": node.slug,
                "description": node.description or "",
                "image": node.image or "",
                "subcategories": [build(child) for child in children.get(node.id, [])],
            }

        return [build(root) for root in children.get(None, [])]

    def descendant_ids(self, category_id: int) -> List[int]:
        """Ids of the node and everything below it."""
        _, children = self._index()
        found, stack = [], [category_id]
        while stack:
            current = stack.pop()
            found.append(current)
            stack.extend(child.id for child in children.get(current, []))
        return found

    def path(self, category_id: Optional[int]) -> str:
        """'Men > Shirts > Formal' for a leaf; empty string for no category."""
        if category_id is None:
            return ""
        by_id, _ = self._index()
        return _title_path(by_id, category_id)

    def paths(self) -> Dict[int, str]:
        """Title path of every category, from a single read."""
        by_id, _ = self._index()
        return {category_id: _title_path(by_id, category_id) for category_id in by_id}

    def create(self, title: str, slug: Optional[str] = None, parent_id: Optional[int] = None,
               description: Optional[str] = None, image: Optional[str] = None) -> Category:
        if not title or not title.strip():
            raise ValidationFailed("Category title is required")
        if parent_id is not None:
            self.get(parent_id)
        node = Category(
            title=title.strip(),
            slug=(slug or slugify(title)).strip(),
            parent_id=parent_id,
            description=description,
            image=image,
        )
        self.db.add(node)
        self._commit("save")
        self.db.refresh(node)
        return node

    def update(self, category_id: int, patch: Dict) -> Category:
        node = self.get(category_id)
        if "title" in patch and (patch["title"] is None or not patch["title"].strip()):
            raise ValidationFailed("Category title is required")
        for name in ("title", "slug", "description", "image"):
            if name in patch and patch[name] is not None:
                setattr(node, name, patch[name].strip() if name in ("title", "slug") else patch[name])
        self._commit("update")
        self.db.refresh(node)
        return node

    def move(self, category_id: int, new_parent_id: Optional[int]) -> Category:
        """Re-parent a node; None moves it to the root level."""
        node = self.get(category_id)
        if new_parent_id is not None:
            self.get(new_parent_id)
            if new_parent_id in self.descendant_ids(category_id):
                raise ValidationFailed("A category cannot be moved under itself or its subcategories")
        node.parent_id = new_parent_id
        self._commit("move")
        self.db.refresh(node)
        logger.info(f"[CATEGORY] Moved {category_id} under {new_parent_id}")
        return node

    def delete(self, category_id: int) -> List[int]:
        """Delete the node with its subtree. Products lose their category."""
        self.get(category_id)
        removed = self.descendant_ids(category_id)
        (
            self.db.query(Product)
            .filter(Product.category_id.in_(removed))
            .update({Product.category_id: None}, synchronize_session=False)
        )
        try:
            # children first so parent references stay valid throughout
            for node_id in reversed(removed):
                self.db.delete(self.db.get(Category, node_id))
                self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailure("Failed to delete category", e) from e
        self._commit("delete")
        logger.info(f"[CATEGORY] Deleted {len(removed)} categories starting at {category_id}")
        return removed

    def _commit(self, operation: str):
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise RecordConflict("A category with this slug already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailure(f"Failed to {operation} category", e) from e
