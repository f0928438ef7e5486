from sqlalchemy import Column, Integer, String, ForeignKey, Text
from retailhub.db.base import Base


class Category(Base):
    """
    Category tree node.

    Stored flat with a parent pointer; the nested tree is assembled on read
    (services.category_service).
    """
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    image = Column(String(512), nullable=True)
