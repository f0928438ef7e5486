from sqlalchemy import Column, Integer, String
from retailhub.db.base import Base

FIELD_TYPES = ("Text", "Number", "Image")
FIELD_MODES = ("Single", "Multiple")


class Field(Base):
    """Custom product attribute definition, e.g. Colour (Text, Multiple)."""
    __tablename__ = "fields"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False, unique=True)
    type = Column(String(32), nullable=False)
    mode = Column(String(32), nullable=False, default="Single")
