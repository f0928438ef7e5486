from retailhub.models.user import User
from retailhub.models.store import Store
from retailhub.models.field import Field
from retailhub.models.category import Category
from retailhub.models.product import Product
from retailhub.models.batch import Batch
from retailhub.models.inventory import InventoryItem
from retailhub.models.dispatch import Dispatch

__all__ = ["User", "Store", "Field", "Category", "Product", "Batch", "InventoryItem", "Dispatch"]
