from pricecheck.models.user import User, Role
from pricecheck.models.category import ProductCategory
from pricecheck.models.product import Product
from pricecheck.models.supermarket import Supermarket
from pricecheck.models.inventory import Inventory

__all__ = [
    "User",
    "Role",
    "ProductCategory",
    "Product",
    "Supermarket",
    "Inventory",
]
