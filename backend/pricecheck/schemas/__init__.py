from pricecheck.schemas.common import UserRef, Message
from pricecheck.schemas.user import User, UserRegister, UserLogin, LoginResponse, TokenPair, RoleUpdate
from pricecheck.schemas.product import Product, ProductCreate, ProductUpdate, ProductDetail, ProductDeleted
from pricecheck.schemas.supermarket import (
    Supermarket, SupermarketCreate, SupermarketUpdate, SupermarketDetail, SupermarketDeleted,
)
from pricecheck.schemas.inventory import (
    InventoryCreate, InventoryUpdate, InventoryEntry, InventoryListing,
    CheapestOffer, CategoryOffer, InventoryDeleted,
)
from pricecheck.schemas.shopping_list import (
    ShoppingListItem, ShoppingListRequest, ResolvedItem, ShoppingListResponse,
)

__all__ = [
    "UserRef", "Message",
    "User", "UserRegister", "UserLogin", "LoginResponse", "TokenPair", "RoleUpdate",
    "Product", "ProductCreate", "ProductUpdate", "ProductDetail", "ProductDeleted",
    "Supermarket", "SupermarketCreate", "SupermarketUpdate", "SupermarketDetail", "SupermarketDeleted",
    "InventoryCreate", "InventoryUpdate", "InventoryEntry", "InventoryListing",
    "CheapestOffer", "CategoryOffer", "InventoryDeleted",
    "ShoppingListItem", "ShoppingListRequest", "ResolvedItem", "ShoppingListResponse",
]
