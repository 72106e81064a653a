from datetime import datetime
from decimal import Decimal
from pydantic import Field

from pricecheck.schemas.common import CamelModel, UserRef


class InventoryCreate(CamelModel):
    supermarket_id: int
    product_id: int
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    in_stock: bool = True


class InventoryUpdate(CamelModel):
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    in_stock: bool | None = None


class InventoryEntry(CamelModel):
    id: int
    supermarket_id: int
    product_id: int
    product_name: str
    supermarket_name: str
    price: float
    in_stock: bool
    updated_at: datetime | None = None


class InventoryListing(CamelModel):
    product_name: str
    supermarket_name: str
    price: float
    in_stock: bool
    updated_at: datetime | None = None


class CheapestOffer(CamelModel):
    product_name: str
    supermarket_name: str
    price: float
    in_stock: bool
    # Only populated for administrators
    updated_at: datetime | None = None
    updated_by: UserRef | None = None


class CategoryOffer(CamelModel):
    product_name: str
    supermarket_name: str
    price: float


class InventoryDeleted(CamelModel):
    message: str
    supermarket_id: int
    product_id: int
