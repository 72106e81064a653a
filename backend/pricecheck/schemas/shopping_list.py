from datetime import datetime
from pydantic import Field

from pricecheck.schemas.common import CamelModel


class ShoppingListItem(CamelModel):
    product_id: int
    quantity: int = Field(..., gt=0)


class ShoppingListRequest(CamelModel):
    city: str = Field(..., min_length=1)
    shopping_items: list[ShoppingListItem]


class ResolvedItem(CamelModel):
    product_name: str
    supermarket_name: str
    quantity: int
    lowest_price: float
    subtotal: float


class ShoppingListResponse(CamelModel):
    user_email: str
    current_date: datetime
    city: str
    shopping_items: list[ResolvedItem]
    total: float
