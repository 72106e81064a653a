import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from pricecheck.config import Settings
from pricecheck.dependencies import get_app_settings, get_resolver, require
from pricecheck.schemas.shopping_list import ResolvedItem, ShoppingListRequest, ShoppingListResponse
from pricecheck.services.auth import Identity
from pricecheck.services.authorization import Capability
from pricecheck.services.shopping_list import ShoppingLine, ShoppingListResolver

router = APIRouter(prefix="/shoppingList", tags=["shopping list"])


@router.post("", response_model=ShoppingListResponse, status_code=status.HTTP_201_CREATED)
def create_shopping_list(
    data: ShoppingListRequest,
    identity: Identity = Depends(require(Capability.RESOLVE_SHOPPING_LIST)),
    resolver: ShoppingListResolver = Depends(get_resolver),
    settings: Settings = Depends(get_app_settings),
):
    """
    Price a shopping list in a city.

    Each item is matched to the cheapest in-stock offer in the city; items
    without an offer come back with supermarket "N/A" and a zero price.
    Nothing is stored.
    """
    deadline = time.monotonic() + settings.shopping_list_timeout_seconds
    result = resolver.resolve(
        data.city,
        [ShoppingLine(product_id=item.product_id, quantity=item.quantity) for item in data.shopping_items],
        deadline=deadline,
    )

    return ShoppingListResponse(
        user_email=identity.email,
        current_date=datetime.now(timezone.utc),
        city=result.city,
        shopping_items=[
            ResolvedItem(
                product_name=line.product_name,
                supermarket_name=line.supermarket_name,
                quantity=line.quantity,
                lowest_price=float(line.lowest_price),
                subtotal=float(line.subtotal),
            )
            for line in result.lines
        ],
        total=float(result.total),
    )
