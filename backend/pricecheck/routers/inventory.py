from fastapi import APIRouter, Depends, Response, status

from pricecheck.dependencies import get_ledger, require
from pricecheck.errors import ValidationError
from pricecheck.models.category import InvalidCategory, parse_category
from pricecheck.models.inventory import Inventory
from pricecheck.models.user import Role
from pricecheck.schemas.common import UserRef
from pricecheck.schemas.inventory import (
    CategoryOffer,
    CheapestOffer,
    InventoryCreate,
    InventoryDeleted,
    InventoryEntry,
    InventoryListing,
    InventoryUpdate,
)
from pricecheck.services.auth import Identity
from pricecheck.services.authorization import Capability
from pricecheck.services.inventory import InventoryLedger

router = APIRouter(prefix="/inventory", tags=["inventory"])


def _entry(entry: Inventory) -> InventoryEntry:
    return InventoryEntry(
        id=entry.id,
        supermarket_id=entry.supermarket_id,
        product_id=entry.product_id,
        product_name=entry.product.name,
        supermarket_name=entry.supermarket.name,
        price=float(entry.price),
        in_stock=entry.in_stock,
        updated_at=entry.updated_at,
    )


def _listing(entry: Inventory) -> InventoryListing:
    return InventoryListing(
        product_name=entry.product.name,
        supermarket_name=entry.supermarket.name,
        price=float(entry.price),
        in_stock=entry.in_stock,
        updated_at=entry.updated_at,
    )


@router.post("", response_model=InventoryEntry, status_code=status.HTTP_201_CREATED)
def create_inventory_entry(
    data: InventoryCreate,
    response: Response,
    identity: Identity = Depends(require(Capability.WRITE_INVENTORY)),
    ledger: InventoryLedger = Depends(get_ledger),
):
    """
    Record the price of a product in a supermarket.

    Returns 201 when a new entry is created and 200 when the existing
    entry for the pair is overwritten. Requires VERIFIED or ADMIN role.
    """
    entry, created = ledger.upsert_entry(
        data.supermarket_id, data.product_id, data.price, identity, in_stock=data.in_stock
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return _entry(entry)


@router.get("", response_model=list[InventoryListing])
def list_inventory(
    identity: Identity = Depends(require(Capability.VIEW_INVENTORY)),
    ledger: InventoryLedger = Depends(get_ledger),
):
    """Get all inventory entries."""
    return [_listing(e) for e in ledger.list_all()]


@router.get(
    "/cheapest/{product_id}/{city}",
    response_model=CheapestOffer,
    response_model_exclude_none=True,
)
def get_cheapest_offer(
    product_id: int,
    city: str,
    identity: Identity = Depends(require(Capability.VIEW_CHEAPEST_OFFER)),
    ledger: InventoryLedger = Depends(get_ledger),
):
    """Find the cheapest in-stock listing of a product in a city."""
    entry = ledger.find_cheapest(product_id, city)

    offer = CheapestOffer(
        product_name=entry.product.name,
        supermarket_name=entry.supermarket.name,
        price=float(entry.price),
        in_stock=entry.in_stock,
    )
    if identity.role == Role.ADMIN:
        offer.updated_at = entry.updated_at
        offer.updated_by = UserRef.from_model(entry.updated_by)
    return offer


@router.get("/supermarket/{supermarket_id}", response_model=list[InventoryListing])
def list_supermarket_inventory(
    supermarket_id: int,
    ledger: InventoryLedger = Depends(get_ledger),
):
    """Get all inventory items in a given supermarket."""
    return [_listing(e) for e in ledger.list_by_supermarket(supermarket_id)]


@router.get("/category/{city}/{product_category}", response_model=list[CategoryOffer])
def list_cheapest_by_category(
    city: str,
    product_category: str,
    identity: Identity = Depends(require(Capability.VIEW_CATEGORY_PRICES)),
    ledger: InventoryLedger = Depends(get_ledger),
):
    """Get the lowest price of every product in a category within a city."""
    parsed = parse_category(product_category)
    if isinstance(parsed, InvalidCategory):
        raise ValidationError(parsed.message)

    return [
        CategoryOffer(
            product_name=entry.product.name,
            supermarket_name=entry.supermarket.name,
            price=float(entry.price),
        )
        for entry in ledger.list_cheapest_by_category(city, parsed.category)
    ]


@router.patch("/{supermarket_id}/{product_id}", response_model=InventoryEntry)
def update_inventory_entry(
    supermarket_id: int,
    product_id: int,
    data: InventoryUpdate,
    identity: Identity = Depends(require(Capability.WRITE_INVENTORY)),
    ledger: InventoryLedger = Depends(get_ledger),
):
    """Update the price and/or stock flag of an inventory entry."""
    return _entry(ledger.update_entry(supermarket_id, product_id, data, identity))


@router.delete("/{supermarket_id}/{product_id}", response_model=InventoryDeleted)
def delete_inventory_entry(
    supermarket_id: int,
    product_id: int,
    identity: Identity = Depends(require(Capability.DELETE_INVENTORY)),
    ledger: InventoryLedger = Depends(get_ledger),
):
    """Delete an inventory entry. Requires ADMIN role."""
    ledger.delete_entry(supermarket_id, product_id)
    return InventoryDeleted(
        message="Inventory entry deleted successfully.",
        supermarket_id=supermarket_id,
        product_id=product_id,
    )
