from fastapi import APIRouter, Depends, status

from pricecheck.dependencies import get_catalog, require
from pricecheck.schemas.supermarket import (
    Supermarket as SupermarketSchema,
    SupermarketCreate,
    SupermarketDeleted,
    SupermarketDetail,
    SupermarketUpdate,
)
from pricecheck.services.auth import Identity
from pricecheck.services.authorization import Capability
from pricecheck.services.catalog import CatalogStore

router = APIRouter(prefix="/supermarket", tags=["supermarkets"])


@router.post("", response_model=SupermarketDetail, status_code=status.HTTP_201_CREATED)
def create_supermarket(
    data: SupermarketCreate,
    identity: Identity = Depends(require(Capability.MANAGE_SUPERMARKETS)),
    catalog: CatalogStore = Depends(get_catalog),
):
    """Create a new supermarket. Requires ADMIN role."""
    return SupermarketDetail.from_model(catalog.create_supermarket(data, identity))


@router.get("", response_model=list[SupermarketSchema])
def list_supermarkets(
    city: str | None = None,
    identity: Identity = Depends(require(Capability.VIEW_SUPERMARKETS)),
    catalog: CatalogStore = Depends(get_catalog),
):
    """List supermarkets, optionally only those in one city."""
    return [SupermarketSchema.from_model(s) for s in catalog.list_supermarkets(city)]


@router.get("/{supermarket_id}", response_model=SupermarketSchema)
def get_supermarket(
    supermarket_id: int,
    identity: Identity = Depends(require(Capability.VIEW_SUPERMARKETS)),
    catalog: CatalogStore = Depends(get_catalog),
):
    """Get a supermarket by ID."""
    return SupermarketSchema.from_model(catalog.get_supermarket(supermarket_id))


@router.patch("/{supermarket_id}", response_model=SupermarketDetail)
def update_supermarket(
    supermarket_id: int,
    data: SupermarketUpdate,
    identity: Identity = Depends(require(Capability.MANAGE_SUPERMARKETS)),
    catalog: CatalogStore = Depends(get_catalog),
):
    """Update a supermarket. Requires ADMIN role."""
    return SupermarketDetail.from_model(catalog.update_supermarket(supermarket_id, data, identity))


@router.delete("/{supermarket_id}", response_model=SupermarketDeleted)
def delete_supermarket(
    supermarket_id: int,
    identity: Identity = Depends(require(Capability.MANAGE_SUPERMARKETS)),
    catalog: CatalogStore = Depends(get_catalog),
):
    """Delete a supermarket and its inventory entries. Requires ADMIN role."""
    deleted = catalog.delete_supermarket(supermarket_id)
    return SupermarketDeleted(message="Supermarket deleted successfully.", deleted_supermarket=deleted)
