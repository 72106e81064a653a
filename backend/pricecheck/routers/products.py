from fastapi import APIRouter, Depends, status

from pricecheck.dependencies import get_catalog, require
from pricecheck.schemas.product import (
    Product as ProductSchema,
    ProductCreate,
    ProductDeleted,
    ProductDetail,
    ProductUpdate,
)
from pricecheck.services.auth import Identity
from pricecheck.services.authorization import Capability
from pricecheck.services.catalog import CatalogStore

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=ProductDetail, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    identity: Identity = Depends(require(Capability.CREATE_PRODUCT)),
    catalog: CatalogStore = Depends(get_catalog),
):
    """Create a new product. Requires VERIFIED or ADMIN role; names are unique."""
    return ProductDetail.from_model(catalog.create_product(data, identity))


@router.get("", response_model=list[ProductSchema])
def list_products(catalog: CatalogStore = Depends(get_catalog)):
    """List all products."""
    return [ProductSchema.from_model(p) for p in catalog.list_products()]


@router.get("/{product_id}", response_model=ProductSchema)
def get_product(product_id: int, catalog: CatalogStore = Depends(get_catalog)):
    """Get a product by ID."""
    return ProductSchema.from_model(catalog.get_product(product_id))


@router.patch("/{product_id}", response_model=ProductDetail)
def update_product(
    product_id: int,
    data: ProductUpdate,
    identity: Identity = Depends(require(Capability.UPDATE_PRODUCT)),
    catalog: CatalogStore = Depends(get_catalog),
):
    """
    Update a product.

    VERIFIED and ADMIN callers may call this; field changes are only applied
    for ADMIN callers, but every call records the caller as last modifier.
    """
    return ProductDetail.from_model(catalog.update_product(product_id, data, identity))


@router.delete("/{product_id}", response_model=ProductDeleted)
def delete_product(
    product_id: int,
    identity: Identity = Depends(require(Capability.DELETE_PRODUCT)),
    catalog: CatalogStore = Depends(get_catalog),
):
    """Delete a product and its inventory entries. Requires ADMIN role."""
    deleted = catalog.delete_product(product_id)
    return ProductDeleted(message="Product deleted successfully.", deleted_product=deleted)
