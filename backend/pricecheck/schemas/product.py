from datetime import datetime
from pydantic import Field

from pricecheck.models.category import ProductCategory
from pricecheck.schemas.common import CamelModel, UserRef


class ProductCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: ProductCategory
    comments: str | None = None


class ProductUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    category: ProductCategory | None = None
    comments: str | None = None


class Product(CamelModel):
    id: int
    name: str
    category: ProductCategory
    comments: str | None = None

    @classmethod
    def from_model(cls, product) -> "Product":
        return cls(
            id=product.id,
            name=product.name,
            category=product.category,
            comments=product.comments,
        )


class ProductDetail(Product):
    """Product as returned from create/update, with audit fields."""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: UserRef | None = None
    updated_by: UserRef | None = None

    @classmethod
    def from_model(cls, product) -> "ProductDetail":
        return cls(
            id=product.id,
            name=product.name,
            category=product.category,
            comments=product.comments,
            created_at=product.created_at,
            updated_at=product.updated_at,
            created_by=UserRef.from_model(product.created_by),
            updated_by=UserRef.from_model(product.updated_by),
        )


class ProductDeleted(CamelModel):
    message: str
    deleted_product: Product
