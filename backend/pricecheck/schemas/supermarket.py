from datetime import datetime
from pydantic import Field

from pricecheck.schemas.common import CamelModel, UserRef


class SupermarketCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    comments: str | None = None


class SupermarketUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=100)
    comments: str | None = None


class Supermarket(CamelModel):
    id: int
    name: str
    city: str
    comments: str | None = None

    @classmethod
    def from_model(cls, supermarket) -> "Supermarket":
        return cls(
            id=supermarket.id,
            name=supermarket.name,
            city=supermarket.city,
            comments=supermarket.comments,
        )


class SupermarketDetail(Supermarket):
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: UserRef | None = None
    updated_by: UserRef | None = None

    @classmethod
    def from_model(cls, supermarket) -> "SupermarketDetail":
        return cls(
            id=supermarket.id,
            name=supermarket.name,
            city=supermarket.city,
            comments=supermarket.comments,
            created_at=supermarket.created_at,
            updated_at=supermarket.updated_at,
            created_by=UserRef.from_model(supermarket.created_by),
            updated_by=UserRef.from_model(supermarket.updated_by),
        )


class SupermarketDeleted(CamelModel):
    message: str
    deleted_supermarket: Supermarket
