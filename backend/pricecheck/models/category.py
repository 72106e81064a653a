"""
Closed set of product categories and the parser used at API boundaries.
"""
import enum
from dataclasses import dataclass
from typing import Union


class ProductCategory(str, enum.Enum):
    FRUITS = "FRUITS"
    VEGETABLES = "VEGETABLES"
    MEAT = "MEAT"
    SEAFOOD = "SEAFOOD"
    DAIRY = "DAIRY"
    BAKERY = "BAKERY"
    BEVERAGES = "BEVERAGES"
    PANTRY = "PANTRY"
    FROZEN = "FROZEN"
    SNACKS = "SNACKS"
    HOUSEHOLD = "HOUSEHOLD"
    PERSONAL_CARE = "PERSONAL_CARE"
    OTHER = "OTHER"


@dataclass(frozen=True)
class ValidCategory:
    category: ProductCategory


@dataclass(frozen=True)
class InvalidCategory:
    raw: str

    @property
    def message(self) -> str:
        allowed = ", ".join(c.value for c in ProductCategory)
        return f"Invalid product category '{self.raw}'. Expected one of: {allowed}"


CategoryParseResult = Union[ValidCategory, InvalidCategory]


def parse_category(raw: str) -> CategoryParseResult:
    """Parse a category name (case-insensitive) into the closed enumeration."""
    try:
        return ValidCategory(ProductCategory(raw.strip().upper()))
    except ValueError:
        return InvalidCategory(raw)
