"""
Shopping List Resolver

Prices a shopping list against the inventory ledger: every line is matched
to the cheapest in-stock offer in the requested city, priced, and summed.
A line without any offer is reported with a placeholder instead of failing
the list.
"""
import logging
import time
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from pricecheck.errors import NotFoundError, ResolutionTimeoutError
from pricecheck.services.inventory import InventoryLedger

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
NOT_AVAILABLE = "N/A"


def round_money(amount: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ShoppingLine:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class ResolvedLine:
    product_name: str
    supermarket_name: str
    quantity: int
    lowest_price: Decimal
    subtotal: Decimal
    found: bool = True


@dataclass(frozen=True)
class ResolvedList:
    city: str
    lines: list[ResolvedLine]
    total: Decimal


class ShoppingListResolver:
    def __init__(self, ledger: InventoryLedger):
        self.ledger = ledger

    def resolve_line(self, line: ShoppingLine, city: str) -> ResolvedLine:
        try:
            offer = self.ledger.find_cheapest(line.product_id, city)
        except NotFoundError:
            return ResolvedLine(
                product_name=f"Product with ID {line.product_id} not found in {city}",
                supermarket_name=NOT_AVAILABLE,
                quantity=line.quantity,
                lowest_price=Decimal("0"),
                subtotal=Decimal("0"),
                found=False,
            )

        price = Decimal(str(offer.price))
        return ResolvedLine(
            product_name=offer.product.name,
            supermarket_name=offer.supermarket.name,
            quantity=line.quantity,
            lowest_price=price,
            subtotal=round_money(price * line.quantity),
        )

    def resolve(
        self,
        city: str,
        lines: Iterable[ShoppingLine],
        deadline: Optional[float] = None,
    ) -> ResolvedList:
        """
        Resolve every line in order and total the rounded subtotals.

        ``deadline`` is a ``time.monotonic()`` value; it is checked before each
        lookup and no further queries are issued once it has passed.
        """
        resolved = []
        for line in lines:
            if deadline is not None and time.monotonic() >= deadline:
                logger.warning(
                    f"Shopping list for {city} timed out after {len(resolved)} lines"
                )
                raise ResolutionTimeoutError()
            resolved.append(self.resolve_line(line, city))

        total = round_money(sum((r.subtotal for r in resolved), Decimal("0")))

        missing = sum(1 for r in resolved if not r.found)
        if missing:
            logger.info(f"Shopping list for {city}: {missing} of {len(resolved)} items without offer")

        return ResolvedList(city=city, lines=resolved, total=total)
