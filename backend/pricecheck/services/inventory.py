"""
Inventory Ledger

One entry per (supermarket, product) pair holding the current price and
stock flag, plus the cheapest-offer queries the shopping list builds on.
Ties on price are broken by the lowest entry id so repeated calls over the
same data always pick the same offer.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from pricecheck.database import is_valid_id
from pricecheck.errors import NotFoundError
from pricecheck.models import Inventory, Product, ProductCategory, Supermarket
from pricecheck.schemas.inventory import InventoryUpdate
from pricecheck.services.auth import Identity

logger = logging.getLogger(__name__)


class InventoryLedger:
    def __init__(self, db: Session):
        self.db = db

    def _offers_in_city(self, city: str):
        """In-stock entries of supermarkets located in ``city``, cheapest first."""
        return self.db.query(Inventory).join(
            Supermarket, Inventory.supermarket_id == Supermarket.id
        ).filter(
            Inventory.in_stock == True,  # noqa: E712
            Supermarket.city == city,
        ).order_by(
            Inventory.price.asc(), Inventory.id.asc()
        )

    def _find_entry(self, supermarket_id: int, product_id: int) -> Optional[Inventory]:
        if not (is_valid_id(supermarket_id) and is_valid_id(product_id)):
            return None
        return self.db.query(Inventory).filter(
            Inventory.supermarket_id == supermarket_id,
            Inventory.product_id == product_id,
        ).first()

    def get_entry(self, supermarket_id: int, product_id: int) -> Inventory:
        entry = self._find_entry(supermarket_id, product_id)
        if entry is None:
            raise NotFoundError("Inventory entry not found.")
        return entry

    @staticmethod
    def _stamp(entry: Inventory, price: Decimal, in_stock: bool, actor: Identity):
        entry.price = price
        entry.in_stock = in_stock
        entry.updated_by_id = actor.user_id
        entry.updated_at = datetime.now(timezone.utc)

    def upsert_entry(
        self,
        supermarket_id: int,
        product_id: int,
        price: Decimal,
        actor: Identity,
        in_stock: bool = True,
    ) -> tuple[Inventory, bool]:
        """
        Record the price of a product in a supermarket.

        Creates the entry if the pair has none yet, otherwise overwrites its
        price and stock flag. Returns the entry and whether it was created.
        """
        supermarket = None
        if is_valid_id(supermarket_id):
            supermarket = self.db.query(Supermarket).filter(Supermarket.id == supermarket_id).first()
        if supermarket is None:
            raise NotFoundError("Supermarket not found.")
        product = None
        if is_valid_id(product_id):
            product = self.db.query(Product).filter(Product.id == product_id).first()
        if product is None:
            raise NotFoundError("Product not found.")

        entry = self._find_entry(supermarket_id, product_id)
        created = entry is None
        if created:
            entry = Inventory(
                supermarket_id=supermarket_id,
                product_id=product_id,
                created_by_id=actor.user_id,
            )
            self.db.add(entry)

        self._stamp(entry, price, in_stock, actor)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent request created the pair first; overwrite that entry
            self.db.rollback()
            entry = self.get_entry(supermarket_id, product_id)
            created = False
            self._stamp(entry, price, in_stock, actor)
            self.db.commit()
        self.db.refresh(entry)

        logger.info(
            f"Inventory {'created' if created else 'updated'}: product {product_id} "
            f"at supermarket {supermarket_id} = {price}"
        )
        return entry, created

    def list_all(self) -> list[Inventory]:
        return self.db.query(Inventory).options(
            joinedload(Inventory.product),
            joinedload(Inventory.supermarket),
        ).order_by(Inventory.id).all()

    def list_by_supermarket(self, supermarket_id: int) -> list[Inventory]:
        if not is_valid_id(supermarket_id):
            raise NotFoundError("No items found in the given supermarket.")

        entries = self.db.query(Inventory).options(
            joinedload(Inventory.product),
            joinedload(Inventory.supermarket),
        ).filter(
            Inventory.supermarket_id == supermarket_id
        ).order_by(Inventory.id).all()

        if not entries:
            raise NotFoundError("No items found in the given supermarket.")
        return entries

    def find_cheapest(self, product_id: int, city: str) -> Inventory:
        """Cheapest in-stock entry for a product among supermarkets in a city."""
        entry = None
        if is_valid_id(product_id):
            entry = self._offers_in_city(city).filter(
                Inventory.product_id == product_id
            ).first()

        if entry is None:
            raise NotFoundError("No listing found for the given product and city.")
        return entry

    def list_cheapest_by_category(self, city: str, category: ProductCategory) -> list[Inventory]:
        """
        Cheapest in-stock offer for every product of a category in a city.

        Products without any in-stock offer in the city are left out.
        """
        offers = self._offers_in_city(city).join(
            Product, Inventory.product_id == Product.id
        ).filter(
            Product.category == category
        ).all()

        # Offers arrive cheapest first, so the first one seen per product wins
        cheapest: dict[int, Inventory] = {}
        for offer in offers:
            if offer.product_id not in cheapest:
                cheapest[offer.product_id] = offer

        return [cheapest[product_id] for product_id in sorted(cheapest)]

    def update_entry(
        self, supermarket_id: int, product_id: int, patch: InventoryUpdate, actor: Identity
    ) -> Inventory:
        entry = self.get_entry(supermarket_id, product_id)

        if patch.price is not None:
            entry.price = patch.price
        if patch.in_stock is not None:
            entry.in_stock = patch.in_stock

        entry.updated_by_id = actor.user_id
        entry.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def delete_entry(self, supermarket_id: int, product_id: int) -> None:
        entry = self.get_entry(supermarket_id, product_id)
        self.db.delete(entry)
        self.db.commit()
        logger.info(f"Inventory entry for product {product_id} at supermarket {supermarket_id} deleted")
