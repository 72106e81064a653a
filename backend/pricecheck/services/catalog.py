"""
Catalog Store

CRUD over products and supermarkets. Every write stamps the acting user
as creator and/or last modifier.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pricecheck.database import is_valid_id
from pricecheck.errors import ConflictError, NotFoundError
from pricecheck.models import Product, Supermarket
from pricecheck.schemas.product import Product as ProductSchema, ProductCreate, ProductUpdate
from pricecheck.schemas.supermarket import Supermarket as SupermarketSchema, SupermarketCreate, SupermarketUpdate
from pricecheck.services.auth import Identity
from pricecheck.services.authorization import Capability, is_allowed

logger = logging.getLogger(__name__)

DUPLICATE_PRODUCT_MESSAGE = (
    "The product you entered already exists in the database. "
    "If you want to update the price, please use the 'update' feature."
)


class CatalogStore:
    def __init__(self, db: Session):
        self.db = db

    # ============== Products ==============

    def _product_name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Product.id).filter(Product.name == name)
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        return query.first() is not None

    def _commit_product(self):
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same name
            self.db.rollback()
            raise ConflictError(DUPLICATE_PRODUCT_MESSAGE)

    def create_product(self, data: ProductCreate, actor: Identity) -> Product:
        if self._product_name_taken(data.name):
            raise ConflictError(DUPLICATE_PRODUCT_MESSAGE)

        product = Product(
            name=data.name,
            category=data.category,
            comments=data.comments,
            created_by_id=actor.user_id,
            updated_by_id=actor.user_id,
        )
        self.db.add(product)
        self._commit_product()
        self.db.refresh(product)
        logger.info(f"Product {product.id} '{product.name}' created by user {actor.user_id}")
        return product

    def list_products(self) -> list[Product]:
        return self.db.query(Product).order_by(Product.id).all()

    def get_product(self, product_id: int) -> Product:
        product = None
        if is_valid_id(product_id):
            product = self.db.query(Product).filter(Product.id == product_id).first()
        if product is None:
            raise NotFoundError("Product not found.")
        return product

    def update_product(self, product_id: int, patch: ProductUpdate, actor: Identity) -> Product:
        """
        Update a product.

        Name, category and comments changes are only applied for callers
        allowed to edit product fields; any permitted call still records the
        caller as last modifier.
        """
        product = self.get_product(product_id)

        if is_allowed(actor, Capability.EDIT_PRODUCT_FIELDS):
            if patch.name is not None and patch.name != product.name:
                if self._product_name_taken(patch.name, exclude_id=product.id):
                    raise ConflictError(DUPLICATE_PRODUCT_MESSAGE)
                product.name = patch.name
            if patch.category is not None:
                product.category = patch.category
            if patch.comments is not None:
                product.comments = patch.comments

        product.updated_by_id = actor.user_id
        product.updated_at = datetime.now(timezone.utc)
        self._commit_product()
        self.db.refresh(product)
        return product

    def delete_product(self, product_id: int) -> ProductSchema:
        """Delete a product together with its inventory entries."""
        product = self.get_product(product_id)
        deleted = ProductSchema.from_model(product)
        self.db.delete(product)
        self.db.commit()
        logger.info(f"Product {product_id} deleted")
        return deleted

    # ============== Supermarkets ==============

    def create_supermarket(self, data: SupermarketCreate, actor: Identity) -> Supermarket:
        supermarket = Supermarket(
            name=data.name,
            city=data.city,
            comments=data.comments,
            created_by_id=actor.user_id,
            updated_by_id=actor.user_id,
        )
        self.db.add(supermarket)
        self.db.commit()
        self.db.refresh(supermarket)
        logger.info(f"Supermarket {supermarket.id} '{supermarket.name}' ({supermarket.city}) created")
        return supermarket

    def list_supermarkets(self, city: Optional[str] = None) -> list[Supermarket]:
        query = self.db.query(Supermarket)
        if city:
            query = query.filter(Supermarket.city == city)
        return query.order_by(Supermarket.id).all()

    def get_supermarket(self, supermarket_id: int) -> Supermarket:
        supermarket = None
        if is_valid_id(supermarket_id):
            supermarket = self.db.query(Supermarket).filter(Supermarket.id == supermarket_id).first()
        if supermarket is None:
            raise NotFoundError("Supermarket not found.")
        return supermarket

    def update_supermarket(self, supermarket_id: int, patch: SupermarketUpdate, actor: Identity) -> Supermarket:
        supermarket = self.get_supermarket(supermarket_id)

        for field, value in patch.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(supermarket, field, value)

        supermarket.updated_by_id = actor.user_id
        supermarket.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(supermarket)
        return supermarket

    def delete_supermarket(self, supermarket_id: int) -> SupermarketSchema:
        """Delete a supermarket together with its inventory entries."""
        supermarket = self.get_supermarket(supermarket_id)
        deleted = SupermarketSchema.from_model(supermarket)
        self.db.delete(supermarket)
        self.db.commit()
        logger.info(f"Supermarket {supermarket_id} deleted")
        return deleted
