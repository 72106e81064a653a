"""Database seeding script - loads supermarkets, products and prices from JSON files.

Usage:
    python -m pricecheck.seed [seed_dir]

Expected files in the seed directory:
    supermarkets.json  [{"name": ..., "city": ..., "comments": ...}]
    products.json      [{"name": ..., "category": ..., "comments": ...}]
    inventory.json     [{"supermarket": ..., "city": ..., "product": ..., "price": ..., "in_stock": ...}]
"""
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path

from sqlalchemy.orm import Session

from pricecheck.config import get_settings
from pricecheck.database import create_db_engine, create_session_factory, init_db
from pricecheck.models import Inventory, Product, Supermarket
from pricecheck.models.category import InvalidCategory, parse_category

logger = logging.getLogger(__name__)


def _load(path: Path) -> list[dict]:
    if not path.exists():
        logger.info(f"Seed file not found, skipping: {path}")
        return []
    with open(path) as f:
        return json.load(f)


def seed_supermarkets(db: Session, data_dir: Path) -> int:
    """Seed supermarkets table. Existing name+city pairs are skipped."""
    added = 0
    for row in _load(data_dir / "supermarkets.json"):
        existing = db.query(Supermarket).filter(
            Supermarket.name == row["name"],
            Supermarket.city == row["city"],
        ).first()
        if not existing:
            db.add(Supermarket(name=row["name"], city=row["city"], comments=row.get("comments")))
            added += 1
            logger.info(f"Added supermarket: {row['name']} ({row['city']})")

    db.commit()
    return added


def seed_products(db: Session, data_dir: Path) -> int:
    """Seed products table. Existing names and unknown categories are skipped."""
    added = 0
    for row in _load(data_dir / "products.json"):
        parsed = parse_category(row["category"])
        if isinstance(parsed, InvalidCategory):
            logger.warning(f"Skipping product {row['name']}: {parsed.message}")
            continue

        existing = db.query(Product).filter(Product.name == row["name"]).first()
        if not existing:
            db.add(Product(name=row["name"], category=parsed.category, comments=row.get("comments")))
            added += 1
            logger.info(f"Added product: {row['name']}")

    db.commit()
    return added


def seed_inventory(db: Session, data_dir: Path) -> int:
    """Seed inventory entries, resolving supermarkets by name+city and products by name."""
    added = 0
    for row in _load(data_dir / "inventory.json"):
        supermarket = db.query(Supermarket).filter(
            Supermarket.name == row["supermarket"],
            Supermarket.city == row["city"],
        ).first()
        product = db.query(Product).filter(Product.name == row["product"]).first()
        if not supermarket or not product:
            logger.warning(f"Skipping price row with unknown supermarket or product: {row}")
            continue

        existing = db.query(Inventory).filter(
            Inventory.supermarket_id == supermarket.id,
            Inventory.product_id == product.id,
        ).first()
        if not existing:
            db.add(Inventory(
                supermarket_id=supermarket.id,
                product_id=product.id,
                price=Decimal(str(row["price"])),
                in_stock=row.get("in_stock", True),
            ))
            added += 1

    db.commit()
    return added


def seed_all(db: Session, data_dir: Path) -> dict:
    """Run all seeders in dependency order."""
    return {
        "supermarkets": seed_supermarkets(db, data_dir),
        "products": seed_products(db, data_dir),
        "inventory": seed_inventory(db, data_dir),
    }


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    settings = get_settings()
    data_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(settings.seed_dir)

    engine = create_db_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    init_db(engine, session_factory, settings)

    db = session_factory()
    try:
        counts = seed_all(db, data_dir)
        logger.info(f"Seeding complete: {counts}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
