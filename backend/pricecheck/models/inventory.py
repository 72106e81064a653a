from sqlalchemy import Column, Integer, ForeignKey, Boolean, DateTime, Numeric, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pricecheck.database import Base


class Inventory(Base):
    """Current price and stock of one product in one supermarket."""

    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, index=True)
    supermarket_id = Column(Integer, ForeignKey("supermarkets.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    in_stock = Column(Boolean, nullable=False, default=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("supermarket_id", "product_id", name="uq_inventory_supermarket_product"),
        Index("idx_inventory_product_price", "product_id", "in_stock", "price"),
    )

    # Relationships
    supermarket = relationship("Supermarket", back_populates="inventory")
    product = relationship("Product", back_populates="inventory")
    created_by = relationship("User", foreign_keys=[created_by_id])
    updated_by = relationship("User", foreign_keys=[updated_by_id])
