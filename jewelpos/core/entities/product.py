"""Catalog product domain entity."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class Product(BaseModel):
    """A sellable catalog item with its current stock level."""

    id: str
    sku: str
    name: str
    category: str = "general"
    price: Decimal = Decimal("0")  # unit sale price
    stock_quantity: int = 0
    min_stock_level: int = 0  # informational threshold for alerts
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_low_stock(self) -> bool:
        """Stock at or below the minimum level."""
        return self.stock_quantity <= self.min_stock_level
