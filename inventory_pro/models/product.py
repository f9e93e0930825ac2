"""
Product and stock log data models.

Defines the inventory records held by the ledger and the append-only log of
stock changes.
"""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StockStatus(str, Enum):
    """Stock classification against a product's thresholds."""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"  # Overstock


class StockAction(str, Enum):
    """How a stock level was changed."""
    ADD = "add"
    REMOVE = "remove"
    SET = "set"


def format_price(value: float) -> str:
    """Price as written in log notes, e.g. 150 or 12999.99 (no rounding)."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class Product(BaseModel):
    """Represents a product held in inventory."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    current_stock: int = Field(default=0, ge=0)
    min_threshold: int = Field(default=0, ge=0)
    max_threshold: int = Field(default=0, ge=0)
    price: float = Field(default=0.0, ge=0.0)
    supplier: str = Field(default="", max_length=200)
    last_updated: date = Field(default_factory=date.today)

    def is_low_stock(self) -> bool:
        """Check if stock is at or below the minimum threshold."""
        return self.current_stock <= self.min_threshold

    def is_out_of_stock(self) -> bool:
        return self.current_stock == 0

    def stock_status(self) -> StockStatus:
        """Classify the product as low, normal or overstocked."""
        if self.current_stock <= self.min_threshold:
            return StockStatus.LOW
        if self.current_stock >= self.max_threshold:
            return StockStatus.HIGH
        return StockStatus.NORMAL

    def stock_value(self) -> float:
        """Value of the stock on hand."""
        return self.current_stock * self.price

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Samsung Galaxy S24",
                "category": "Electronics",
                "current_stock": 8,
                "min_threshold": 15,
                "max_threshold": 80,
                "price": 899.0,
                "supplier": "Samsung"
            }
        }
    )


class NewProduct(BaseModel):
    """Input for the add-product operation (id and date are generated)."""

    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    current_stock: int = Field(default=0, ge=0)
    min_threshold: int = Field(default=0, ge=0)
    max_threshold: int = Field(default=0, ge=0)
    price: float = Field(default=0.0, ge=0.0)
    supplier: str = Field(default="", max_length=200)

    @field_validator('name', 'category', 'supplier')
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class PriceChange(BaseModel):
    """Price before and after a stock update."""

    model_config = ConfigDict(populate_by_name=True)

    from_price: float = Field(..., alias="from")
    to_price: float = Field(..., alias="to")


class SupplierChange(BaseModel):
    """Supplier before and after a stock update."""

    model_config = ConfigDict(populate_by_name=True)

    from_supplier: str = Field(..., alias="from")
    to_supplier: str = Field(..., alias="to")


class StockLog(BaseModel):
    """Immutable record of a single stock change."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    product_name: str
    action: StockAction
    quantity: int = Field(..., ge=0)  # Magnitude of the change
    previous_stock: int = Field(..., ge=0)
    new_stock: int = Field(..., ge=0)
    user: str
    timestamp: datetime = Field(default_factory=datetime.now)
    notes: str = ""
    price_change: Optional[PriceChange] = None
    supplier_change: Optional[SupplierChange] = None

    def stock_change_label(self) -> str:
        """Render the change as "previous → new"."""
        return f"{self.previous_stock} → {self.new_stock}"

    def detailed_notes(self) -> str:
        """Notes with price and supplier changes appended."""
        notes = self.notes
        if self.price_change:
            notes += (
                f"{' | ' if notes else ''}Price: RS:{format_price(self.price_change.from_price)}"
                f" → RS:{format_price(self.price_change.to_price)}"
            )
        if self.supplier_change:
            notes += (
                f"{' | ' if notes else ''}Supplier: {self.supplier_change.from_supplier}"
                f" → {self.supplier_change.to_supplier}"
            )
        return notes
