"""
Shipment data models.

Defines shipment lines marked for outbound dispatch and their activity log.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ShipmentAction(str, Enum):
    """Shipment activity types."""
    MARKED_FOR_SHIPMENT = "marked_for_shipment"
    STOCK_REDUCED = "stock_reduced"
    SHIPMENT_CREATED = "shipment_created"


class ShipmentItem(BaseModel):
    """
    A quantity of one product marked for shipment.

    shipping_fee and gst_amount are per unit; total_value covers the whole
    line, i.e. (price_per_unit + shipping_fee + gst_amount) * quantity.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    product_id: str  # Weak reference, the product may be gone
    product_name: str
    category: str
    quantity: int = Field(..., gt=0)
    price_per_unit: float = Field(..., ge=0.0)
    shipping_fee_percentage: float
    shipping_fee: float
    gst_percentage: float
    gst_amount: float
    total_value: float
    last_updated: datetime = Field(default_factory=datetime.now)

    def total_shipping_fee(self) -> float:
        """Shipping fee for the whole line."""
        return self.shipping_fee * self.quantity

    def total_gst(self) -> float:
        """GST for the whole line."""
        return self.gst_amount * self.quantity

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "product_id": "2",
                "product_name": "Samsung Galaxy S24",
                "category": "Electronics",
                "quantity": 2,
                "price_per_unit": 100.0,
                "shipping_fee_percentage": 10.0,
                "shipping_fee": 10.0,
                "gst_percentage": 5.0,
                "gst_amount": 5.0,
                "total_value": 230.0
            }
        }
    )


class ShipmentLog(BaseModel):
    """Immutable record of a shipment action."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    product_name: str
    action: ShipmentAction
    quantity: int
    stock_change: int
    user: str
    timestamp: datetime = Field(default_factory=datetime.now)
    notes: str = ""
    shipping_fee: Optional[float] = None
    gst_amount: Optional[float] = None
