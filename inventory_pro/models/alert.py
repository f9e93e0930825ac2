"""
Alert data models.

Alerts are raised for products at or below their minimum stock threshold.
"""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class AlertType(str, Enum):
    """Kinds of inventory alerts."""
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    REORDER = "reorder"
    EXPIRY = "expiry"


class AlertSeverity(str, Enum):
    """Alert priority."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Alert(BaseModel):
    """Represents a single inventory alert."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: AlertType
    product_name: str
    message: str
    severity: AlertSeverity
    timestamp: datetime = Field(default_factory=datetime.now)
    acknowledged: bool = False

    def key(self) -> tuple:
        """Identity used for duplicate suppression."""
        return (self.product_name, self.type)

    def type_label(self) -> str:
        """Human-readable alert type, e.g. "LOW STOCK"."""
        return self.type.value.replace("_", " ").upper()
