"""
Exceptions for InventoryPro.

Every error carries a code for programmatic handling, a human-readable
message and a data dict with context.

Usage:
    try:
        store.add_to_shipment(product_id, 50, 10, 18)
    except InsufficientStockError as e:
        print(e.message)  # "Only 8 units are available in stock. ..."
"""

from typing import Any, Dict, Optional


class InventoryError(Exception):
    """Base class for InventoryPro errors."""

    code = "INVENTORY_ERROR"
    default_message = "Inventory operation failed"

    def __init__(self, message: Optional[str] = None, **data: Any) -> None:
        self.message = message or self.default_message
        self.data: Dict[str, Any] = data
        super().__init__(self.message)

    def as_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {"code": self.code, "message": self.message, "data": dict(self.data)}


class ValidationError(InventoryError):
    """User input rejected; the operation was aborted."""

    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class InsufficientStockError(ValidationError):
    """Requested shipment quantity exceeds the product's current stock."""

    code = "INSUFFICIENT_STOCK"

    def __init__(self, available: int, requested: int) -> None:
        super().__init__(
            f"Only {available} units are available in stock. "
            f"Cannot mark {requested} units for shipment.",
            available=available,
            requested=requested,
        )

    @property
    def available(self) -> int:
        return self.data["available"]

    @property
    def requested(self) -> int:
        return self.data["requested"]


class InvalidQuantityError(ValidationError):
    """Quantity must be a positive integer."""

    code = "INVALID_QUANTITY"
    default_message = "Quantity must be greater than zero"


class InvalidStockError(ValidationError):
    """Stock levels can never be negative."""

    code = "INVALID_STOCK"
    default_message = "Stock level cannot be negative"


class InvalidPriceError(ValidationError):
    """Unit prices can never be negative."""

    code = "INVALID_PRICE"
    default_message = "Price cannot be negative"


class InvalidPercentageError(ValidationError):
    """Shipping fee and GST percentages must be within 0-100."""

    code = "INVALID_PERCENTAGE"
    default_message = "Percentage must be between 0 and 100"


class AuthenticationError(InventoryError):
    """Login rejected."""

    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class ReportExportError(InventoryError):
    """PDF generation failed or there was nothing to export."""

    code = "EXPORT_FAILED"
    default_message = "Failed to generate report PDF"
