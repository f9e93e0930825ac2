"""
Data models for InventoryPro.

This module exports all data models for easy import.
"""

from .alert import (
    Alert,
    AlertSeverity,
    AlertType,
)
from .product import (
    NewProduct,
    PriceChange,
    Product,
    StockAction,
    StockLog,
    StockStatus,
    SupplierChange,
    format_price,
)
from .report import (
    ActivityEntry,
    AnalysisReport,
    CategorySummary,
    InventorySummary,
    ReportType,
    ShipmentCategorySummary,
    ShipmentSummary,
    StockLevelEntry,
    TimeRange,
)
from .shipment import (
    ShipmentAction,
    ShipmentItem,
    ShipmentLog,
)
from .user import (
    NotificationSettings,
    User,
    UserRole,
)

__all__ = [
    # Inventory models
    "Product",
    "NewProduct",
    "StockLog",
    "StockAction",
    "StockStatus",
    "PriceChange",
    "SupplierChange",
    "format_price",
    # Alert models
    "Alert",
    "AlertType",
    "AlertSeverity",
    # Shipment models
    "ShipmentItem",
    "ShipmentLog",
    "ShipmentAction",
    # User models
    "User",
    "UserRole",
    "NotificationSettings",
    # Report models
    "TimeRange",
    "ReportType",
    "CategorySummary",
    "ShipmentCategorySummary",
    "StockLevelEntry",
    "InventorySummary",
    "ShipmentSummary",
    "ActivityEntry",
    "AnalysisReport",
]
