"""
Report data models.

Aggregates produced by the report service and consumed by the PDF renderer.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .product import Product, StockLog
from .shipment import ShipmentItem


class TimeRange(str, Enum):
    """Report windows."""
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    LAST_YEAR = "1y"

    @property
    def label(self) -> str:
        return {
            "7d": "Last 7 Days",
            "30d": "Last 30 Days",
            "90d": "Last 90 Days",
            "1y": "Last Year",
        }[self.value]


class ReportType(str, Enum):
    """Analysis report flavours."""
    INVENTORY = "inventory"
    SHIPMENT = "shipment"


class CategorySummary(BaseModel):
    """Stock value and units per product category."""

    name: str
    value: float = 0.0
    stock: int = 0


class ShipmentCategorySummary(BaseModel):
    """Shipment totals per product category."""

    name: str
    value: float = 0.0
    quantity: int = 0
    gst_amount: float = 0.0


class StockLevelEntry(BaseModel):
    """One row of the top-products-by-stock table."""

    name: str
    value: int
    level: str  # High, Medium, Low


class InventorySummary(BaseModel):
    """Executive summary of the inventory report."""

    total_products: int = 0
    total_value: float = 0.0
    low_stock_items: int = 0
    activities: int = 0
    average_stock: int = 0


class ShipmentSummary(BaseModel):
    """Executive summary of the shipment report."""

    total_shipments: int = 0
    total_quantity: int = 0
    total_value: float = 0.0
    gst_collected: float = 0.0
    shipping_revenue: float = 0.0


class ActivityEntry(BaseModel):
    """A row of the daily activity report, from either log."""

    timestamp: datetime
    product_name: str
    action: str
    quantity: int
    previous_stock: int = 0
    new_stock: int = 0
    user: str
    notes: str = ""
    source: str = "inventory"  # inventory or shipment
    price_changed: bool = False
    supplier_changed: bool = False


class AnalysisReport(BaseModel):
    """Everything the analysis PDF needs, captured at export time."""

    report_type: ReportType
    time_range: TimeRange
    generated_at: datetime = Field(default_factory=datetime.now)
    products: List[Product] = Field(default_factory=list)
    shipments: List[ShipmentItem] = Field(default_factory=list)
    filtered_logs: List[StockLog] = Field(default_factory=list)
    category_data: List[CategorySummary] = Field(default_factory=list)
    shipment_category_data: List[ShipmentCategorySummary] = Field(default_factory=list)
    stock_levels: List[StockLevelEntry] = Field(default_factory=list)
    inventory_summary: Optional[InventorySummary] = None
    shipment_summary: Optional[ShipmentSummary] = None
    recommendations: List[str] = Field(default_factory=list)
