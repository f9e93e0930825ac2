"""
Report aggregation.

Groups products and shipments by category, filters activity by time window
and builds the summaries and recommendations that go into exported reports.
Designed for small in-memory collections; nothing is paginated.
"""

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Union

from ..models import (
    ActivityEntry,
    AnalysisReport,
    CategorySummary,
    InventorySummary,
    Product,
    ReportType,
    ShipmentCategorySummary,
    ShipmentItem,
    ShipmentLog,
    ShipmentSummary,
    StockLevelEntry,
    StockLog,
    TimeRange,
)
from ..utils import get_logger
from .shipment_calculator import format_currency

DEFAULT_RANGE_DAYS = 30
NAME_DISPLAY_LIMIT = 15

RANGE_DAYS = {
    TimeRange.LAST_7_DAYS: 7,
    TimeRange.LAST_30_DAYS: 30,
    TimeRange.LAST_90_DAYS: 90,
}


def parse_time_range(token: Union[TimeRange, str, None]) -> Optional[TimeRange]:
    """Parse a 7d/30d/90d/1y token; unknown tokens give None."""
    if isinstance(token, TimeRange):
        return token
    try:
        return TimeRange(token)
    except ValueError:
        return None


def time_range_label(token: Union[TimeRange, str, None]) -> str:
    time_range = parse_time_range(token)
    return time_range.label if time_range else "Custom Range"


def cutoff_for(token: Union[TimeRange, str, None], now: Optional[datetime] = None) -> datetime:
    """
    Earliest timestamp included in a report window.

    7d, 30d and 90d go back that many days, 1y goes back one calendar year
    and anything else falls back to 30 days.
    """
    now = now or datetime.now()
    time_range = parse_time_range(token)

    if time_range == TimeRange.LAST_YEAR:
        try:
            return now.replace(year=now.year - 1)
        except ValueError:
            # 29 February
            return now.replace(year=now.year - 1, day=28)

    days = RANGE_DAYS.get(time_range, DEFAULT_RANGE_DAYS)
    return now - timedelta(days=days)


def filter_logs_by_range(
    logs: Iterable[StockLog],
    token: Union[TimeRange, str, None],
    now: Optional[datetime] = None,
) -> List[StockLog]:
    cutoff = cutoff_for(token, now)
    return [log for log in logs if log.timestamp >= cutoff]


def inventory_by_category(products: Iterable[Product]) -> List[CategorySummary]:
    """Stock value and units per category, in first-seen order."""
    groups: Dict[str, CategorySummary] = {}
    for product in products:
        summary = groups.setdefault(product.category, CategorySummary(name=product.category))
        summary.value += product.stock_value()
        summary.stock += product.current_stock
    return list(groups.values())


def shipments_by_category(shipments: Iterable[ShipmentItem]) -> List[ShipmentCategorySummary]:
    """Shipment value, units and GST per category, in first-seen order."""
    groups: Dict[str, ShipmentCategorySummary] = {}
    for item in shipments:
        summary = groups.setdefault(item.category, ShipmentCategorySummary(name=item.category))
        summary.value += item.total_value
        summary.quantity += item.quantity
        summary.gst_amount += item.total_gst()
    return list(groups.values())


def truncate_name(name: str, limit: int = NAME_DISPLAY_LIMIT) -> str:
    return name if len(name) <= limit else name[:limit] + "..."


def stock_level_label(stock: int) -> str:
    if stock > 50:
        return "High"
    if stock > 20:
        return "Medium"
    return "Low"


def stock_levels(products: Iterable[Product], limit: int = 10) -> List[StockLevelEntry]:
    """Top products by current stock."""
    ranked = sorted(products, key=lambda p: p.current_stock, reverse=True)[:limit]
    return [
        StockLevelEntry(
            name=truncate_name(product.name),
            value=product.current_stock,
            level=stock_level_label(product.current_stock),
        )
        for product in ranked
    ]


def report_filename(
    report_type: Union[ReportType, str],
    token: Union[TimeRange, str, None],
    today: Optional[date] = None,
) -> str:
    """e.g. inventory-report-last-30-days-2024-01-15.pdf"""
    today = today or date.today()
    report_type = ReportType(report_type)
    range_text = "-".join(time_range_label(token).lower().split())
    return f"{report_type.value}-report-{range_text}-{today.isoformat()}.pdf"


def daily_report_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"inventory-daily-report-{today.isoformat()}.pdf"


def combined_daily_logs(
    logs: Iterable[StockLog],
    shipment_logs: Iterable[ShipmentLog],
    today: Optional[date] = None,
) -> List[ActivityEntry]:
    """Today's inventory and shipment activity merged, newest first."""
    today = today or date.today()
    entries = [
        ActivityEntry(
            timestamp=log.timestamp,
            product_name=log.product_name,
            action=log.action.value,
            quantity=log.quantity,
            previous_stock=log.previous_stock,
            new_stock=log.new_stock,
            user=log.user,
            notes=log.detailed_notes(),
            source="inventory",
            price_changed=log.price_change is not None,
            supplier_changed=log.supplier_change is not None,
        )
        for log in logs if log.timestamp.date() == today
    ]
    entries.extend(
        ActivityEntry(
            timestamp=log.timestamp,
            product_name=log.product_name,
            action=log.action.value,
            quantity=log.quantity,
            user=log.user,
            notes=log.notes,
            source="shipment",
        )
        for log in shipment_logs if log.timestamp.date() == today
    )
    entries.sort(key=lambda entry: entry.timestamp, reverse=True)
    return entries


class ReportService:
    """Builds analysis reports from ledger snapshots."""

    def __init__(self, low_stock_level: int = 10) -> None:
        """
        Initialize report service.

        Args:
            low_stock_level: Stock at or below which a product counts as low
                in report summaries
        """
        self.low_stock_level = low_stock_level
        self.logger = get_logger("report_service")

    def inventory_summary(self, products: List[Product], filtered_logs: List[StockLog]) -> InventorySummary:
        total_products = len(products)
        average_stock = (
            round(sum(p.current_stock for p in products) / total_products) if total_products else 0
        )
        return InventorySummary(
            total_products=total_products,
            total_value=sum(p.stock_value() for p in products),
            low_stock_items=sum(1 for p in products if p.current_stock <= self.low_stock_level),
            activities=len(filtered_logs),
            average_stock=average_stock,
        )

    def shipment_summary(self, shipments: List[ShipmentItem]) -> ShipmentSummary:
        return ShipmentSummary(
            total_shipments=len(shipments),
            total_quantity=sum(s.quantity for s in shipments),
            total_value=sum(s.total_value for s in shipments),
            gst_collected=sum(s.total_gst() for s in shipments),
            shipping_revenue=sum(s.total_shipping_fee() for s in shipments),
        )

    def recommendations(self, report: AnalysisReport) -> List[str]:
        """
        Rule-based recommendations for the end of a report.

        Args:
            report: Report with summaries and category data filled in

        Returns:
            List of recommendation lines
        """
        lines: List[str] = []

        if report.report_type == ReportType.SHIPMENT:
            total = len(report.shipments)
            average_value = (
                sum(s.total_value for s in report.shipments) / total if total else 0.0
            )
            if total < 5:
                lines.append("Consider increasing shipment frequency to improve cash flow")
            if average_value < 1000:
                lines.append("Focus on higher-value shipments to improve profitability")
            lines.append("Review GST calculations for compliance accuracy")
            lines.append("Optimize shipping fees based on market rates")
            lines.append("Consider bulk shipment discounts for large orders")
        else:
            low_stock = [p for p in report.products if p.current_stock <= self.low_stock_level]
            if low_stock:
                lines.append(f"Restock {len(low_stock)} low-stock items immediately")

            if report.category_data:
                top = max(report.category_data, key=lambda c: c.value)
                lines.append(
                    f"Focus on {top.name} category (highest value: {format_currency(top.value)})"
                )

            if len(report.filtered_logs) < 5:
                lines.append("Increase inventory monitoring frequency")

            products = report.products
            average_stock = (
                sum(p.current_stock for p in products) / len(products) if products else 0
            )
            if average_stock < 20:
                lines.append("Consider increasing overall stock levels")

        lines.append("Implement automated reorder points for critical items")
        lines.append("Review supplier performance and delivery times")
        lines.append("Consider demand forecasting for better planning")
        return lines

    def build_report(
        self,
        report_type: Union[ReportType, str],
        time_range: Union[TimeRange, str],
        products: List[Product],
        logs: List[StockLog],
        shipments: List[ShipmentItem],
        now: Optional[datetime] = None,
    ) -> AnalysisReport:
        """
        Assemble an analysis report.

        Args:
            report_type: inventory or shipment
            time_range: 7d, 30d, 90d or 1y (unknown tokens use 30 days)
            products: Product snapshot
            logs: Stock log snapshot
            shipments: Shipment snapshot
            now: Reference time for the window

        Returns:
            AnalysisReport ready for rendering
        """
        report_type = ReportType(report_type)
        window = parse_time_range(time_range) or TimeRange.LAST_30_DAYS
        filtered = filter_logs_by_range(logs, time_range, now)

        report = AnalysisReport(
            report_type=report_type,
            time_range=window,
            products=products,
            shipments=shipments,
            filtered_logs=filtered,
            category_data=inventory_by_category(products),
            shipment_category_data=shipments_by_category(shipments),
            stock_levels=stock_levels(products),
        )
        if report_type == ReportType.SHIPMENT:
            report.shipment_summary = self.shipment_summary(shipments)
        else:
            report.inventory_summary = self.inventory_summary(products, filtered)
        report.recommendations = self.recommendations(report)

        self.logger.info(
            f"Built {report_type.value} report for {window.label}: "
            f"{len(products)} products, {len(shipments)} shipments, {len(filtered)} activities"
        )
        return report
