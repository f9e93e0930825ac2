"""
Demo ledger data.

Eight products across four categories, three standing alerts, a few
historical stock logs and a handful of logs dated today so the daily
report has something to export.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional

from .models import Alert, Product, StockLog

SAMPLE_CATEGORIES = ["Electronics", "Footwear", "Clothing", "Home & Kitchen"]

SAMPLE_PRODUCTS = [
    {
        "id": "1",
        "name": "iPhone 15 Pro",
        "category": "Electronics",
        "current_stock": 25,
        "min_threshold": 10,
        "max_threshold": 100,
        "price": 999,
        "supplier": "Apple Inc.",
        "last_updated": date(2024, 1, 15),
    },
    {
        "id": "2",
        "name": "Samsung Galaxy S24",
        "category": "Electronics",
        "current_stock": 8,
        "min_threshold": 15,
        "max_threshold": 80,
        "price": 899,
        "supplier": "Samsung",
        "last_updated": date(2024, 1, 14),
    },
    {
        "id": "3",
        "name": 'MacBook Pro 16"',
        "category": "Electronics",
        "current_stock": 12,
        "min_threshold": 5,
        "max_threshold": 30,
        "price": 2499,
        "supplier": "Apple Inc.",
        "last_updated": date(2024, 1, 13),
    },
    {
        "id": "4",
        "name": "Nike Air Max 270",
        "category": "Footwear",
        "current_stock": 45,
        "min_threshold": 20,
        "max_threshold": 100,
        "price": 150,
        "supplier": "Nike",
        "last_updated": date(2024, 1, 12),
    },
    {
        "id": "5",
        "name": "Adidas Ultraboost 22",
        "category": "Footwear",
        "current_stock": 3,
        "min_threshold": 15,
        "max_threshold": 75,
        "price": 180,
        "supplier": "Adidas",
        "last_updated": date(2024, 1, 11),
    },
    {
        "id": "6",
        "name": "Levi's 501 Jeans",
        "category": "Clothing",
        "current_stock": 28,
        "min_threshold": 10,
        "max_threshold": 60,
        "price": 89,
        "supplier": "Levi Strauss & Co.",
        "last_updated": date(2024, 1, 10),
    },
    {
        "id": "7",
        "name": "Sony WH-1000XM5",
        "category": "Electronics",
        "current_stock": 18,
        "min_threshold": 8,
        "max_threshold": 40,
        "price": 399,
        "supplier": "Sony",
        "last_updated": date(2024, 1, 9),
    },
    {
        "id": "8",
        "name": "Instant Pot Duo 7-in-1",
        "category": "Home & Kitchen",
        "current_stock": 6,
        "min_threshold": 12,
        "max_threshold": 50,
        "price": 99,
        "supplier": "Instant Brands",
        "last_updated": date(2024, 1, 8),
    },
]

SAMPLE_ALERTS = [
    {
        "id": "1",
        "type": "low_stock",
        "product_name": "Samsung Galaxy S24",
        "message": "Stock level is below minimum threshold (8/15 units)",
        "severity": "high",
        "timestamp": datetime(2024, 1, 15, 10, 30),
    },
    {
        "id": "2",
        "type": "low_stock",
        "product_name": "Adidas Ultraboost 22",
        "message": "Critical stock level - only 3 units remaining",
        "severity": "high",
        "timestamp": datetime(2024, 1, 15, 9, 15),
    },
    {
        "id": "3",
        "type": "reorder",
        "product_name": "Instant Pot Duo 7-in-1",
        "message": "Reorder recommended - stock below threshold",
        "severity": "medium",
        "timestamp": datetime(2024, 1, 15, 8, 45),
    },
]

HISTORICAL_LOGS = [
    {
        "id": "1",
        "product_name": "iPhone 15 Pro",
        "action": "add",
        "quantity": 50,
        "previous_stock": 75,
        "new_stock": 125,
        "user": "Admin User",
        "timestamp": datetime(2024, 1, 15, 14, 30),
        "notes": "New shipment received from supplier",
    },
    {
        "id": "2",
        "product_name": "Samsung Galaxy S24",
        "action": "remove",
        "quantity": 7,
        "previous_stock": 15,
        "new_stock": 8,
        "user": "Staff User",
        "timestamp": datetime(2024, 1, 15, 12, 15),
        "notes": "Sold to customer - Order #12345",
    },
    {
        "id": "3",
        "product_name": 'MacBook Pro 16"',
        "action": "add",
        "quantity": 4,
        "previous_stock": 8,
        "new_stock": 12,
        "user": "Admin User",
        "timestamp": datetime(2024, 1, 15, 11, 0),
        "notes": "Stock adjustment after inventory count",
    },
]

# (hours ago, log fields)
TODAYS_LOGS = [
    (0, {
        "id": "today-1",
        "product_name": "iPhone 15 Pro",
        "action": "add",
        "quantity": 25,
        "previous_stock": 25,
        "new_stock": 50,
        "user": "Admin User",
        "notes": "New shipment received from Apple",
        "price_change": {"from": 999, "to": 1099},
    }),
    (2, {
        "id": "today-2",
        "product_name": "Samsung Galaxy S24",
        "action": "remove",
        "quantity": 5,
        "previous_stock": 8,
        "new_stock": 3,
        "user": "Staff User",
        "notes": "Sold to customer - Order #12346",
    }),
    (4, {
        "id": "today-3",
        "product_name": 'MacBook Pro 16"',
        "action": "add",
        "quantity": 3,
        "previous_stock": 12,
        "new_stock": 15,
        "user": "Admin User",
        "notes": "Inventory count adjustment",
        "supplier_change": {"from": "Apple Inc.", "to": "Apple Authorized Reseller"},
    }),
    (6, {
        "id": "today-4",
        "product_name": "Nike Air Max 270",
        "action": "add",
        "quantity": 30,
        "previous_stock": 45,
        "new_stock": 75,
        "user": "Staff User",
        "notes": "Restocking popular item",
    }),
    (1, {
        "id": "today-5",
        "product_name": "Sony WH-1000XM5",
        "action": "remove",
        "quantity": 3,
        "previous_stock": 18,
        "new_stock": 15,
        "user": "Admin User",
        "notes": "Damaged items removed from inventory",
        "price_change": {"from": 399, "to": 379},
    }),
]


def sample_products() -> List[Product]:
    return [Product(**data) for data in SAMPLE_PRODUCTS]


def sample_alerts() -> List[Alert]:
    return [Alert(**data) for data in SAMPLE_ALERTS]


def sample_logs(now: Optional[datetime] = None) -> List[StockLog]:
    """
    Historical logs followed by logs stamped relative to now.

    Today's logs are clamped to midnight so they stay on today's date
    when the demo runs early in the morning.
    """
    now = now or datetime.now()
    midnight = datetime.combine(now.date(), datetime.min.time())

    logs = [StockLog(**data) for data in HISTORICAL_LOGS]
    for hours_ago, data in TODAYS_LOGS:
        timestamp = max(now - timedelta(hours=hours_ago), midnight)
        logs.append(StockLog(timestamp=timestamp, **data))
    return logs
