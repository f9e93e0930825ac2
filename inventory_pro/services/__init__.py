"""
Business logic services for InventoryPro.
"""

from .alert_service import AlertDeriver
from .auth_service import AuthService
from .export_service import ExportService, ExportState, ExportStatus
from .ledger_store import LedgerSnapshot, LedgerStore
from .notification_service import (
    BrowserChannel,
    BrowserPermission,
    EmailChannel,
    NotificationDispatcher,
    SlackChannel,
)
from .report_service import ReportService
from .settings_service import NotificationSettingsStore
from .shipment_calculator import ShipmentCharges, calc_shipment, format_currency

__all__ = [
    "AlertDeriver",
    "AuthService",
    "ExportService",
    "ExportState",
    "ExportStatus",
    "LedgerSnapshot",
    "LedgerStore",
    "BrowserChannel",
    "BrowserPermission",
    "EmailChannel",
    "SlackChannel",
    "NotificationDispatcher",
    "ReportService",
    "NotificationSettingsStore",
    "ShipmentCharges",
    "calc_shipment",
    "format_currency",
]
