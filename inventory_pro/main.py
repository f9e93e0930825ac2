#!/usr/bin/env python3
"""
Main entry point for InventoryPro.

Command-line front end over the inventory and shipment ledger. The ledger
is seeded with demo data on every run; the user session and notification
settings persist in encrypted local storage.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import get_config_manager
from .exceptions import InventoryError
from .models import AlertSeverity, Product, ShipmentAction, StockAction, TimeRange
from .reports import PDFService
from .seed import SAMPLE_CATEGORIES, sample_alerts, sample_logs, sample_products
from .services import (
    AlertDeriver,
    AuthService,
    BrowserChannel,
    EmailChannel,
    ExportService,
    ExportStatus,
    LedgerStore,
    NotificationDispatcher,
    NotificationSettingsStore,
    ReportService,
    SlackChannel,
    format_currency,
)
from .storage import LocalStorage
from .utils import get_logger


class InventoryApplication:
    """Main application controller."""

    def __init__(self) -> None:
        """Initialize the application."""
        self.logger = get_logger("app")
        self.config = get_config_manager()
        self.storage = None
        self.auth = None
        self.browser_channel = None
        self.settings = None
        self.dispatcher = None
        self.alert_deriver = None
        self.ledger = None
        self.report_service = None
        self.export_service = None

    def initialize(self) -> bool:
        """
        Initialize application components.

        Returns:
            True if initialization successful
        """
        try:
            self.logger.debug(f"InventoryPro {self.config.get('app_version', __version__)} starting")

            storage_path = self.config.get_storage_path()
            self.storage = LocalStorage(storage_path, self.config.cipher)
            self.auth = AuthService(self.storage)

            self.browser_channel = BrowserChannel()
            self.settings = NotificationSettingsStore(self.storage, self.browser_channel)
            self.dispatcher = NotificationDispatcher(
                settings_provider=self.settings.get,
                user_provider=self.auth.current_user,
                channels=[self.browser_channel, EmailChannel(), SlackChannel()],
            )

            user = self.auth.current_user()
            user_name = user.name if user else self.config.get("user.default_name", "Current User")

            self.alert_deriver = AlertDeriver(sample_alerts())
            self.ledger = LedgerStore(
                alert_deriver=self.alert_deriver,
                products=sample_products(),
                logs=sorted(sample_logs(), key=lambda log: log.timestamp, reverse=True),
                categories=SAMPLE_CATEGORIES,
                user_name=user_name,
                reject_out_of_range_percentages=self.config.get(
                    "shipments.reject_out_of_range_percentages", True
                ),
            )

            # Alerts for the seeded stock levels are raised quietly
            self.alert_deriver.derive(self.ledger.products)
            self.alert_deriver.add_listener(self.dispatcher.dispatch)

            self.report_service = ReportService(
                low_stock_level=self.config.get("alerts.low_stock_report_level", 10)
            )
            self.export_service = ExportService(
                ledger=self.ledger,
                report_service=self.report_service,
                pdf_service=PDFService(self.config.get("reports.currency_prefix", "RS:")),
                output_dir=self.config.get_report_dir(),
                reset_seconds=self.config.get("export.status_reset_seconds", 3.0),
            )

            self.logger.debug("Application initialized successfully")
            return True

        except Exception as e:
            self.logger.error(f"Initialization failed: {e}")
            return False

    def resolve_product(self, ref: str) -> Optional[Product]:
        """Find a product by id, then by exact name."""
        return self.ledger.get_product(ref) or self.ledger.find_product_by_name(ref)

    def shutdown(self) -> None:
        """Clean shutdown of the application."""
        if self.export_service:
            self.export_service.close()
        self.logger.debug("Application shutdown complete")


def _print_products(products: List[Product]) -> None:
    if not products:
        print("No products found.")
        return

    print(f"{'ID':<38} {'Name':<24} {'Category':<16} {'Stock':>6} {'Min':>5} {'Price':>14}  Status")
    for p in products:
        print(
            f"{p.id:<38} {p.name[:24]:<24} {p.category[:16]:<16} {p.current_stock:>6} "
            f"{p.min_threshold:>5} {format_currency(p.price):>14}  {p.stock_status().value}"
        )


def cmd_login(app: InventoryApplication, args: argparse.Namespace) -> int:
    user = app.auth.login(args.email, args.password)
    app.ledger.set_user(user.name)
    print(f"Logged in as {user.name} ({user.role.value})")
    return 0


def cmd_logout(app: InventoryApplication, args: argparse.Namespace) -> int:
    app.auth.logout()
    app.ledger.set_user(app.config.get("user.default_name", "Current User"))
    print("Logged out")
    return 0


def cmd_whoami(app: InventoryApplication, args: argparse.Namespace) -> int:
    user = app.auth.current_user()
    if user is None:
        print("Not logged in")
        return 1
    print(f"{user.name} <{user.email}> ({user.role.value})")
    return 0


def cmd_products(app: InventoryApplication, args: argparse.Namespace) -> int:
    if args.low_stock:
        products = app.ledger.low_stock_products()
    else:
        products = app.ledger.filter_products(args.search, args.category)
    _print_products(products)

    stats = app.ledger.dashboard_stats()
    print(
        f"\n{stats['total_products']} products, {stats['low_stock_items']} low stock, "
        f"inventory value {format_currency(stats['total_value'])}"
    )
    return 0


def cmd_update_stock(app: InventoryApplication, args: argparse.Namespace) -> int:
    product = app.resolve_product(args.product)
    if product is None:
        print(f"Product not found: {args.product}", file=sys.stderr)
        return 1

    log = app.ledger.adjust_stock(
        product.id,
        args.quantity,
        args.action,
        notes=args.notes,
        new_price=args.price,
        new_supplier=args.supplier,
    )
    print(f"{log.product_name}: {log.previous_stock} -> {log.new_stock} ({log.action.value})")
    if log.notes:
        print(f"  {log.notes}")
    return 0


def cmd_ship(app: InventoryApplication, args: argparse.Namespace) -> int:
    product = app.resolve_product(args.product)
    if product is None:
        print(f"Product not found: {args.product}", file=sys.stderr)
        return 1

    item = app.ledger.add_to_shipment(product.id, args.quantity, args.fee, args.gst, args.notes)
    print(f"Marked {item.quantity} x {item.product_name} for shipment")
    print(f"  Shipping fee: {format_currency(item.total_shipping_fee())}")
    print(f"  GST:          {format_currency(item.total_gst())}")
    print(f"  Total value:  {format_currency(item.total_value)}")
    print(f"  Remaining stock: {product.current_stock}")
    return 0


def cmd_shipments(app: InventoryApplication, args: argparse.Namespace) -> int:
    if args.logs:
        logs = app.ledger.filter_shipment_logs(args.search, args.action)
        if not logs:
            print("No shipment activity found.")
        for log in logs:
            print(
                f"{log.timestamp:%Y-%m-%d %H:%M}  {log.action.value:<20} "
                f"{log.product_name[:24]:<24} {log.quantity:>5}  {log.user}"
            )
        return 0

    items = app.ledger.filter_shipments(args.search, args.category)
    if not items:
        print("No shipments found.")
        return 0

    for item in items:
        print(
            f"{item.id:<38} {item.product_name[:24]:<24} {item.category[:16]:<16} "
            f"{item.quantity:>5} {format_currency(item.total_value):>14}"
        )
    print(
        f"\n{app.ledger.total_shipment_quantity()} units, "
        f"total value {format_currency(app.ledger.total_shipment_value())}"
    )
    return 0


def cmd_alerts(app: InventoryApplication, args: argparse.Namespace) -> int:
    severity = AlertSeverity(args.severity) if args.severity else None
    alerts = app.alert_deriver.active_alerts(severity)
    if not alerts:
        print("No active alerts.")
    for alert in alerts:
        print(f"[{alert.severity.value.upper():<6}] {alert.type_label():<13} {alert.product_name}: {alert.message}")

    if args.notify:
        sent = app.dispatcher.notify_low_stock(app.ledger.products)
        print(f"\nSent {len(sent)} low stock notification(s)")
    return 0


def cmd_settings(app: InventoryApplication, args: argparse.Namespace) -> int:
    if args.reset:
        app.settings.reset()
    for assignment in args.set or []:
        key, _, value = assignment.partition("=")
        app.settings.update_setting(key.strip(), value.strip().lower() in ("1", "true", "on", "yes"))

    for name, enabled in app.settings.get().model_dump().items():
        print(f"{name:<8} {'on' if enabled else 'off'}")
    return 0


def _parse_config_value(raw: str):
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def cmd_config(app: InventoryApplication, args: argparse.Namespace) -> int:
    if args.reset:
        app.config.reset_to_defaults()
        print("Configuration reset to defaults")
        return 0

    if args.key is None:
        print(json.dumps(app.config.config, indent=2))
        return 0

    if args.value is not None:
        app.config.set(args.key, _parse_config_value(args.value))
    print(f"{args.key} = {json.dumps(app.config.get(args.key))}")
    return 0


def _report_status(app: InventoryApplication) -> int:
    state = app.export_service.state
    print(state.message)
    return 0 if state.status == ExportStatus.SUCCESS else 1


def cmd_report(app: InventoryApplication, args: argparse.Namespace) -> int:
    if args.output_dir:
        app.export_service.output_dir = Path(args.output_dir)
    app.export_service.export_report(args.type, args.range)
    return _report_status(app)


def cmd_daily_report(app: InventoryApplication, args: argparse.Namespace) -> int:
    if args.output_dir:
        app.export_service.output_dir = Path(args.output_dir)
    app.export_service.export_daily_report()
    return _report_status(app)


# Commands that act on the ledger need a logged-in user
LOGIN_REQUIRED = {"products", "update-stock", "ship", "shipments", "alerts", "report", "daily-report"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inventory-pro",
        description="InventoryPro inventory and shipment management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s login admin@company.com admin123
  %(prog)s products --category Electronics
  %(prog)s update-stock "Nike Air Max 270" --action add --quantity 10
  %(prog)s ship "iPhone 15 Pro" 2 --fee 10 --gst 18
  %(prog)s report shipment --range 90d
        """
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('login', help='Log in with a demo account')
    p.add_argument('email')
    p.add_argument('password')
    p.set_defaults(func=cmd_login)

    p = sub.add_parser('logout', help='Clear the stored session')
    p.set_defaults(func=cmd_logout)

    p = sub.add_parser('whoami', help='Show the logged-in user')
    p.set_defaults(func=cmd_whoami)

    p = sub.add_parser('products', help='List products')
    p.add_argument('--search', default='', help='Substring of name or category')
    p.add_argument('--category', default='all')
    p.add_argument('--low-stock', action='store_true', help='Only products at or below minimum')
    p.set_defaults(func=cmd_products)

    p = sub.add_parser('update-stock', help='Add, remove or set stock')
    p.add_argument('product', help='Product id or exact name')
    p.add_argument('--action', choices=[a.value for a in StockAction], default='add')
    p.add_argument('--quantity', type=int, required=True)
    p.add_argument('--notes')
    p.add_argument('--price', type=float)
    p.add_argument('--supplier')
    p.set_defaults(func=cmd_update_stock)

    p = sub.add_parser('ship', help='Mark units for shipment')
    p.add_argument('product', help='Product id or exact name')
    p.add_argument('quantity', type=int)
    p.add_argument('--fee', type=float, default=0.0, help='Shipping fee percentage')
    p.add_argument('--gst', type=float, default=0.0, help='GST percentage')
    p.add_argument('--notes')
    p.set_defaults(func=cmd_ship)

    p = sub.add_parser('shipments', help='List shipment lines or shipment activity')
    p.add_argument('--search', default='', help='Substring of product name or category')
    p.add_argument('--category', default='all')
    p.add_argument('--logs', action='store_true', help='Show shipment activity instead of lines')
    p.add_argument('--action', default='all', choices=['all'] + [a.value for a in ShipmentAction])
    p.set_defaults(func=cmd_shipments)

    p = sub.add_parser('alerts', help='Show active alerts')
    p.add_argument('--severity', choices=[s.value for s in AlertSeverity])
    p.add_argument('--notify', action='store_true', help='Send low stock notifications')
    p.set_defaults(func=cmd_alerts)

    p = sub.add_parser('settings', help='Show or change notification settings')
    p.add_argument('--set', action='append', metavar='CHANNEL=on|off')
    p.add_argument('--reset', action='store_true')
    p.set_defaults(func=cmd_settings)

    p = sub.add_parser('config', help='Show or change application configuration')
    p.add_argument('key', nargs='?', help='Dotted key, e.g. export.status_reset_seconds')
    p.add_argument('value', nargs='?', help='New value (JSON, or a plain string)')
    p.add_argument('--reset', action='store_true', help='Restore the default configuration')
    p.set_defaults(func=cmd_config)

    p = sub.add_parser('report', help='Export an analysis report PDF')
    p.add_argument('type', choices=['inventory', 'shipment'])
    p.add_argument('--range', default=TimeRange.LAST_30_DAYS.value, help='7d, 30d, 90d or 1y')
    p.add_argument('--output-dir')
    p.set_defaults(func=cmd_report)

    p = sub.add_parser('daily-report', help="Export today's activity PDF")
    p.add_argument('--output-dir')
    p.set_defaults(func=cmd_daily_report)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code
    """
    args = build_parser().parse_args(argv)

    app = InventoryApplication()
    if not app.initialize():
        print("ERROR: Application initialization failed (see logs/inventory_pro.log)", file=sys.stderr)
        return 1

    try:
        if args.command in LOGIN_REQUIRED and app.auth.current_user() is None:
            print("Please log in first: inventory-pro login EMAIL PASSWORD", file=sys.stderr)
            return 1
        return args.func(app, args)
    except InventoryError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nReceived interrupt signal")
        return 0
    finally:
        app.shutdown()


if __name__ == "__main__":
    sys.exit(main())
