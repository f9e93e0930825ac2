"""
Alert derivation for low and out-of-stock products.

The ledger calls derive() after every product mutation. At most one
unacknowledged alert exists per (product name, alert type).
"""

from typing import Callable, Iterable, List, Optional

from ..models import Alert, AlertSeverity, AlertType, Product
from ..utils import get_logger

AlertListener = Callable[[Alert], None]


def alert_severity(product: Product) -> AlertSeverity:
    """
    Severity for a product at or below its minimum threshold.

    Out of stock and anything at or below half the threshold is high,
    the rest is medium.
    """
    if product.is_out_of_stock():
        return AlertSeverity.HIGH
    if product.current_stock <= product.min_threshold / 2:
        return AlertSeverity.HIGH
    return AlertSeverity.MEDIUM


def alert_type_for(product: Product) -> AlertType:
    return AlertType.OUT_OF_STOCK if product.is_out_of_stock() else AlertType.LOW_STOCK


def alert_message(product: Product) -> str:
    if product.is_out_of_stock():
        return "Product is out of stock"
    return (
        f"Stock level is below minimum threshold "
        f"({product.current_stock}/{product.min_threshold} units)"
    )


class AlertDeriver:
    """Owns the alert list and derives new alerts from stock levels."""

    def __init__(self, alerts: Optional[Iterable[Alert]] = None) -> None:
        """
        Initialize alert deriver.

        Args:
            alerts: Pre-existing alerts (e.g. seeded sample data)
        """
        self.alerts: List[Alert] = list(alerts or [])
        self.listeners: List[AlertListener] = []
        self.logger = get_logger("alert_service")

    def add_listener(self, listener: AlertListener) -> None:
        """Register a callback invoked for every newly emitted alert."""
        self.listeners.append(listener)

    def _has_active(self, product_name: str, alert_type: AlertType) -> bool:
        key = (product_name, alert_type)
        return any(alert.key() == key and not alert.acknowledged for alert in self.alerts)

    def derive(self, products: Iterable[Product]) -> List[Alert]:
        """
        Emit alerts for products at or below their minimum threshold.

        Args:
            products: Current product collection

        Returns:
            Newly emitted alerts (empty when nothing changed)
        """
        new_alerts: List[Alert] = []

        for product in products:
            if not product.is_low_stock():
                continue

            alert_type = alert_type_for(product)
            if self._has_active(product.name, alert_type):
                continue

            alert = Alert(
                type=alert_type,
                product_name=product.name,
                message=alert_message(product),
                severity=alert_severity(product),
            )
            self.alerts.append(alert)
            new_alerts.append(alert)
            self.logger.warning(
                f"Alert raised: {alert.type.value} for {product.name} "
                f"({product.current_stock}/{product.min_threshold}, {alert.severity.value})"
            )

        for alert in new_alerts:
            for listener in self.listeners:
                listener(alert)

        return new_alerts

    def get_alert(self, alert_id: str) -> Optional[Alert]:
        for alert in self.alerts:
            if alert.id == alert_id:
                return alert
        return None

    def acknowledge(self, alert_id: str) -> Optional[Alert]:
        """
        Acknowledge an alert.

        The product is left untouched; callers use the returned alert's
        product name to follow up with a restock.

        Args:
            alert_id: Alert ID

        Returns:
            The acknowledged alert, or None if not found
        """
        alert = self.get_alert(alert_id)
        if alert is None:
            self.logger.warning(f"Alert {alert_id} not found")
            return None

        alert.acknowledged = True
        self.logger.info(f"Acknowledged alert for {alert.product_name}")
        return alert

    def dismiss(self, alert_id: str) -> bool:
        """Dismiss an alert without follow-up."""
        alert = self.get_alert(alert_id)
        if alert is None:
            return False
        alert.acknowledged = True
        self.logger.info(f"Dismissed alert for {alert.product_name}")
        return True

    def active_alerts(self, severity: Optional[AlertSeverity] = None) -> List[Alert]:
        """
        Get unacknowledged alerts.

        Args:
            severity: Optional severity filter

        Returns:
            List of alerts, oldest first
        """
        return [
            alert for alert in self.alerts
            if not alert.acknowledged and (severity is None or alert.severity == severity)
        ]
