"""
Alert notification channels and dispatcher.

Browser notifications need a one-time permission grant. Email and Slack
delivery are simulated: the message is built and logged, or handed to an
injected sender.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from pydantic import BaseModel

from ..models import Alert, AlertSeverity, NotificationSettings, Product, User
from ..utils import get_logger
from .alert_service import alert_message, alert_severity, alert_type_for

Sender = Callable[[Dict[str, Any]], None]


class BrowserPermission(str, Enum):
    """Browser notification permission state."""
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


class BrowserNotification(BaseModel):
    """A desktop/browser notification."""

    title: str
    body: str
    tag: str
    require_interaction: bool = False
    silent: bool = False
    auto_close_seconds: Optional[int] = None


class NotificationChannel(ABC):
    """Abstract base class for delivery channels."""

    name = "channel"

    def __init__(self) -> None:
        self.logger = get_logger(f"notifications.{self.name}")

    @abstractmethod
    def send(self, alert: Alert, user: User) -> bool:
        """
        Deliver an alert.

        Args:
            alert: Alert to deliver
            user: Recipient

        Returns:
            True if delivered, False if dropped
        """
        pass


class BrowserChannel(NotificationChannel):
    """Browser notifications, gated on a permission grant."""

    name = "browser"

    def __init__(
        self,
        permission_prompt: Optional[Callable[[], bool]] = None,
        notifier: Optional[Callable[[BrowserNotification], None]] = None,
        permission: BrowserPermission = BrowserPermission.DEFAULT,
    ) -> None:
        """
        Initialize browser channel.

        Args:
            permission_prompt: Asks the user for permission, returns True when
                granted. Runs on a background thread.
            notifier: Displays a notification (logged when omitted)
            permission: Initial permission state
        """
        super().__init__()
        self.permission_prompt = permission_prompt or (lambda: True)
        self.notifier = notifier
        self.permission = permission
        self._lock = threading.Lock()
        self._pending: Optional[threading.Thread] = None

    def request_permission(self) -> Optional[threading.Thread]:
        """
        Ask for permission without blocking.

        Returns:
            The thread running the prompt, or None if a request is already
            pending or the permission was already decided
        """
        with self._lock:
            if self.permission != BrowserPermission.DEFAULT:
                return None
            if self._pending is not None and self._pending.is_alive():
                return None
            self._pending = threading.Thread(
                target=self._run_prompt, name="browser-permission", daemon=True
            )
            self._pending.start()
            return self._pending

    def _run_prompt(self) -> None:
        try:
            granted = bool(self.permission_prompt())
        except Exception as e:
            self.logger.error(f"Permission prompt failed: {e}")
            granted = False

        with self._lock:
            self.permission = BrowserPermission.GRANTED if granted else BrowserPermission.DENIED

        if not granted:
            self.logger.warning("Browser notifications permission denied")

    def build_notification(self, alert: Alert) -> BrowserNotification:
        return BrowserNotification(
            title=f"InventoryPro Alert - {alert.product_name}",
            body=alert.message,
            tag=f"inventory-{alert.product_name}",
            require_interaction=alert.severity == AlertSeverity.HIGH,
            silent=alert.severity == AlertSeverity.LOW,
            auto_close_seconds=None if alert.severity == AlertSeverity.HIGH else 10,
        )

    def send(self, alert: Alert, user: User) -> bool:
        if self.permission == BrowserPermission.DEFAULT:
            # Alert is dropped, not queued, until permission is granted
            self.request_permission()
            return False
        if self.permission == BrowserPermission.DENIED:
            return False

        notification = self.build_notification(alert)
        if self.notifier is not None:
            self.notifier(notification)
        self.logger.info(
            f"Browser notification sent to {user.name} ({user.role.value}): {alert.message}"
        )
        return True


class EmailChannel(NotificationChannel):
    """Simulated email delivery."""

    name = "email"

    def __init__(self, sender: Optional[Sender] = None) -> None:
        super().__init__()
        self.sender = sender

    def build_message(self, alert: Alert, user: User) -> Dict[str, Any]:
        return {
            "to": user.email,
            "subject": f"InventoryPro Alert: {alert.product_name}",
            "body": alert.message,
            "priority": alert.severity.value,
            "timestamp": alert.timestamp.isoformat(),
        }

    def send(self, alert: Alert, user: User) -> bool:
        message = self.build_message(alert, user)
        if self.sender is not None:
            self.sender(message)
        self.logger.info(f"Email notification sent to {user.email}: {message['subject']}")
        return True


SLACK_COLORS = {
    AlertSeverity.HIGH: "danger",
    AlertSeverity.MEDIUM: "warning",
    AlertSeverity.LOW: "good",
}


class SlackChannel(NotificationChannel):
    """Simulated Slack delivery."""

    name = "slack"

    def __init__(self, sender: Optional[Sender] = None, channel: str = "#inventory-alerts") -> None:
        super().__init__()
        self.sender = sender
        self.channel = channel

    def build_message(self, alert: Alert, user: User) -> Dict[str, Any]:
        return {
            "channel": self.channel,
            "username": "InventoryPro Bot",
            "text": f"*{alert.severity.value.upper()} PRIORITY ALERT*",
            "attachments": [
                {
                    "color": SLACK_COLORS[alert.severity],
                    "fields": [
                        {"title": "Product", "value": alert.product_name, "short": True},
                        {"title": "Alert Type", "value": alert.type_label(), "short": True},
                        {"title": "Message", "value": alert.message, "short": False},
                        {"title": "Assigned to", "value": f"{user.name} ({user.role.value})", "short": True},
                    ],
                    "footer": "InventoryPro",
                    "ts": int(alert.timestamp.timestamp()),
                }
            ],
        }

    def send(self, alert: Alert, user: User) -> bool:
        message = self.build_message(alert, user)
        if self.sender is not None:
            self.sender(message)
        self.logger.info(f"Slack notification sent to {self.channel}: {alert.product_name}")
        return True


class NotificationDispatcher:
    """Fans alerts out to the channels enabled in the user's settings."""

    def __init__(
        self,
        settings_provider: Callable[[], NotificationSettings],
        user_provider: Callable[[], Optional[User]],
        channels: Optional[Iterable[NotificationChannel]] = None,
    ) -> None:
        """
        Initialize dispatcher.

        Args:
            settings_provider: Returns the current notification settings
            user_provider: Returns the logged-in user, if any
            channels: Delivery channels (browser, email and Slack by default)
        """
        if channels is None:
            channels = [BrowserChannel(), EmailChannel(), SlackChannel()]
        self.channels: Dict[str, NotificationChannel] = {c.name: c for c in channels}
        self.settings_provider = settings_provider
        self.user_provider = user_provider
        self.notified_products: Set[str] = set()
        self.logger = get_logger("notification_dispatcher")

    @property
    def browser(self) -> Optional[BrowserChannel]:
        channel = self.channels.get(BrowserChannel.name)
        return channel if isinstance(channel, BrowserChannel) else None

    def dispatch(self, alert: Alert, user: Optional[User] = None) -> Dict[str, bool]:
        """
        Send an alert to every enabled channel.

        A failing channel is logged and does not stop the others.

        Args:
            alert: Alert to deliver
            user: Recipient (defaults to the logged-in user)

        Returns:
            Delivery result per attempted channel
        """
        user = user or self.user_provider()
        if user is None:
            self.logger.debug(f"No user logged in, alert for {alert.product_name} not dispatched")
            return {}

        settings = self.settings_provider()
        results: Dict[str, bool] = {}

        for name in settings.enabled_channels():
            channel = self.channels.get(name)
            if channel is None:
                continue
            try:
                results[name] = channel.send(alert, user)
            except Exception as e:
                self.logger.error(f"{name} notification failed for {alert.product_name}: {e}")
                results[name] = False

        return results

    def notify_low_stock(self, products: Iterable[Product], user: Optional[User] = None) -> List[Alert]:
        """
        Notify once per product while it stays at or below its threshold.

        Products that have recovered are forgotten so a later drop notifies
        again.

        Returns:
            Alerts that were dispatched
        """
        user = user or self.user_provider()
        if user is None:
            return []

        products = list(products)
        sent: List[Alert] = []

        for product in products:
            if not product.is_low_stock() or product.id in self.notified_products:
                continue
            alert = Alert(
                type=alert_type_for(product),
                product_name=product.name,
                message=alert_message(product),
                severity=alert_severity(product),
                timestamp=datetime.now(),
            )
            self.dispatch(alert, user)
            self.notified_products.add(product.id)
            sent.append(alert)

        low_ids = {p.id for p in products if p.is_low_stock()}
        self.notified_products &= low_ids
        return sent
