"""
Persisted notification preferences.
"""

from typing import Optional

from pydantic import ValidationError as ModelValidationError

from ..exceptions import ValidationError
from ..models import NotificationSettings
from ..storage import LocalStorage
from ..utils import get_logger
from .notification_service import BrowserChannel, BrowserPermission

SETTINGS_KEY = "inventory-notification-settings"


class NotificationSettingsStore:
    """Loads, updates and persists the {browser, email, slack} flags."""

    def __init__(self, storage: LocalStorage, browser_channel: Optional[BrowserChannel] = None) -> None:
        """
        Initialize settings store.

        Args:
            storage: Local storage holding the settings
            browser_channel: Channel asked for permission when browser
                notifications are switched on
        """
        self.storage = storage
        self.browser_channel = browser_channel
        self.logger = get_logger("settings_service")
        self.settings = self._load()

    def _load(self) -> NotificationSettings:
        try:
            data = self.storage.get_json(SETTINGS_KEY)
        except ValueError as e:
            self.logger.error(f"Failed to parse notification settings: {e}")
            return NotificationSettings()

        if data is None:
            return NotificationSettings()

        try:
            return NotificationSettings(**data)
        except (TypeError, ModelValidationError) as e:
            self.logger.error(f"Failed to parse notification settings: {e}")
            return NotificationSettings()

    def _save(self) -> None:
        self.storage.set_json(SETTINGS_KEY, self.settings.model_dump())

    def get(self) -> NotificationSettings:
        return self.settings

    def update_setting(self, key: str, value: bool) -> NotificationSettings:
        """
        Change one channel flag and persist it.

        Enabling browser notifications requests permission if it has not
        been decided yet.

        Raises:
            ValidationError: unknown channel name
        """
        if key not in NotificationSettings.model_fields:
            raise ValidationError(f"Unknown notification channel: {key}", key=key)

        self.settings = self.settings.model_copy(update={key: bool(value)})
        self._save()
        self.logger.info(f"Notification setting {key} = {bool(value)}")

        if (
            key == "browser"
            and value
            and self.browser_channel is not None
            and self.browser_channel.permission == BrowserPermission.DEFAULT
        ):
            self.browser_channel.request_permission()

        return self.settings

    def reset(self) -> NotificationSettings:
        """Restore and persist the default settings."""
        self.settings = NotificationSettings()
        self._save()
        return self.settings
