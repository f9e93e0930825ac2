"""
Tests for persisted notification settings.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from inventory_pro.exceptions import ValidationError
from inventory_pro.services import BrowserChannel, BrowserPermission, NotificationSettingsStore
from inventory_pro.services.settings_service import SETTINGS_KEY


def test_defaults(storage):
    settings = NotificationSettingsStore(storage).get()

    assert settings.browser is True
    assert settings.email is True
    assert settings.slack is False
    assert settings.enabled_channels() == ["browser", "email"]


def test_update_persists(storage):
    NotificationSettingsStore(storage).update_setting("slack", True)

    reloaded = NotificationSettingsStore(storage).get()

    assert reloaded.slack is True
    assert storage.get_json(SETTINGS_KEY)["slack"] is True


def test_unknown_channel_rejected(storage):
    store = NotificationSettingsStore(storage)

    with pytest.raises(ValidationError):
        store.update_setting("sms", True)


def test_corrupt_settings_fall_back_to_defaults(storage):
    storage.set_item(SETTINGS_KEY, "{broken")

    assert NotificationSettingsStore(storage).get().model_dump() == {
        "browser": True, "email": True, "slack": False,
    }


def test_enabling_browser_requests_permission(storage):
    channel = BrowserChannel(permission_prompt=lambda: True)
    store = NotificationSettingsStore(storage, channel)

    store.update_setting("browser", False)
    assert channel.permission == BrowserPermission.DEFAULT

    store.update_setting("browser", True)
    channel._pending.join(timeout=5)
    assert channel.permission == BrowserPermission.GRANTED


def test_reset(storage):
    store = NotificationSettingsStore(storage)
    store.update_setting("email", False)

    assert store.reset().email is True
    assert NotificationSettingsStore(storage).get().email is True
