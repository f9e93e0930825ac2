"""
Tests for the encrypted local storage file.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from cryptography.fernet import Fernet

from inventory_pro.config import get_config_manager
from inventory_pro.main import InventoryApplication
from inventory_pro.storage import LocalStorage
from inventory_pro.utils import encrypt_payload


def test_values_persist_across_instances(storage):
    storage.set_json("inventory-user", {"name": "Admin User"})
    storage.set_item("theme", "dark")

    reopened = LocalStorage(storage.path, get_config_manager().cipher)

    assert reopened.get_json("inventory-user") == {"name": "Admin User"}
    assert reopened.get_item("theme") == "dark"
    assert sorted(reopened.keys()) == ["inventory-user", "theme"]


def test_file_is_encrypted(storage):
    storage.set_json("inventory-user", {"email": "admin@company.com"})

    assert b"admin@company.com" not in storage.path.read_bytes()


def test_remove_and_clear(storage):
    storage.set_item("a", "1")
    storage.set_item("b", "2")

    storage.remove_item("a")
    assert storage.get_item("a") is None
    assert storage.get_json("a", default={}) == {}

    storage.clear()
    assert storage.keys() == []


def test_wrong_key_starts_empty(storage):
    storage.set_item("a", "1")

    other = LocalStorage(storage.path, Fernet(Fernet.generate_key()))

    assert other.get_item("a") is None


@pytest.mark.parametrize("contents", [b"{not json", b'["inventory-user"]', b"\xff\xfe"])
def test_unreadable_contents_start_empty(storage, contents):
    storage.path.parent.mkdir(parents=True, exist_ok=True)
    storage.path.write_bytes(encrypt_payload(contents, storage.cipher))

    reopened = LocalStorage(storage.path, storage.cipher)

    assert reopened.keys() == []
    reopened.set_item("theme", "dark")
    assert LocalStorage(storage.path, storage.cipher).get_item("theme") == "dark"


def test_application_starts_with_corrupt_storage(storage):
    storage.path.parent.mkdir(parents=True, exist_ok=True)
    storage.path.write_bytes(encrypt_payload(b"{not json", storage.cipher))

    app = InventoryApplication()

    assert app.initialize() is True
    assert app.auth.current_user() is None
    app.shutdown()
