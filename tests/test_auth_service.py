"""
Tests for demo-account login and session restore.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from inventory_pro.exceptions import AuthenticationError
from inventory_pro.models import UserRole
from inventory_pro.services import AuthService
from inventory_pro.services.auth_service import SESSION_KEY


def test_admin_login(storage):
    auth = AuthService(storage)

    user = auth.login("admin@company.com", "admin123")

    assert user.name == "Admin User"
    assert user.role == UserRole.ADMIN
    assert user.is_admin()
    assert storage.get_json(SESSION_KEY)["email"] == "admin@company.com"


def test_staff_login(storage):
    user = AuthService(storage).login("staff@company.com", "staff123")

    assert user.name == "Staff User"
    assert user.role == UserRole.STAFF
    assert not user.is_admin()


@pytest.mark.parametrize("email,password", [
    ("admin@company.com", "wrong"),
    ("nobody@company.com", "admin123"),
    ("staff@company.com", "admin123"),
])
def test_invalid_credentials(storage, email, password):
    auth = AuthService(storage)

    with pytest.raises(AuthenticationError) as exc_info:
        auth.login(email, password)

    assert exc_info.value.message == "Invalid credentials"
    assert auth.current_user() is None


def test_session_restored_by_new_service(storage):
    AuthService(storage).login("staff@company.com", "staff123")

    restored = AuthService(storage).current_user()

    assert restored is not None
    assert restored.email == "staff@company.com"


def test_logout_clears_session(storage):
    auth = AuthService(storage)
    auth.login("admin@company.com", "admin123")

    auth.logout()

    assert auth.current_user() is None
    assert storage.get_item(SESSION_KEY) is None


def test_corrupt_session_is_discarded(storage):
    storage.set_item(SESSION_KEY, "{not json")

    assert AuthService(storage).current_user() is None
    assert storage.get_item(SESSION_KEY) is None


def test_invalid_session_shape_is_discarded(storage):
    storage.set_json(SESSION_KEY, {"name": "Admin User"})

    assert AuthService(storage).current_user() is None
    assert storage.get_item(SESSION_KEY) is None
