"""
Shared fixtures for InventoryPro tests.

Every test runs in its own temporary working directory so config, key,
log and storage files never leak between tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from inventory_pro.config import get_config_manager, reset_config_manager
from inventory_pro.models import Product
from inventory_pro.services import AlertDeriver, LedgerStore
from inventory_pro.storage import LocalStorage
from inventory_pro.utils import reset_loggers


@pytest.fixture(autouse=True)
def isolated_workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    reset_loggers()
    reset_config_manager()
    yield tmp_path
    reset_loggers()
    reset_config_manager()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "data" / "local_storage.enc", get_config_manager().cipher)


def make_product(**overrides) -> Product:
    fields = {
        "id": "p1",
        "name": "Samsung Galaxy S24",
        "category": "Electronics",
        "current_stock": 20,
        "min_threshold": 15,
        "max_threshold": 80,
        "price": 100.0,
        "supplier": "Samsung",
    }
    fields.update(overrides)
    return Product(**fields)


@pytest.fixture
def deriver():
    return AlertDeriver()


@pytest.fixture
def ledger(deriver):
    products = [
        make_product(),
        make_product(
            id="p2", name="Nike Air Max 270", category="Footwear",
            current_stock=45, min_threshold=20, max_threshold=100, price=150.0, supplier="Nike",
        ),
        make_product(
            id="p3", name="Instant Pot Duo 7-in-1", category="Home & Kitchen",
            current_stock=30, min_threshold=12, max_threshold=50, price=99.0, supplier="Instant Brands",
        ),
    ]
    return LedgerStore(alert_deriver=deriver, products=products, user_name="Admin User")


@pytest.fixture
def product_factory():
    return make_product
