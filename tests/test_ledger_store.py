"""
Tests for the ledger store: stock updates, shipments and queries.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from inventory_pro.exceptions import (
    InsufficientStockError,
    InvalidPercentageError,
    InvalidPriceError,
    InvalidQuantityError,
    InvalidStockError,
)
from inventory_pro.models import AlertType, ShipmentAction, StockAction, format_price
from inventory_pro.services import LedgerStore


def test_update_stock_logs_absolute_change(ledger):
    log = ledger.update_stock("p2", 30, "remove", "Sold to customer")

    assert log.quantity == 15
    assert log.previous_stock == 45
    assert log.new_stock == 30
    assert log.user == "Admin User"
    assert ledger.logs[0] is log
    assert ledger.get_product("p2").current_stock == 30
    assert ledger.get_product("p2").last_updated == date.today()


@pytest.mark.parametrize("new_stock", [0, 10, 45, 60, 200])
def test_logged_quantity_matches_delta(ledger, new_stock):
    log = ledger.update_stock("p2", new_stock, StockAction.SET)

    assert log.quantity == abs(new_stock - 45)


def test_update_stock_rejects_negative(ledger):
    with pytest.raises(InvalidStockError):
        ledger.update_stock("p2", -1, "set")

    assert ledger.get_product("p2").current_stock == 45
    assert ledger.logs == []


def test_update_stock_rejects_negative_price(ledger):
    with pytest.raises(InvalidPriceError):
        ledger.update_stock("p2", 40, "set", new_price=-50)

    product = ledger.get_product("p2")
    assert product.price == 150
    assert product.current_stock == 45
    assert ledger.logs == []


def test_adjust_stock_rejects_negative_price(ledger):
    with pytest.raises(InvalidPriceError):
        ledger.adjust_stock("p2", 1, "add", new_price=-0.01)

    assert ledger.get_product("p2").current_stock == 45
    assert ledger.logs == []


def test_update_stock_missing_product_is_ignored(ledger):
    assert ledger.update_stock("missing", 5, "set") is None
    assert ledger.logs == []


def test_update_stock_records_price_and_supplier_change(ledger):
    log = ledger.update_stock("p2", 50, "add", "Restock", new_price=175, new_supplier="Nike Direct")

    assert log.price_change.from_price == 150
    assert log.price_change.to_price == 175
    assert log.supplier_change.from_supplier == "Nike"
    assert log.supplier_change.to_supplier == "Nike Direct"
    assert log.notes == (
        "Restock | Price updated: RS:150 → RS:175 | Supplier updated: Nike → Nike Direct"
    )

    product = ledger.get_product("p2")
    assert product.price == 175
    assert product.supplier == "Nike Direct"


def test_unchanged_price_is_not_logged(ledger):
    log = ledger.update_stock("p2", 46, "add", new_price=150)

    assert log.price_change is None
    assert log.notes == ""


def test_adjust_stock_by_quantity(ledger):
    assert ledger.adjust_stock("p2", 5, "add").new_stock == 50
    assert ledger.adjust_stock("p2", 60, "remove").new_stock == 0
    assert ledger.adjust_stock("p2", 12, "set").new_stock == 12


def test_add_product_registers_category_and_logs(ledger):
    product = ledger.add_product({
        "name": "  Levi's 501 Jeans ",
        "category": "Clothing",
        "current_stock": 28,
        "min_threshold": 10,
        "max_threshold": 60,
        "price": 89,
        "supplier": "Levi Strauss & Co.",
    })

    assert product.name == "Levi's 501 Jeans"
    assert "Clothing" in ledger.categories
    assert ledger.logs[0].notes == "New product added to inventory"
    assert ledger.logs[0].new_stock == 28
    assert ledger.find_product_by_name("Levi's 501 Jeans") is product


def test_add_category_ignores_duplicates(ledger):
    assert ledger.add_category("Toys") is True
    assert ledger.add_category("Toys") is False
    assert ledger.categories.count("Toys") == 1


def test_add_to_shipment_reduces_stock(ledger):
    item = ledger.add_to_shipment("p1", 2, 10, 5)

    assert item.shipping_fee == pytest.approx(10.0)
    assert item.gst_amount == pytest.approx(5.0)
    assert item.total_value == pytest.approx(230.0)
    assert ledger.get_product("p1").current_stock == 18

    shipment_log = ledger.shipment_logs[0]
    assert shipment_log.action == ShipmentAction.MARKED_FOR_SHIPMENT
    assert shipment_log.stock_change == -2

    stock_log = ledger.logs[0]
    assert stock_log.action == StockAction.REMOVE
    assert stock_log.notes == "Marked 2 units for shipment"


def test_add_to_shipment_rejects_more_than_stock(ledger):
    with pytest.raises(InsufficientStockError) as exc_info:
        ledger.add_to_shipment("p1", 21, 10, 5)

    assert exc_info.value.available == 20
    assert exc_info.value.requested == 21
    assert exc_info.value.message == (
        "Only 20 units are available in stock. Cannot mark 21 units for shipment."
    )
    assert ledger.get_product("p1").current_stock == 20
    assert ledger.shipments == []


def test_add_to_shipment_can_empty_stock(ledger):
    ledger.add_to_shipment("p1", 20, 0, 0)

    assert ledger.get_product("p1").current_stock == 0


def test_add_to_shipment_validates_inputs(ledger):
    with pytest.raises(InvalidQuantityError):
        ledger.add_to_shipment("p1", 0, 10, 5)
    with pytest.raises(InvalidPercentageError):
        ledger.add_to_shipment("p1", 1, 150, 5)
    with pytest.raises(InvalidPercentageError):
        ledger.add_to_shipment("p1", 1, 10, -5)

    assert ledger.shipments == []


def test_out_of_range_percentages_allowed_when_configured(product_factory):
    ledger = LedgerStore(products=[product_factory()], reject_out_of_range_percentages=False)

    item = ledger.add_to_shipment("p1", 1, 150, 0)

    assert item.shipping_fee == pytest.approx(150.0)


def test_add_to_shipment_missing_product_is_ignored(ledger):
    assert ledger.add_to_shipment("missing", 1, 10, 5) is None


def test_remove_from_shipment_restores_stock(ledger):
    item = ledger.add_to_shipment("p1", 7, 10, 18)
    removed = ledger.remove_from_shipment(item.id)

    assert removed.id == item.id
    assert ledger.shipments == []
    assert ledger.get_product("p1").current_stock == 20
    assert ledger.logs[0].action == StockAction.ADD
    assert ledger.logs[0].notes == "Returned 7 units from shipment to inventory"


def test_remove_from_shipment_unknown_id(ledger):
    assert ledger.remove_from_shipment("missing") is None


def test_remove_from_shipment_after_product_deleted(ledger):
    item = ledger.add_to_shipment("p1", 3, 0, 0)
    ledger.products = [p for p in ledger.products if p.id != "p1"]

    assert ledger.remove_from_shipment(item.id) is item
    assert ledger.shipments == []


def test_shipment_totals(ledger):
    ledger.add_to_shipment("p1", 2, 10, 5)
    ledger.add_to_shipment("p2", 1, 0, 18)

    assert ledger.total_shipment_quantity() == 3
    assert ledger.total_shipment_value() == pytest.approx(230 + 177)
    assert ledger.total_shipping_fees() == pytest.approx(20.0)
    assert ledger.total_gst_amount() == pytest.approx(10 + 27)

    by_category = {c.name: c for c in ledger.shipments_by_category()}
    assert by_category["Electronics"].quantity == 2
    assert by_category["Footwear"].value == pytest.approx(177.0)


def test_filter_products(ledger):
    assert [p.id for p in ledger.filter_products("nike")] == ["p2"]
    assert [p.id for p in ledger.filter_products("", "Home & Kitchen")] == ["p3"]
    assert [p.id for p in ledger.filter_products("electro")] == ["p1"]
    assert ledger.filter_products("nike", "Electronics") == []
    assert len(ledger.filter_products()) == 3


def test_filter_logs(ledger):
    ledger.update_stock("p1", 25, "add")
    ledger.update_stock("p2", 40, "remove")

    assert len(ledger.filter_logs(action="remove")) == 1
    assert len(ledger.filter_logs("admin")) == 2
    assert ledger.filter_logs("nobody") == []


def test_mutation_runs_alert_derivation(ledger, deriver):
    ledger.update_stock("p1", 8, "remove")

    assert len(deriver.alerts) == 1
    assert deriver.alerts[0].type == AlertType.LOW_STOCK
    assert deriver.alerts[0].product_name == "Samsung Galaxy S24"


def test_snapshot_is_isolated(ledger):
    snapshot = ledger.snapshot()
    ledger.update_stock("p1", 1, "set")
    ledger.add_category("Toys")

    assert snapshot.products[0].current_stock == 20
    assert snapshot.logs == []
    assert "Toys" not in snapshot.categories


def test_dashboard_stats(ledger):
    stats = ledger.dashboard_stats()

    assert stats["total_products"] == 3
    assert stats["low_stock_items"] == 0
    assert stats["total_value"] == pytest.approx(20 * 100 + 45 * 150 + 30 * 99)
    assert stats["categories"] == 3


def test_price_notes_keep_every_digit(ledger):
    log = ledger.update_stock("p2", 45, "set", new_price=12999.99)

    assert log.notes == "Price updated: RS:150 → RS:12999.99"
    assert log.detailed_notes() == (
        "Price updated: RS:150 → RS:12999.99 | Price: RS:150 → RS:12999.99"
    )

    log = ledger.update_stock("p2", 45, "set", new_price=1234567)
    assert log.notes == "Price updated: RS:12999.99 → RS:1234567"


@pytest.mark.parametrize("price, text", [
    (150, "150"),
    (150.0, "150"),
    (175.5, "175.5"),
    (12999.99, "12999.99"),
    (1234567, "1234567"),
    (0, "0"),
])
def test_format_price(price, text):
    assert format_price(price) == text


def test_shipment_not_recorded_when_stock_update_fails(ledger):
    def failing_hook(products):
        raise RuntimeError("hook failed")

    ledger.add_post_mutation_hook(failing_hook)

    with pytest.raises(RuntimeError):
        ledger.add_to_shipment("p1", 2, 10, 5)

    assert ledger.shipments == []
    assert ledger.shipment_logs == []


def test_post_mutation_hooks_see_products(ledger):
    seen = []
    ledger.add_post_mutation_hook(lambda products: seen.append(len(products)))

    ledger.update_stock("p1", 19, "remove")
    ledger.add_to_shipment("p2", 1, 0, 0)

    assert seen == [3, 3]


def test_set_user_recorded_on_new_logs(ledger):
    ledger.set_user("Staff User")

    log = ledger.update_stock("p1", 21, "add")
    ledger.add_to_shipment("p2", 1, 0, 0)

    assert log.user == "Staff User"
    assert ledger.shipment_logs[0].user == "Staff User"


def test_filter_shipments(ledger):
    ledger.add_to_shipment("p1", 2, 10, 5)
    ledger.add_to_shipment("p2", 1, 0, 18)

    assert [s.product_id for s in ledger.filter_shipments("nike")] == ["p2"]
    assert [s.product_id for s in ledger.filter_shipments("", "Electronics")] == ["p1"]
    assert len(ledger.filter_shipments()) == 2
    assert ledger.filter_shipments("nike", "Electronics") == []


def test_filter_shipment_logs(ledger):
    ledger.add_to_shipment("p1", 2, 10, 5)
    ledger.add_to_shipment("p3", 4, 0, 0)

    assert len(ledger.filter_shipment_logs("admin")) == 2
    assert [log.product_name for log in ledger.filter_shipment_logs("instant")] == [
        "Instant Pot Duo 7-in-1"
    ]
    assert len(ledger.filter_shipment_logs(action="marked_for_shipment")) == 2
    assert ledger.filter_shipment_logs(action="shipment_created") == []
