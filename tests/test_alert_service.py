"""
Tests for alert derivation, acknowledgement and dismissal.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from inventory_pro.models import Alert, AlertSeverity, AlertType
from inventory_pro.services import AlertDeriver
from inventory_pro.services.alert_service import alert_message, alert_severity


def test_low_stock_medium_severity(product_factory, deriver):
    alerts = deriver.derive([product_factory(current_stock=8, min_threshold=15)])

    assert len(alerts) == 1
    assert alerts[0].type == AlertType.LOW_STOCK
    assert alerts[0].severity == AlertSeverity.MEDIUM
    assert alerts[0].message == "Stock level is below minimum threshold (8/15 units)"
    assert alerts[0].acknowledged is False


def test_low_stock_high_severity_at_half_threshold(product_factory):
    assert alert_severity(product_factory(current_stock=7, min_threshold=15)) == AlertSeverity.HIGH
    assert alert_severity(product_factory(current_stock=5, min_threshold=10)) == AlertSeverity.HIGH
    assert alert_severity(product_factory(current_stock=6, min_threshold=10)) == AlertSeverity.MEDIUM


def test_out_of_stock(product_factory, deriver):
    alerts = deriver.derive([product_factory(current_stock=0)])

    assert alerts[0].type == AlertType.OUT_OF_STOCK
    assert alerts[0].severity == AlertSeverity.HIGH
    assert alerts[0].message == "Product is out of stock"


def test_stock_at_threshold_alerts(product_factory, deriver):
    assert len(deriver.derive([product_factory(current_stock=15, min_threshold=15)])) == 1


def test_stock_above_threshold_does_not_alert(product_factory, deriver):
    assert deriver.derive([product_factory(current_stock=16, min_threshold=15)]) == []
    assert deriver.alerts == []


def test_derive_is_idempotent(product_factory, deriver):
    products = [product_factory(current_stock=8)]

    assert len(deriver.derive(products)) == 1
    assert deriver.derive(products) == []
    assert len(deriver.alerts) == 1


def test_existing_alert_suppresses_duplicate(product_factory):
    existing = Alert(
        type=AlertType.LOW_STOCK,
        product_name="Samsung Galaxy S24",
        message="Stock level is below minimum threshold (8/15 units)",
        severity=AlertSeverity.HIGH,
    )
    deriver = AlertDeriver([existing])

    assert deriver.derive([product_factory(current_stock=8)]) == []


def test_out_of_stock_is_distinct_from_low_stock(product_factory, deriver):
    deriver.derive([product_factory(current_stock=3)])
    alerts = deriver.derive([product_factory(current_stock=0)])

    assert [a.type for a in alerts] == [AlertType.OUT_OF_STOCK]
    assert len(deriver.active_alerts()) == 2


def test_acknowledged_alert_refires_on_next_derivation(product_factory, deriver):
    products = [product_factory(current_stock=8)]
    first = deriver.derive(products)[0]

    acknowledged = deriver.acknowledge(first.id)
    assert acknowledged is first
    assert acknowledged.acknowledged is True
    assert deriver.active_alerts() == []

    again = deriver.derive(products)
    assert len(again) == 1
    assert again[0].id != first.id


def test_ledger_mutation_refires_after_acknowledge(ledger, deriver):
    ledger.update_stock("p1", 8, "remove")
    deriver.acknowledge(deriver.alerts[0].id)

    ledger.update_stock("p2", 44, "remove")

    active = deriver.active_alerts()
    assert len(active) == 1
    assert active[0].product_name == "Samsung Galaxy S24"


def test_acknowledge_unknown_alert(deriver):
    assert deriver.acknowledge("missing") is None


def test_dismiss_hides_alert(product_factory, deriver):
    alert = deriver.derive([product_factory(current_stock=8)])[0]

    assert deriver.dismiss(alert.id) is True
    assert deriver.active_alerts() == []
    assert deriver.dismiss("missing") is False


def test_active_alerts_filter_by_severity(product_factory, deriver):
    deriver.derive([
        product_factory(id="a", name="A", current_stock=8),
        product_factory(id="b", name="B", current_stock=2),
    ])

    high = deriver.active_alerts(AlertSeverity.HIGH)
    assert [a.product_name for a in high] == ["B"]


def test_listeners_receive_new_alerts(product_factory, deriver):
    received = []
    deriver.add_listener(received.append)

    deriver.derive([product_factory(current_stock=8)])
    deriver.derive([product_factory(current_stock=8)])

    assert len(received) == 1


def test_alert_message_formats_counts(product_factory):
    assert alert_message(product_factory(current_stock=3, min_threshold=15)) == (
        "Stock level is below minimum threshold (3/15 units)"
    )


def test_type_label():
    alert = Alert(
        type=AlertType.OUT_OF_STOCK, product_name="X", message="m", severity=AlertSeverity.HIGH
    )
    assert alert.type_label() == "OUT OF STOCK"


def test_alert_key_ignores_severity_and_message():
    first = Alert(type=AlertType.LOW_STOCK, product_name="Nike Air Max 270",
                  message="a", severity=AlertSeverity.MEDIUM)
    second = Alert(type=AlertType.LOW_STOCK, product_name="Nike Air Max 270",
                   message="b", severity=AlertSeverity.HIGH)

    assert first.key() == second.key() == ("Nike Air Max 270", AlertType.LOW_STOCK)


def test_out_of_stock_and_low_stock_are_separate_keys(product_factory, deriver):
    deriver.derive([product_factory(current_stock=8)])
    alerts = deriver.derive([product_factory(current_stock=0)])

    assert [a.type for a in alerts] == [AlertType.OUT_OF_STOCK]
    assert product_factory(current_stock=0).is_out_of_stock()
    assert not product_factory(current_stock=1).is_out_of_stock()
