"""
Tests for shipment charge calculation and input validation.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from inventory_pro.exceptions import InvalidPercentageError, InvalidQuantityError
from inventory_pro.services.shipment_calculator import (
    calc_shipment,
    format_currency,
    validate_percentage,
    validate_quantity,
)


def test_calc_shipment_reference_values():
    charges = calc_shipment(100, 10, 5, 2)

    assert charges.shipping_fee == pytest.approx(10.0)
    assert charges.gst_amount == pytest.approx(5.0)
    assert charges.total_value == pytest.approx(230.0)


def test_calc_shipment_zero_rates():
    charges = calc_shipment(899, 0, 0, 3)

    assert charges.shipping_fee == 0
    assert charges.gst_amount == 0
    assert charges.total_value == pytest.approx(2697.0)


def test_calc_shipment_is_not_rounded():
    charges = calc_shipment(99, 12.5, 18, 1)

    assert charges.shipping_fee == pytest.approx(12.375)
    assert charges.gst_amount == pytest.approx(17.82)


@pytest.mark.parametrize("value", [0, 18, 100])
def test_validate_percentage_accepts_bounds(value):
    assert validate_percentage("GST percentage", value) == value


@pytest.mark.parametrize("value", [-1, 100.5, 250])
def test_validate_percentage_rejects_out_of_range(value):
    with pytest.raises(InvalidPercentageError) as exc_info:
        validate_percentage("GST percentage", value)

    assert exc_info.value.code == "INVALID_PERCENTAGE"
    assert exc_info.value.data["field"] == "GST percentage"


@pytest.mark.parametrize("qty", [0, -3])
def test_validate_quantity_rejects_non_positive(qty):
    with pytest.raises(InvalidQuantityError):
        validate_quantity(qty)


def test_format_currency():
    assert format_currency(1234.5) == "RS:1,234.50"
    assert format_currency(0, prefix="$") == "$0.00"
