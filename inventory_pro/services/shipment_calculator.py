"""
Shipment charge calculations.

Fees and GST are charged per unit as a percentage of the unit price; the
line total multiplies the loaded unit price by the quantity. No rounding is
applied here, display code rounds with format_currency.
"""

from typing import NamedTuple

from ..exceptions import InvalidPercentageError, InvalidQuantityError


class ShipmentCharges(NamedTuple):
    """Per-unit fee and GST plus the line total."""

    shipping_fee: float
    gst_amount: float
    total_value: float


def calc_shipment(price_per_unit: float, fee_pct: float, gst_pct: float, qty: int) -> ShipmentCharges:
    """
    Compute the charges for a shipment line.

    Args:
        price_per_unit: Unit price of the product
        fee_pct: Shipping fee as a percentage of the unit price
        gst_pct: GST as a percentage of the unit price
        qty: Number of units

    Returns:
        ShipmentCharges(shipping_fee, gst_amount, total_value)
    """
    shipping_fee = price_per_unit * fee_pct / 100
    gst_amount = price_per_unit * gst_pct / 100
    total_value = (price_per_unit + shipping_fee + gst_amount) * qty
    return ShipmentCharges(shipping_fee, gst_amount, total_value)


def validate_percentage(name: str, value: float) -> float:
    """Reject percentages outside 0-100."""
    if value < 0 or value > 100:
        raise InvalidPercentageError(
            f"{name} must be between 0 and 100 (got {value:g})",
            field=name,
            value=value,
        )
    return value


def validate_quantity(qty: int) -> int:
    """Reject non-positive quantities."""
    if qty <= 0:
        raise InvalidQuantityError(quantity=qty)
    return qty


def format_currency(amount: float, prefix: str = "RS:") -> str:
    """Format an amount for display, e.g. RS:1,234.50."""
    return f"{prefix}{amount:,.2f}"
