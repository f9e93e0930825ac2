"""
InventoryPro - inventory and shipment management.

Product ledger with stock logs, threshold alerts, shipment fee/GST
calculation and PDF report export.
"""

__version__ = "0.1.0"
