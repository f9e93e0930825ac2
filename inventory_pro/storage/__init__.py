"""
Persistent storage for InventoryPro.
"""

from .local_storage import LocalStorage

__all__ = ["LocalStorage"]
