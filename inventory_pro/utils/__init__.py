"""
Utility functions for InventoryPro.
"""

from .logger import (
    InventoryLogger,
    get_logger,
    reset_loggers,
)
from .security import (
    decrypt_payload,
    encrypt_payload,
    hash_password,
    verify_password,
)

__all__ = [
    # Security
    "hash_password",
    "verify_password",
    "encrypt_payload",
    "decrypt_payload",
    # Logging
    "InventoryLogger",
    "get_logger",
    "reset_loggers",
]
