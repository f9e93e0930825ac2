"""
Configuration management for InventoryPro.

Settings live in config/app_config.json. Keys missing from the file are
filled from the built-in defaults, so a config written by an older version
keeps working. The Fernet key protecting local storage sits beside it.
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from cryptography.fernet import Fernet

DEFAULT_CONFIG: Dict[str, Any] = {
    "app_version": "0.1.0",
    "storage": {
        "path": "data/local_storage.enc",
    },
    "reports": {
        "output_dir": "reports",
        "currency_prefix": "RS:",
    },
    "export": {
        "status_reset_seconds": 3.0,
    },
    "alerts": {
        "low_stock_report_level": 10,
    },
    "shipments": {
        "reject_out_of_range_percentages": True,
    },
    "user": {
        "default_name": "Current User",
    },
    "logging": {
        "level": "INFO",
        "max_file_size_mb": 10,
        "backup_count": 5,
    },
}


def _merge_defaults(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively layer overrides on top of a copy of defaults."""
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_defaults(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """
    Application settings plus the local storage encryption key.

    Values are addressed with dot notation, e.g. "export.status_reset_seconds".
    """

    def __init__(self, config_dir: str = "config") -> None:
        """
        Initialize configuration manager.

        Args:
            config_dir: Directory holding app_config.json and .key
        """
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.config_file = self.config_dir / "app_config.json"
        self.key_file = self.config_dir / ".key"
        self.config: Dict[str, Any] = {}

        self.cipher = Fernet(self._load_or_create_key())
        self.load_config()

    def _load_or_create_key(self) -> bytes:
        if self.key_file.exists():
            return self.key_file.read_bytes()

        key = Fernet.generate_key()
        self.key_file.write_bytes(key)
        # Owner-only on Unix-like systems
        if os.name != 'nt':
            os.chmod(self.key_file, 0o600)
        return key

    def load_config(self) -> None:
        """Read the config file; the first run writes the defaults out."""
        if not self.config_file.exists():
            self.config = copy.deepcopy(DEFAULT_CONFIG)
            self.save_config()
            return

        with open(self.config_file, 'r', encoding='utf-8') as f:
            self.config = _merge_defaults(DEFAULT_CONFIG, json.load(f))

    def save_config(self) -> None:
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a value by dotted key.

        Args:
            key: e.g. "reports.output_dir"
            default: Returned when any part of the path is missing

        Returns:
            Configuration value
        """
        node: Any = self.config
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return default if node is None else node

    def set(self, key: str, value: Any, save: bool = True) -> None:
        """
        Store a value by dotted key, creating intermediate sections.

        Args:
            key: e.g. "export.status_reset_seconds"
            value: New value
            save: Write the file immediately
        """
        *sections, leaf = key.split('.')
        node = self.config
        for section in sections:
            node = node.setdefault(section, {})
        node[leaf] = value

        if save:
            self.save_config()

    def reset_to_defaults(self) -> None:
        self.config = copy.deepcopy(DEFAULT_CONFIG)
        self.save_config()

    def get_storage_path(self) -> Path:
        """Encrypted local storage file."""
        return Path(self.get("storage.path", DEFAULT_CONFIG["storage"]["path"]))

    def get_report_dir(self) -> Path:
        """Directory for exported PDF reports."""
        return Path(self.get("reports.output_dir", DEFAULT_CONFIG["reports"]["output_dir"]))


# Global configuration instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """
    Get global configuration manager instance.

    Returns:
        ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def reset_config_manager() -> None:
    """Drop the global instance so the next call re-reads the files (tests)."""
    global _config_manager
    _config_manager = None
