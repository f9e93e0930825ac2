"""
Encrypted key-value storage.

Plays the role of browser local storage: a handful of JSON values (the user
session, notification preferences) kept in one Fernet-encrypted file.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from cryptography.fernet import Fernet

from ..utils import decrypt_payload, encrypt_payload, get_logger


class LocalStorage:
    """Persistent JSON key-value store."""

    def __init__(self, path: Path, cipher: Fernet) -> None:
        """
        Initialize local storage.

        Args:
            path: Location of the encrypted storage file
            cipher: Fernet instance used for the file
        """
        self.path = Path(path)
        self.cipher = cipher
        self.logger = get_logger("local_storage")
        self._items: Dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return

        with open(self.path, 'rb') as f:
            data = decrypt_payload(f.read(), self.cipher)

        if data is None:
            self.logger.error(f"Could not decrypt {self.path}, starting with empty storage")
            return

        try:
            items = json.loads(data.decode('utf-8'))
        except ValueError as e:
            self.logger.error(f"Corrupt storage file {self.path} ({e}), starting with empty storage")
            return

        if not isinstance(items, dict):
            self.logger.error(f"Unexpected storage contents in {self.path}, starting with empty storage")
            return

        self._items = items

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = encrypt_payload(json.dumps(self._items).encode('utf-8'), self.cipher)
        with open(self.path, 'wb') as f:
            f.write(payload)
        if os.name != 'nt':
            os.chmod(self.path, 0o600)

    def get_item(self, key: str) -> Optional[str]:
        """Raw string stored under key, like localStorage.getItem."""
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._save()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._save()

    def get_json(self, key: str, default: Any = None) -> Any:
        """
        Get a JSON value.

        Raises:
            json.JSONDecodeError: if the stored string is not valid JSON
        """
        raw = self.get_item(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value))

    def clear(self) -> None:
        self._items.clear()
        self._save()

    def keys(self) -> list:
        return list(self._items)
