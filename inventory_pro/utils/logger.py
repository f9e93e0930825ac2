"""
Logging infrastructure for InventoryPro.

One application logger ("inventory_pro") owns a rotating file handler and a
console handler; every component logs through a child of it, e.g.
"inventory_pro.ledger_store", so handlers are configured exactly once.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from ..config.config_manager import get_config_manager

APP_LOGGER_NAME = "inventory_pro"

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


class InventoryLogger:
    """
    Application logger for InventoryPro.

    The file receives everything down to DEBUG; the console threshold comes
    from "logging.level" in the config.
    """

    def __init__(self, log_dir: str = "logs", log_file: str = "inventory_pro.log") -> None:
        """
        Initialize logger.

        Args:
            log_dir: Directory for log files
            log_file: Log file name
        """
        self.log_file = Path(log_dir) / log_file
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        config = get_config_manager()
        level_name = str(config.get("logging.level", "INFO")).upper()
        self.console_level = getattr(logging, level_name, logging.INFO)
        self.max_bytes = int(config.get("logging.max_file_size_mb", 10)) * 1024 * 1024
        self.backup_count = int(config.get("logging.backup_count", 5))

        self.logger = logging.getLogger(APP_LOGGER_NAME)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        self.close()
        for handler in self._build_handlers():
            self.logger.addHandler(handler)

    def _build_handlers(self) -> List[logging.Handler]:
        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(self.console_level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))

        return [file_handler, console_handler]

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """
        Get the application logger or one of its children.

        Args:
            name: Component name (e.g. "ledger_store")

        Returns:
            logging.Logger instance
        """
        if not name or name == APP_LOGGER_NAME:
            return self.logger
        return self.logger.getChild(name)

    def close(self) -> None:
        """Close and detach all handlers."""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)


# Global logger instance
_logger: Optional[InventoryLogger] = None


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get application logger.

    Args:
        name: Optional child logger name

    Returns:
        Logger instance
    """
    global _logger
    if _logger is None:
        _logger = InventoryLogger()
    return _logger.get_logger(name)


def reset_loggers() -> None:
    """Close handlers and drop the global logger (tests)."""
    global _logger
    if _logger is not None:
        _logger.close()
    _logger = None
