"""
Configuration management for zik.

Configuration lives in the ``config`` table of the catalogue database.
Only a fixed set of keys is recognized and every value is validated
before it is stored.
"""

import os
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger

from zik.core.database import (
    GET_ALL_CONFIG,
    GET_CONFIG_VALUE,
    UPSERT_CONFIG_VALUE,
    DatabaseManager,
)
from zik.core.errors import (
    ConfigStorageError,
    InvalidKeyError,
    InvalidScanParallelismError,
    LibraryPathDoesNotExistError,
    LibraryPathNotADirectoryError,
    LibraryPathUnreadableError,
    NoValueError,
)

LIBRARY = "library"
SCAN_PARALLELISM = "scan_parallelism"


def validate_library_path(value: str) -> str:
    """
    Check that ``value`` is an existing, readable directory.

    Returns:
        The canonical absolute path, as stored in the database
    """
    path = Path(value).expanduser()
    if not path.exists():
        raise LibraryPathDoesNotExistError(path)
    if not path.is_dir():
        raise LibraryPathNotADirectoryError(path)
    try:
        path.stat()
        if not os.access(path, os.R_OK | os.X_OK):
            raise PermissionError(f"permission denied: '{path}'")
        canonical = path.resolve(strict=True)
    except OSError as e:
        raise LibraryPathUnreadableError(path, e) from e
    return str(canonical)


def validate_scan_parallelism(value: str) -> int:
    """Parse a non-negative decimal integer."""
    if not value.isascii() or not value.isdigit():
        raise InvalidScanParallelismError(value)
    return int(value)


@dataclass(frozen=True)
class ConfigKey:
    """A recognized configuration key and its validator."""

    name: str
    validate: Callable[[str], Any]
    description: str = ""


CONFIG_KEYS: Dict[str, ConfigKey] = {
    LIBRARY: ConfigKey(
        LIBRARY, validate_library_path, "Root directory of the music library"
    ),
    SCAN_PARALLELISM: ConfigKey(
        SCAN_PARALLELISM,
        validate_scan_parallelism,
        "Number of scan workers (stored, the scan is currently serial)",
    ),
}


def is_valid_key(key: str) -> bool:
    return key in CONFIG_KEYS


class ConfigStore:
    """Reads and writes the recognized configuration keys."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def _check_key(self, key: str) -> ConfigKey:
        try:
            return CONFIG_KEYS[key]
        except KeyError:
            raise InvalidKeyError(key) from None

    def get(self, key: str) -> Any:
        """
        Get the stored value of ``key``.

        Raises:
            InvalidKeyError: if the key is not recognized
            NoValueError: if the key has never been set
        """
        self._check_key(key)
        try:
            row = self.db.execute_fetchone(GET_CONFIG_VALUE, (key,))
        except sqlite3.Error as e:
            raise ConfigStorageError(e) from e
        if row is None:
            raise NoValueError(key)
        return row[0]

    def get_or_default(self, key: str, default: Any = None) -> Any:
        try:
            return self.get(key)
        except NoValueError:
            return default

    def set(self, key: str, raw_value: str) -> Any:
        """
        Validate and store ``raw_value`` under ``key``.

        Returns:
            The value as stored (canonical path, parsed integer)
        """
        config_key = self._check_key(key)
        value = config_key.validate(raw_value)
        try:
            self.db.execute_commit(UPSERT_CONFIG_VALUE, (key, value))
        except sqlite3.Error as e:
            raise ConfigStorageError(e) from e
        logger.info(f"config {key} set to {value!r}")
        return value

    def all(self) -> List[Tuple[str, Any]]:
        """Get every stored (key, value) pair, in insertion order."""
        try:
            rows = self.db.execute_fetchall(GET_ALL_CONFIG)
        except sqlite3.Error as e:
            raise ConfigStorageError(e) from e
        return [(row[0], row[1]) for row in rows]

    def library_path(self) -> Optional[Path]:
        value = self.get_or_default(LIBRARY)
        return Path(value) if value is not None else None

    def scan_parallelism(self) -> int:
        return int(self.get_or_default(SCAN_PARALLELISM, 1))


def format_config_row(key: str, value: Any) -> str:
    """Render one row the way the config command prints it."""
    return f'{key} = "{value}"'
