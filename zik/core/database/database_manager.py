#!/usr/bin/env python3
"""
Database Manager for zik

Locates the per-user data directory, opens the SQLite database and
provides the transaction scopes used by the config and scan commands.
"""

import os
import sqlite3
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple, Union

from loguru import logger

from zik.core.database.schema import init_database
from zik.core.errors import DatabaseOpenError, DataDirectoryNotFoundError

APP_QUALIFIER = "fr.rischmann.zik"
DB_FILENAME = "data.db"
DATA_DIR_ENV = "ZIK_DATA_DIR"


def default_data_dir() -> Path:
    """
    Get the per-application data directory for the current platform.

    ``ZIK_DATA_DIR`` overrides the whole directory.

    Raises:
        DataDirectoryNotFoundError: if the platform convention cannot be resolved
    """
    override = os.getenv(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()

    try:
        home = Path.home()
    except RuntimeError as e:
        raise DataDirectoryNotFoundError() from e

    if sys.platform == "darwin":
        base = home / "Library" / "Application Support"
    elif sys.platform.startswith("win"):
        appdata = os.getenv("APPDATA")
        base = Path(appdata) if appdata else home / "AppData" / "Roaming"
    else:
        xdg = os.getenv("XDG_DATA_HOME")
        base = Path(xdg) if xdg else home / ".local" / "share"
    return base / APP_QUALIFIER


def default_db_path() -> Path:
    return default_data_dir() / DB_FILENAME


class DatabaseManager:
    """Owns the SQLite connection for one command invocation."""

    def __init__(self, db_path: Union[str, Path, None] = None):
        self.db_path = Path(db_path) if db_path is not None else default_db_path()
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self.open()
        assert self._conn is not None
        return self._conn

    def open(self) -> sqlite3.Connection:
        """
        Open the database, creating its directory and schema if needed.

        The connection runs in autocommit mode; writes are grouped with
        ``transaction()``.
        """
        if self._conn is not None:
            return self._conn

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, isolation_level=None)
        except (OSError, sqlite3.Error) as e:
            raise DatabaseOpenError(self.db_path, e) from e

        try:
            conn.execute("PRAGMA foreign_keys = ON")
            init_database(conn)
        except sqlite3.Error as e:
            conn.close()
            raise DatabaseOpenError(self.db_path, e) from e

        logger.debug(f"opened database {self.db_path}")
        self._conn = conn
        return conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "DatabaseManager":
        self.open()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Exclusive write transaction: committed on success, rolled back on
        any exception.
        """
        conn = self.conn
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK")
            logger.debug("transaction rolled back")
            raise
        conn.execute("COMMIT")

    def execute_fetchone(
        self, query: str, params: tuple = ()
    ) -> Optional[Tuple[Any, ...]]:
        return self.conn.execute(query, params).fetchone()

    def execute_fetchall(self, query: str, params: tuple = ()) -> List[Tuple[Any, ...]]:
        return self.conn.execute(query, params).fetchall()

    def execute_commit(self, query: str, params: tuple = ()) -> None:
        with self.transaction() as conn:
            conn.execute(query, params)
