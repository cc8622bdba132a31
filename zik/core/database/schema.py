"""
Database schema definitions for zik.

This module holds the ordered DDL statements and the schema manager that
applies them on every startup.
"""

import sqlite3
from typing import List

from loguru import logger

from zik.core.database.queries import (
    CREATE_ALBUM_NAME_INDEX,
    CREATE_ALBUM_TABLE,
    CREATE_ARTIST_NAME_INDEX,
    CREATE_ARTIST_NAME_UNIQUE_INDEX,
    CREATE_ARTIST_TABLE,
    CREATE_CONFIG_TABLE,
    CREATE_TRACK_TABLE,
)
from zik.core.database.query_helpers import savepoint

# STRICT tables appeared in SQLite 3.37.0
STRICT_TABLES_MIN_VERSION = (3, 37, 0)


def supports_strict_tables() -> bool:
    return sqlite3.sqlite_version_info >= STRICT_TABLES_MIN_VERSION


def get_schema_statements() -> List[str]:
    """
    Get the DDL statements, in dependency order.

    Returns:
        Statements safe to run repeatedly (all use IF NOT EXISTS)
    """
    strict = " STRICT" if supports_strict_tables() else ""
    return [
        CREATE_CONFIG_TABLE,
        CREATE_ARTIST_TABLE.format(strict=strict),
        CREATE_ARTIST_NAME_INDEX,
        CREATE_ARTIST_NAME_UNIQUE_INDEX,
        CREATE_ALBUM_TABLE.format(strict=strict),
        CREATE_ALBUM_NAME_INDEX,
        CREATE_TRACK_TABLE.format(strict=strict),
    ]


def init_database(conn: sqlite3.Connection) -> int:
    """
    Create every table and index that does not exist yet.

    A failing statement is logged and skipped so one bad statement does
    not prevent later runs; everything runs inside one savepoint.

    Args:
        conn: Connection opened in autocommit mode

    Returns:
        Number of statements that failed
    """
    failures = 0
    with savepoint(conn, "init_schema"):
        for ddl in get_schema_statements():
            try:
                conn.execute(ddl)
            except sqlite3.Error as e:
                failures += 1
                logger.warning(f"unable to execute statement, err: {e}")

    if failures:
        logger.warning(f"{failures} schema statement(s) failed, will retry next run")
    else:
        logger.debug("schema ensured")
    return failures
