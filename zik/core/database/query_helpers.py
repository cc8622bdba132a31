"""
Helper functions for transaction scopes on autocommit connections.
"""

import sqlite3
from contextlib import contextmanager
from typing import Iterator


@contextmanager
def savepoint(conn: sqlite3.Connection, name: str) -> Iterator[sqlite3.Connection]:
    """
    Run the block inside a named savepoint.

    Works with or without an enclosing transaction. On any exception the
    work done inside the block is rolled back and the savepoint released
    before the exception propagates.

    Args:
        conn: Connection opened with ``isolation_level=None``
        name: Savepoint name, a plain SQL identifier
    """
    conn.execute(f"SAVEPOINT {name}")
    try:
        yield conn
    except BaseException:
        conn.execute(f"ROLLBACK TO {name}")
        conn.execute(f"RELEASE {name}")
        raise
    conn.execute(f"RELEASE {name}")
