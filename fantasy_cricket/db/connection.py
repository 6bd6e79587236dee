"""SQLite connection manager with WAL mode and foreign keys."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from fantasy_cricket.paths import DB_PATH


def _ensure_schema(conn: sqlite3.Connection) -> None:
    """Create or upgrade tables (handles mid-run DB deletion)."""
    from fantasy_cricket.db.migrations import LATEST_VERSION, apply_migrations, get_schema_version

    if get_schema_version(conn) < LATEST_VERSION:
        apply_migrations(conn)


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    """Open a SQLite connection with WAL journal mode, FKs, and Row factory.

    Parameters
    ----------
    db_path:
        Path to the database file.  Defaults to ``DB_PATH`` from
        :mod:`fantasy_cricket.paths`.
    """
    db = Path(db_path or DB_PATH)
    db.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    _ensure_schema(conn)
    return conn


@contextmanager
def connect(db_path: Path | None = None) -> Generator[sqlite3.Connection, None, None]:
    """Context manager that yields a connection and closes it on exit.

    Usage::

        with connect() as conn:
            conn.execute("SELECT ...")
    """
    conn = get_connection(db_path)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Generator[sqlite3.Connection, None, None]:
    """Run a block as one write transaction; roll back on any exception.

    Takes the write lock up front (``BEGIN IMMEDIATE``) so read-then-write
    sequences such as contest joins cannot interleave.
    """
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    else:
        conn.commit()
