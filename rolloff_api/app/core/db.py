"""
SQLite database integration.

This module provides functions for resolving the database location
(``get_database_path``), obtaining a connection (``get_connection``)
and creating the ``containers`` table on application start
(``init_db``).  SQLite is used as a lightweight embedded database; to
switch to another DBMS you would replace the connection logic and adapt
the SQL in ``services/container_store.py``.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings


SQLITE_URL_PREFIX = "sqlite:///"

SCHEMA = """
CREATE TABLE IF NOT EXISTS containers (
    id TEXT PRIMARY KEY,
    status TEXT NOT NULL,
    location TEXT NOT NULL,
    contents TEXT,
    assigned_to TEXT,
    date_dropped DATE,
    date_dumped DATE,
    weight NUMERIC(10, 2),
    last_updated TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_by TEXT
);

CREATE INDEX IF NOT EXISTS idx_containers_last_updated ON containers(last_updated);
CREATE INDEX IF NOT EXISTS idx_containers_status ON containers(status);
"""


def _py_lower(value):
    return value.lower() if isinstance(value, str) else value


def get_database_path(database_url: str | None = None) -> str:
    """Compute the path to the SQLite database file.

    Accepts either a plain path or a ``sqlite:///`` URL.  Absolute paths
    are returned as is; relative ones are resolved against the package
    root (``rolloff_api/``).
    """
    db_url = database_url if database_url is not None else settings.database_url
    if db_url.startswith(SQLITE_URL_PREFIX):
        db_url = db_url[len(SQLITE_URL_PREFIX):]
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # rolloff_api/
    return str((base_dir / db_url).resolve())


def get_connection(db_path: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name, and ``py_lower()`` is available in SQL for case-insensitive
    matching of non-ASCII text.  Type detection is disabled; dates and
    timestamps come back as the ISO strings they were stored as and are
    parsed by the pydantic schemas.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    # SQLite's lower() only folds ASCII letters.
    conn.create_function("py_lower", 1, _py_lower, deterministic=True)
    return conn


@contextmanager
def get_cursor(db_path: str) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success and always close the connection."""
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def init_db(db_path: str) -> None:
    """Create the ``containers`` table and its indices if they are missing."""
    with get_cursor(db_path) as cursor:
        cursor.executescript(SCHEMA)
