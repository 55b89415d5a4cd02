# persistence/db.py
"""
SQLite database connection and schema management.

A Database is constructed explicitly and handed to the stores that use
it; nothing connects at import time. Each thread gets its own
connection (an in-memory database shares one), and close() releases
all of them.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager, nullcontext
from pathlib import Path
from typing import Iterator, List, Optional, Union

_logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS accounts (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        access_token TEXT NOT NULL UNIQUE,
        created_at TEXT NOT NULL
    )
    """,
)


class Database:
    """
    Handle on one SQLite database.

    Usage:
        db = Database("data/auth.db")
        db.connect()
        with db.connection() as conn:
            conn.execute("SELECT ...")
        db.close()

    A file database gets one connection per thread. An in-memory
    database exists only inside the connection that created it, so every
    thread shares that single connection and takes turns on it.
    """

    def __init__(self, path: Union[str, Path], timeout: float = 30.0) -> None:
        self._path = str(path)
        self._timeout = timeout
        self._in_memory = self._path == MEMORY_PATH
        self._local = threading.local()
        self._shared: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._memory_lock = threading.RLock()
        self._connections: List[sqlite3.Connection] = []
        self._connected = False

    @property
    def path(self) -> str:
        return self._path

    @property
    def is_connected(self) -> bool:
        return self._connected

    def _open(self) -> sqlite3.Connection:
        if not self._in_memory:
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            self._path,
            timeout=self._timeout,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        with self._lock:
            self._connections.append(conn)
        return conn

    def _connection_for_thread(self) -> sqlite3.Connection:
        if self._in_memory:
            with self._lock:
                if self._shared is None:
                    self._shared = self._open()
                return self._shared

        conn = getattr(self._local, "connection", None)
        if conn is None:
            conn = self._open()
            self._local.connection = conn
        return conn

    def _get_connection(self) -> sqlite3.Connection:
        """Get the connection for the calling thread."""
        if not self._connected:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._connection_for_thread()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection; commit on success, roll back on error."""
        conn = self._get_connection()
        guard = self._memory_lock if self._in_memory else nullcontext()
        with guard:
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    def connect(self) -> None:
        """
        Open the database and create the schema.

        Safe to call multiple times (idempotent). The handle only counts
        as connected once the schema exists.
        """
        with self._lock:
            if self._connected:
                return

            try:
                conn = self._connection_for_thread()
                for statement in SCHEMA:
                    conn.execute(statement)
                conn.commit()
            except sqlite3.Error:
                self._release_connections()
                raise

            self._connected = True

        _logger.info(f"Database initialized at {self._path}")

    def _release_connections(self) -> None:
        with self._lock:
            connections, self._connections = self._connections, []
            self._shared = None
            self._connected = False
        for conn in connections:
            conn.close()
        self._local = threading.local()

    def close(self) -> None:
        """Close every connection this handle opened."""
        self._release_connections()
        _logger.debug(f"Database closed: {self._path}")

    def reset(self) -> None:
        """Drop all tables and recreate them (for testing)."""
        with self.connection() as conn:
            conn.execute("DROP TABLE IF EXISTS accounts")
            for statement in SCHEMA:
                conn.execute(statement)
