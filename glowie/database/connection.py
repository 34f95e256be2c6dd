"""
Database connection management with thread safety.

Provides ConnectionManager for short-lived SQLite connections in WAL mode.
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator


# Seconds a connection waits on another process's lock before failing
BUSY_TIMEOUT = 30.0


class ConnectionManager:
    """
    Opens one SQLite connection per unit of work.

    Every `connection()` block runs in its own transaction and closes its
    connection on exit. Writers take a RESERVED lock up front (BEGIN
    IMMEDIATE) and serialize on a process-local lock, so concurrent
    upserts queue instead of failing with SQLITE_BUSY mid-transaction.
    """

    def __init__(self, db_path: str):
        """
        Initialize connection manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self._write_lock = threading.Lock()
        self._ensure_directory()
        self._enable_wal()

    def _ensure_directory(self):
        """Ensure the directory for the database file exists."""
        db_path = Path(self.db_path).resolve()
        db_dir = db_path.parent

        if db_dir and db_dir != db_path:
            db_dir.mkdir(parents=True, exist_ok=True)

    def _enable_wal(self):
        """Switch the file to WAL; the mode is persistent once set."""
        conn = sqlite3.connect(self.db_path, timeout=BUSY_TIMEOUT)
        try:
            conn.execute("PRAGMA journal_mode=WAL")
        finally:
            conn.close()

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self.db_path,
            timeout=BUSY_TIMEOUT,
            isolation_level=None,
        )
        conn.row_factory = sqlite3.Row
        # NORMAL is durable across application crashes in WAL mode
        conn.execute("PRAGMA synchronous=NORMAL")
        return conn

    @contextmanager
    def connection(self, exclusive: bool = False) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database connections.

        Args:
            exclusive: If True, hold the write lock and open a write
                transaction for the block

        Yields:
            sqlite3.Connection with row factory, inside a transaction

        Example:
            with conn_mgr.connection(exclusive=True) as conn:
                conn.execute("INSERT INTO entries ...")
        """
        if exclusive:
            self._write_lock.acquire()

        try:
            conn = self._open()
            try:
                conn.execute("BEGIN IMMEDIATE" if exclusive else "BEGIN")
                yield conn
                conn.execute("COMMIT")
            except Exception:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            finally:
                conn.close()
        finally:
            if exclusive:
                self._write_lock.release()


__all__ = ['ConnectionManager', 'BUSY_TIMEOUT']
