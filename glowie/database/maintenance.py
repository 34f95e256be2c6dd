"""
Maintenance operations for the entry index.

Provides statistics and compaction. These helpers are advisory: failures
are logged and a default is returned.
"""

from __future__ import annotations

import os
import sqlite3
import logging

from .connection import BUSY_TIMEOUT, ConnectionManager


logger = logging.getLogger(__name__)


class MaintenanceOperations:
    """
    Handles maintenance operations for the entry index.

    Provides statistics reporting and database compaction. Entries are
    never deleted here; purging stale paths belongs to the caller.
    """

    def __init__(self, connection_manager: ConnectionManager):
        self.conn_mgr = connection_manager

    def count_entries(self, include_ignored: bool = False) -> int:
        """
        Number of indexed entries.

        Args:
            include_ignored: Also count entries that are not images
        """
        query = "SELECT COUNT(*) AS cnt FROM entries"
        if not include_ignored:
            query += " WHERE ignored = 0"
        try:
            with self.conn_mgr.connection(exclusive=False) as conn:
                return conn.execute(query).fetchone()['cnt']
        except sqlite3.Error as e:
            logger.warning(f"Failed to count index entries: {e}")
            return 0

    def get_stats(self) -> dict:
        """
        Get index statistics.

        Returns:
            Dictionary with index statistics:
                - total_entries: Number of indexed files
                - image_entries: Entries carrying a perceptual hash
                - ignored_entries: Entries that failed to decode as images
                - db_size_bytes: Database size in bytes
                - db_size_mb: Database size in MB
                - db_path: Path to database file
        """
        db_path = self.conn_mgr.db_path
        try:
            with self.conn_mgr.connection(exclusive=False) as conn:
                row = conn.execute("""
                    SELECT COUNT(*) AS total,
                           COALESCE(SUM(ignored), 0) AS ignored
                    FROM entries
                """).fetchone()

            db_size = os.path.getsize(db_path) if os.path.exists(db_path) else 0

            return {
                'total_entries': row['total'],
                'image_entries': row['total'] - row['ignored'],
                'ignored_entries': row['ignored'],
                'db_size_bytes': db_size,
                'db_size_mb': round(db_size / (1024 * 1024), 2),
                'db_path': db_path,
            }
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"Failed to get index stats: {e}")
            return {
                'total_entries': 0,
                'image_entries': 0,
                'ignored_entries': 0,
                'db_size_bytes': 0,
                'db_size_mb': 0,
                'db_path': db_path,
            }

    def vacuum(self):
        """Compact the database file."""
        try:
            # VACUUM must run outside a transaction
            conn = sqlite3.connect(self.conn_mgr.db_path, timeout=BUSY_TIMEOUT)
            try:
                conn.execute("VACUUM")
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.debug(f"Failed to vacuum database: {e}")


__all__ = ['MaintenanceOperations']
