"""
IndexStore facade class for coordinating database operations.

Provides a unified interface to all index operations using the facade pattern.
"""

from __future__ import annotations

from typing import Iterator, Optional

from ..config import INDEX_DB_FILE
from ..models import Entry
from .connection import ConnectionManager
from .schema import initialize_schema, SCHEMA_VERSION
from .operations import EntryOperations
from .maintenance import MaintenanceOperations


class IndexStore:
    """
    SQLite-backed index of file entries.

    Safe to share across update threads: every call opens its own short
    transaction and the only write is a single-statement upsert.

    Usage:
        store = IndexStore("/tmp/glowie.db")
        outcome = update("/photos/a.jpg", store)
        for dupes in find_exact_duplicates(store):
            ...
    """

    SCHEMA_VERSION = SCHEMA_VERSION

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the index store.

        Args:
            db_path: Path to SQLite database file. Uses default if None.
        """
        self.db_path = db_path or INDEX_DB_FILE

        self._conn_mgr = ConnectionManager(self.db_path)
        self._operations = EntryOperations(self._conn_mgr)
        self._maintenance = MaintenanceOperations(self._conn_mgr)

        with self._conn_mgr.connection(exclusive=True) as conn:
            initialize_schema(conn)

    # Delegate to EntryOperations
    def get_rows(self, full_path: str) -> list[Entry]:
        """All stored rows for a path (more than one means a malformed index)."""
        return self._operations.get_rows(full_path)

    def get(self, full_path: str) -> Optional[Entry]:
        """Stored entry for a path, or None."""
        return self._operations.get(full_path)

    def upsert(self, entry: Entry) -> None:
        """Atomically insert or replace the row for entry.full_path."""
        self._operations.upsert(entry)

    def duplicate_content_hashes(self, include_ignored: bool = False) -> list[int]:
        """Stored content hashes held by two or more entries."""
        return self._operations.duplicate_content_hashes(include_ignored)

    def entries_with_content_hash(self, stored_hash: int, include_ignored: bool = False) -> list[Entry]:
        """Entries for a stored content hash, in natural row order."""
        return self._operations.entries_with_content_hash(stored_hash, include_ignored)

    def entries_with_hash(self, content_hash: int, include_ignored: bool = False) -> list[Entry]:
        """Entries for an unsigned content hash, in natural row order."""
        return self._operations.entries_with_hash(content_hash, include_ignored)

    def iter_image_entries(self) -> Iterator[Entry]:
        """Non-ignored entries in full_path order."""
        return self._operations.iter_image_entries()

    def list_paths(self, prefix: Optional[str] = None) -> list[str]:
        """Stored paths, optionally only those starting with prefix."""
        return self._operations.list_paths(prefix)

    # Delegate to MaintenanceOperations
    def count_entries(self, include_ignored: bool = False) -> int:
        """Number of indexed entries."""
        return self._maintenance.count_entries(include_ignored)

    def get_stats(self) -> dict:
        """Get index statistics."""
        return self._maintenance.get_stats()

    def vacuum(self):
        """Compact the database file."""
        self._maintenance.vacuum()


__all__ = ['IndexStore']
