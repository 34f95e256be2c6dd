"""
Core read/write operations for the entry index.

Provides EntryOperations for per-path lookups, the atomic upsert, and the
scan/group queries used by clustering. Unlike the maintenance helpers,
these let sqlite3.Error propagate so the engine can classify failures.
"""

from __future__ import annotations

from typing import Iterator, Optional

from ..models import Entry
from .connection import ConnectionManager
from .utils import entry_to_params, row_to_entry, to_signed64, PAGE_SIZE


_UPSERT_SQL = """
    INSERT INTO entries (
        full_path, content_hash, perceptual_hash,
        file_size, modified_time, created_time,
        file_name, path_depth, ignored
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(full_path) DO UPDATE SET
        content_hash = excluded.content_hash,
        perceptual_hash = excluded.perceptual_hash,
        file_size = excluded.file_size,
        modified_time = excluded.modified_time,
        created_time = excluded.created_time,
        file_name = excluded.file_name,
        path_depth = excluded.path_depth,
        ignored = excluded.ignored
"""


class EntryOperations:
    """
    Handles reads and writes against the entries table.

    Each method opens its own short transaction; none holds a connection
    or lock across calls.
    """

    def __init__(self, connection_manager: ConnectionManager):
        """
        Initialize entry operations.

        Args:
            connection_manager: ConnectionManager instance for database access
        """
        self.conn_mgr = connection_manager

    def get_rows(self, full_path: str) -> list[Entry]:
        """
        Return every stored row for a path.

        More than one row means the index is malformed; callers decide what
        to do with that.
        """
        with self.conn_mgr.connection(exclusive=False) as conn:
            rows = conn.execute(
                "SELECT * FROM entries WHERE full_path = ? ORDER BY id",
                (full_path,)
            ).fetchall()
        return [row_to_entry(row) for row in rows]

    def get(self, full_path: str) -> Optional[Entry]:
        """Return the stored entry for a path, or None."""
        rows = self.get_rows(full_path)
        return rows[0] if rows else None

    def upsert(self, entry: Entry) -> None:
        """
        Insert or replace the row for entry.full_path in one statement.

        The row id is kept on replace so natural row order stays stable.
        """
        with self.conn_mgr.connection(exclusive=True) as conn:
            conn.execute(_UPSERT_SQL, entry_to_params(entry))

    def duplicate_content_hashes(self, include_ignored: bool = False) -> list[int]:
        """
        Content hashes shared by two or more entries.

        Returned as the stored (signed) values, ready to be passed back to
        entries_with_content_hash().
        """
        where = "" if include_ignored else "WHERE ignored = 0"
        with self.conn_mgr.connection(exclusive=False) as conn:
            rows = conn.execute(f"""
                SELECT content_hash FROM entries
                {where}
                GROUP BY content_hash
                HAVING COUNT(*) > 1
                ORDER BY MIN(id)
            """).fetchall()
        return [row['content_hash'] for row in rows]

    def entries_with_content_hash(
        self,
        stored_hash: int,
        include_ignored: bool = False,
    ) -> list[Entry]:
        """Members sharing a stored content hash, in natural row order."""
        query = "SELECT * FROM entries WHERE content_hash = ?"
        if not include_ignored:
            query += " AND ignored = 0"
        query += " ORDER BY id"
        with self.conn_mgr.connection(exclusive=False) as conn:
            rows = conn.execute(query, (stored_hash,)).fetchall()
        return [row_to_entry(row) for row in rows]

    def entries_with_hash(self, content_hash: int, include_ignored: bool = False) -> list[Entry]:
        """Members sharing an unsigned content hash."""
        return self.entries_with_content_hash(to_signed64(content_hash), include_ignored)

    def iter_image_entries(self, page_size: int = PAGE_SIZE) -> Iterator[Entry]:
        """
        Yield non-ignored entries in full_path order.

        Pages with keyset pagination so no connection stays open while the
        caller consumes the iterator.
        """
        last_path: Optional[str] = None
        while True:
            with self.conn_mgr.connection(exclusive=False) as conn:
                if last_path is None:
                    rows = conn.execute("""
                        SELECT * FROM entries
                        WHERE ignored = 0 AND perceptual_hash IS NOT NULL
                        ORDER BY full_path LIMIT ?
                    """, (page_size,)).fetchall()
                else:
                    rows = conn.execute("""
                        SELECT * FROM entries
                        WHERE ignored = 0 AND perceptual_hash IS NOT NULL
                          AND full_path > ?
                        ORDER BY full_path LIMIT ?
                    """, (last_path, page_size)).fetchall()

            if not rows:
                return

            for row in rows:
                yield row_to_entry(row)

            if len(rows) < page_size:
                return
            last_path = rows[-1]['full_path']

    def list_paths(self, prefix: Optional[str] = None) -> list[str]:
        """
        Stored paths, optionally restricted to those under a directory.

        Args:
            prefix: Directory path; only entries below it are returned
        """
        with self.conn_mgr.connection(exclusive=False) as conn:
            if prefix is None:
                rows = conn.execute(
                    "SELECT full_path FROM entries ORDER BY id"
                ).fetchall()
            else:
                escaped = (
                    prefix.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
                )
                rows = conn.execute(
                    "SELECT full_path FROM entries WHERE full_path LIKE ? ESCAPE '\\' ORDER BY id",
                    (f"{escaped}%",)
                ).fetchall()
        return [row['full_path'] for row in rows]


__all__ = ['EntryOperations']
