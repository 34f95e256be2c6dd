"""
Database schema initialization and migrations.

Provides schema versioning and table creation for the index database.
"""

from __future__ import annotations

import sqlite3


# Schema version - increment when changing table structure
SCHEMA_VERSION = 1


def initialize_schema(conn: sqlite3.Connection) -> None:
    """
    Initialize database schema with versioning support.

    Creates tables and indexes if they don't exist. Drops and recreates
    the entries table if the stored schema version is older.

    Args:
        conn: Active database connection

    Tables created:
        - meta: Schema version tracking
        - entries: One row per indexed file
    """
    conn.execute("""
        CREATE TABLE IF NOT EXISTS meta (
            key TEXT PRIMARY KEY,
            value TEXT
        )
    """)

    result = conn.execute(
        "SELECT value FROM meta WHERE key = 'schema_version'"
    ).fetchone()

    current_version = int(result['value']) if result else 0

    if current_version < SCHEMA_VERSION:
        conn.execute("DROP TABLE IF EXISTS entries")

    # content_hash holds the unsigned xxHash64 reinterpreted as signed
    conn.execute("""
        CREATE TABLE IF NOT EXISTS entries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            full_path TEXT NOT NULL UNIQUE,
            content_hash INTEGER NOT NULL,
            perceptual_hash BLOB,
            file_size INTEGER NOT NULL,
            modified_time INTEGER NOT NULL,
            created_time INTEGER NOT NULL,
            file_name TEXT NOT NULL,
            path_depth INTEGER NOT NULL,
            ignored INTEGER NOT NULL DEFAULT 0
        )
    """)

    conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_entries_content_hash
        ON entries(content_hash)
    """)
    conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_entries_perceptual_hash
        ON entries(perceptual_hash)
    """)

    conn.execute("""
        INSERT OR REPLACE INTO meta (key, value)
        VALUES ('schema_version', ?)
    """, (str(SCHEMA_VERSION),))


__all__ = ['SCHEMA_VERSION', 'initialize_schema']
