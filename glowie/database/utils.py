"""
Shared utilities for database operations.

Provides conversion between Entry objects and SQLite rows, including the
signed/unsigned mapping needed to store 64-bit content hashes.
"""

from __future__ import annotations

import sqlite3

from ..models import Entry


# Rows fetched per keyset page when scanning the index
PAGE_SIZE = 500

_U64 = 1 << 64
_I64_MAX = (1 << 63) - 1


def to_signed64(value: int) -> int:
    """Reinterpret an unsigned 64-bit value as SQLite's signed INTEGER."""
    return value - _U64 if value > _I64_MAX else value


def to_unsigned64(value: int) -> int:
    """Inverse of to_signed64."""
    return value + _U64 if value < 0 else value


def entry_to_params(entry: Entry) -> tuple:
    """Build the parameter tuple used by the upsert statement."""
    return (
        entry.full_path,
        to_signed64(entry.content_hash),
        entry.perceptual_hash,
        entry.file_size,
        entry.modified_time,
        entry.created_time,
        entry.file_name,
        entry.path_depth,
        1 if entry.ignored else 0,
    )


def row_to_entry(row: sqlite3.Row) -> Entry:
    """
    Convert database row to Entry object.

    Args:
        row: sqlite3.Row from the entries table

    Returns:
        Entry object
    """
    phash = row['perceptual_hash']
    return Entry(
        full_path=row['full_path'],
        content_hash=to_unsigned64(row['content_hash']),
        perceptual_hash=bytes(phash) if phash is not None else None,
        file_size=row['file_size'],
        modified_time=row['modified_time'],
        created_time=row['created_time'],
        file_name=row['file_name'],
        path_depth=row['path_depth'],
        ignored=bool(row['ignored']),
    )


__all__ = [
    'PAGE_SIZE',
    'to_signed64',
    'to_unsigned64',
    'entry_to_params',
    'row_to_entry',
]
