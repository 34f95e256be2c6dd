"""
Update pipeline for a single path.

update() is the unit of work fanned out by the parallel driver: stat the
file, skip it when size and mtime match the stored row, otherwise hash and
fingerprint the bytes and upsert the entry.
"""

from __future__ import annotations

import os
import sqlite3
from pathlib import Path

from ..errors import (
    FormatError,
    InsertDBError,
    MalformedDBError,
    NotFoundError,
    OtherError,
)
from ..models import Entry, UpdateOutcome, path_depth
from .dependencies import _logger
from .hashing import compute_content_hash, extract_perceptual_hash


def _stat_times(st: os.stat_result) -> tuple[int, int]:
    """Return (modified_time, created_time) in whole unix seconds."""
    modified = int(st.st_mtime)
    # st_birthtime is only reported on some platforms; ctime is the fallback
    created = int(getattr(st, 'st_birthtime', st.st_ctime))
    return modified, created


def _read_bytes(full_path: str) -> bytes:
    try:
        with open(full_path, 'rb') as f:
            return f.read()
    except FileNotFoundError as e:
        raise NotFoundError(full_path, f"File vanished before it could be read: {full_path}") from e
    except OSError as e:
        raise OtherError(full_path, f"Failed to read {full_path}: {e}") from e


def update(full_path: str | Path, store) -> UpdateOutcome:
    """
    Bring the stored entry for one path up to date.

    Args:
        full_path: Path of the file to index
        store: IndexStore (or any object with get_rows/upsert)

    Returns:
        UpdateOutcome.UNCHANGED when size and mtime match the stored row,
        ADDED for a first index, UPDATED when an existing row was replaced

    Raises:
        NotFoundError: The path does not exist
        FormatError: Not an image; the entry was written with ignored=True
        EncodingError: Recognised image with corrupt data; nothing written
        MalformedDBError: More than one stored row for the path; nothing written
        InsertDBError: The upsert failed; safe to retry later
        OtherError: Any other stat/read/store-read failure
    """
    full_path = os.path.abspath(str(full_path))

    try:
        st = os.stat(full_path)
    except FileNotFoundError as e:
        raise NotFoundError(full_path, f"File not found: {full_path}") from e
    except OSError as e:
        raise OtherError(full_path, f"Failed to stat {full_path}: {e}") from e

    modified_time, created_time = _stat_times(st)

    try:
        stored_rows = store.get_rows(full_path)
    except sqlite3.Error as e:
        raise OtherError(full_path, f"Failed to read stored entry for {full_path}: {e}") from e

    if len(stored_rows) > 1:
        raise MalformedDBError(
            full_path,
            f"{len(stored_rows)} stored rows for {full_path}, expected at most one",
        )

    stored = stored_rows[0] if stored_rows else None
    if stored is not None and stored.file_size == st.st_size and stored.modified_time == modified_time:
        return UpdateOutcome.UNCHANGED

    data = _read_bytes(full_path)

    entry = Entry(
        full_path=full_path,
        content_hash=compute_content_hash(data),
        file_size=st.st_size,
        modified_time=modified_time,
        created_time=created_time,
        file_name=os.path.basename(full_path),
        path_depth=path_depth(full_path),
    )

    format_error = None
    try:
        entry.perceptual_hash = extract_perceptual_hash(data, full_path)
    except FormatError as e:
        entry.ignored = True
        format_error = e
    # EncodingError propagates: recognised but corrupt files are not written

    try:
        store.upsert(entry)
    except sqlite3.Error as e:
        raise InsertDBError(full_path, f"Failed to write entry for {full_path}: {e}") from e

    if format_error is not None:
        raise format_error

    _logger.debug(f"Indexed {full_path} ({'new' if stored is None else 'changed'})")
    return UpdateOutcome.ADDED if stored is None else UpdateOutcome.UPDATED


__all__ = ['update']
