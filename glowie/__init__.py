"""
Glowie
======
Indexes image collections by content and perceptual fingerprints and
finds exact and visually similar duplicates.

Features:
- Incremental re-indexing (size + mtime fast path)
- xxHash64 content hash for byte-identical duplicates
- pHash perceptual hash for near duplicates
- SQLite index shared safely by concurrent updaters
- Configurable keep policy for picking the canonical copy
- Streaming delivery of duplicate sets
"""

__version__ = "0.3.0"

from .models import Entry, DuplicateSet, UpdateOutcome, UpdateStats, NewSet, EntryMessage
from .errors import (
    ErrorKind,
    GlowieError,
    IndexUpdateError,
    NotFoundError,
    FormatError,
    EncodingError,
    MalformedDBError,
    InsertDBError,
    OtherError,
    ClusteringError,
)
from .database import IndexStore, get_store
from .indexer import (
    find_candidate_files,
    compute_content_hash,
    extract_perceptual_hash,
    hamming_distance,
    update,
    update_paths_parallel,
)
from .dedup import (
    find_exact_duplicates,
    find_near_duplicates,
    DuplicateStream,
    stream_exact_duplicates,
    stream_near_duplicates,
)
from .utils.selection import KeepPolicy, order_entries, resolve_keep, apply_keep_policy

__all__ = [
    "Entry",
    "DuplicateSet",
    "UpdateOutcome",
    "UpdateStats",
    "NewSet",
    "EntryMessage",
    "ErrorKind",
    "GlowieError",
    "IndexUpdateError",
    "NotFoundError",
    "FormatError",
    "EncodingError",
    "MalformedDBError",
    "InsertDBError",
    "OtherError",
    "ClusteringError",
    "IndexStore",
    "get_store",
    "find_candidate_files",
    "compute_content_hash",
    "extract_perceptual_hash",
    "hamming_distance",
    "update",
    "update_paths_parallel",
    "find_exact_duplicates",
    "find_near_duplicates",
    "DuplicateStream",
    "stream_exact_duplicates",
    "stream_near_duplicates",
    "KeepPolicy",
    "order_entries",
    "resolve_keep",
    "apply_keep_policy",
]
