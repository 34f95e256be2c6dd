"""
Indexer package for Glowie.

Keeps the entry index in step with the file system.

Public API:
- find_candidate_files: Enumerate files under a root directory
- compute_content_hash: xxHash64 content fingerprint
- extract_perceptual_hash: Decode image bytes and compute their pHash
- hamming_distance: Bit distance between two stored perceptual hashes
- update: Bring one path's stored entry up to date
- update_paths_parallel: Run update() over many paths with cancellation
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

from .file_discovery import find_candidate_files
from .hashing import (
    compute_content_hash,
    extract_perceptual_hash,
    hash_to_bytes,
    bytes_to_hash,
    hamming_distance,
)
from .pipeline import update
from .parallel import update_paths_parallel
from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


__all__ = [
    'find_candidate_files',
    'compute_content_hash',
    'extract_perceptual_hash',
    'hash_to_bytes',
    'bytes_to_hash',
    'hamming_distance',
    'update',
    'update_paths_parallel',
    'has_heif_support',
]
