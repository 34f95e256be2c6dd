"""
Duplicate clustering package for Glowie.

Finds exact duplicates (same content hash) and near duplicates (perceptual
hashes within a distance budget) over the persisted index.

Public API:
- find_exact_duplicates: Lazy exact-duplicate sets
- find_near_duplicates: Greedy near-duplicate sets
- distance_budget: Percent threshold -> Hamming distance budget
- DuplicateStream: Background producer exposing sets as a message channel
- stream_exact_duplicates / stream_near_duplicates: Start a streaming pass
"""

from __future__ import annotations

from .exact import find_exact_duplicates
from .near import distance_budget, find_near_duplicates
from .streaming import (
    CHANNEL_CLOSED,
    DuplicateStream,
    stream_exact_duplicates,
    stream_near_duplicates,
)

__all__ = [
    'find_exact_duplicates',
    'find_near_duplicates',
    'distance_budget',
    'CHANNEL_CLOSED',
    'DuplicateStream',
    'stream_exact_duplicates',
    'stream_near_duplicates',
]
