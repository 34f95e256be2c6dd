"""
Near-duplicate clustering by perceptual hash distance.

A single greedy pass: every entry joins the first existing cluster whose
representative lies within the distance budget, or founds a new cluster.
The result is order dependent, so entries are always scanned in
full_path order to keep repeated runs over the same index identical.
Overlapping neighbourhoods can still split differently than a global
optimum would.
"""

from __future__ import annotations

import logging
import math
import sqlite3
import threading
from typing import Iterator, Optional

from ..config import PHASH_BITS
from ..errors import ClusteringError
from ..indexer.hashing import bytes_to_hash
from ..models import DuplicateSet
from ..utils.selection import KeepPolicy, order_entries
from ..utils.validators import validate_distance_percent


logger = logging.getLogger(__name__)


def distance_budget(distance_threshold_percent: float, hash_bits: int = PHASH_BITS) -> int:
    """
    Convert a percentage into an absolute Hamming distance budget.

    Raises:
        ValueError: If the percentage is outside 0..100
    """
    valid, message = validate_distance_percent(distance_threshold_percent)
    if not valid:
        raise ValueError(message)
    return math.floor(distance_threshold_percent * hash_bits / 100)


def find_near_duplicates(
    store,
    distance_threshold_percent: float,
    keep_policy: Optional[KeepPolicy] = None,
    reversed: bool = False,
    cancel: Optional[threading.Event] = None,
) -> Iterator[DuplicateSet]:
    """
    Yield sets of visually similar images.

    Only entries that decoded as images take part. Clusters are emitted
    in founding order once the full pass is done; singletons are dropped.
    The threshold is validated eagerly, before any store access.

    Args:
        store: IndexStore to read from
        distance_threshold_percent: Share of hash bits (0-100) that may differ
            from a cluster representative
        keep_policy: Optional ordering of members (first is kept)
        reversed: Reverse the keep-policy ordering
        cancel: Stop comparing once this flag is set; nothing is yielded
            from a cancelled pass

    Yields:
        DuplicateSet with match_type 'near' and two or more entries

    Raises:
        ValueError: If the percentage is outside 0..100
        ClusteringError: If the store fails mid-pass
    """
    budget = distance_budget(distance_threshold_percent)
    return _cluster_greedy(store, budget, keep_policy, reversed, cancel)


def _cluster_greedy(
    store,
    budget: int,
    keep_policy: Optional[KeepPolicy],
    reversed: bool,
    cancel: Optional[threading.Event],
) -> Iterator[DuplicateSet]:
    # Each cluster is (representative hash, member entries)
    clusters: list[tuple] = []
    scanned = 0

    try:
        for entry in store.iter_image_entries():
            if cancel is not None and cancel.is_set():
                logger.info(f"Near-duplicate pass cancelled after {scanned:,} entries")
                return

            try:
                phash = bytes_to_hash(entry.perceptual_hash)
            except (TypeError, ValueError) as e:
                logger.debug(f"Skipping unreadable perceptual hash for {entry.full_path}: {e}")
                continue
            scanned += 1

            for representative, members in clusters:
                try:
                    distance = representative - phash
                except TypeError:
                    # Hashes of different sizes never match
                    continue
                if distance <= budget:
                    members.append(entry)
                    break
            else:
                clusters.append((phash, [entry]))
    except sqlite3.Error as e:
        raise ClusteringError(f"Failed to scan image entries: {e}") from e

    logger.debug(
        f"Near-duplicate pass: {scanned:,} images in {len(clusters):,} clusters "
        f"(budget {budget} bits)"
    )

    for _, members in clusters:
        if len(members) < 2:
            continue
        if keep_policy is not None:
            members = order_entries(members, keep_policy, reversed)
        yield DuplicateSet(entries=members, match_type="near")


__all__ = ['distance_budget', 'find_near_duplicates']
