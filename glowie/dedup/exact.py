"""
Exact duplicate clustering.

Groups index entries by content hash. Groups are read from the store one
at a time, so a caller may stop consuming early without cost.
"""

from __future__ import annotations

import sqlite3
import threading
from typing import Iterator, Optional

from ..errors import ClusteringError
from ..models import DuplicateSet
from ..utils.selection import KeepPolicy, order_entries


def find_exact_duplicates(
    store,
    include_ignored: bool = False,
    keep_policy: Optional[KeepPolicy] = None,
    reversed: bool = False,
    cancel: Optional[threading.Event] = None,
) -> Iterator[DuplicateSet]:
    """
    Yield sets of entries with identical content hashes.

    Every call starts a fresh pass over the index. Set order is
    unspecified; members follow keep_policy when given, else natural row
    order.

    Args:
        store: IndexStore to read from
        include_ignored: Also group files that did not decode as images
        keep_policy: Optional ordering of members (first is kept)
        reversed: Reverse the keep-policy ordering
        cancel: Stop before the next set once this flag is set

    Yields:
        DuplicateSet with match_type 'exact' and two or more entries

    Raises:
        ClusteringError: If the store fails mid-pass
    """
    try:
        hashes = store.duplicate_content_hashes(include_ignored)
    except sqlite3.Error as e:
        raise ClusteringError(f"Failed to group entries by content hash: {e}") from e

    for stored_hash in hashes:
        if cancel is not None and cancel.is_set():
            return

        try:
            members = store.entries_with_content_hash(stored_hash, include_ignored)
        except sqlite3.Error as e:
            raise ClusteringError(f"Failed to load duplicate group: {e}") from e

        # The index may have changed since the grouping query
        if len(members) < 2:
            continue

        if keep_policy is not None:
            members = order_entries(members, keep_policy, reversed)

        yield DuplicateSet(entries=members, match_type="exact")


__all__ = ['find_exact_duplicates']
