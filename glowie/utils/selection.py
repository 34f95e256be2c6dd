"""
Keep-policy utilities for Glowie.

Orders the members of a duplicate set so the first one is the copy to
retain and the rest are extras. Nothing here touches the file system.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable, Optional

from ..models import DuplicateSet, Entry


class KeepPolicy(str, Enum):
    """
    Rule for choosing which duplicate to keep.

    Attributes:
        CREATED_FIRST: Earliest created_time
        MODIFIED_FIRST: Earliest modified_time
        PATH_SHORTEST: Fewest characters in the full path
        NAME_SHORTEST: Fewest characters in the file name
        PATH_SHALLOWEST: Fewest directories deep
    """
    CREATED_FIRST = 'created-first'
    MODIFIED_FIRST = 'modified-first'
    PATH_SHORTEST = 'path-shortest'
    NAME_SHORTEST = 'name-shortest'
    PATH_SHALLOWEST = 'path-shallowest'


_POLICY_KEYS: dict[KeepPolicy, Callable[[Entry], int]] = {
    KeepPolicy.CREATED_FIRST: lambda e: e.created_time,
    KeepPolicy.MODIFIED_FIRST: lambda e: e.modified_time,
    KeepPolicy.PATH_SHORTEST: lambda e: len(e.full_path),
    KeepPolicy.NAME_SHORTEST: lambda e: len(e.file_name),
    KeepPolicy.PATH_SHALLOWEST: lambda e: e.path_depth,
}


def order_entries(
    entries: Iterable[Entry],
    policy: KeepPolicy | str,
    reversed: bool = False,
) -> list[Entry]:
    """
    Sort entries so the one to keep comes first.

    The primary key comes from the policy; full_path breaks ties, which
    makes the order total. With reversed=True the whole compound key is
    descending, so the result is exactly the non-reversed order backwards.

    Args:
        entries: Members of one duplicate set
        policy: KeepPolicy or its string value
        reversed: Prefer the largest key instead of the smallest

    Raises:
        ValueError: If policy is not recognized
    """
    primary = _POLICY_KEYS[KeepPolicy(policy)]
    return sorted(entries, key=lambda e: (primary(e), e.full_path), reverse=reversed)


def resolve_keep(
    entries: Iterable[Entry],
    policy: KeepPolicy | str,
    reversed: bool = False,
) -> tuple[Optional[Entry], list[Entry]]:
    """Return (entry to keep, extras) under a policy."""
    ordered = order_entries(entries, policy, reversed)
    if not ordered:
        return None, []
    return ordered[0], ordered[1:]


def apply_keep_policy(
    sets: Iterable[DuplicateSet],
    policy: KeepPolicy | str,
    reversed: bool = False,
) -> dict[str, str]:
    """
    Mark every member of every set as kept or extra.

    Returns:
        Dict mapping path to 'keep' or 'extra'

    Examples:
        >>> selections = apply_keep_policy(sets, KeepPolicy.PATH_SHALLOWEST)
        >>> selections['/img.png']
        'keep'
    """
    selections = {}
    for dupes in sets:
        keep, extras = resolve_keep(dupes.entries, policy, reversed)
        if keep is None:
            continue
        selections[keep.full_path] = 'keep'
        for entry in extras:
            selections[entry.full_path] = 'extra'
    return selections


__all__ = ['KeepPolicy', 'order_entries', 'resolve_keep', 'apply_keep_policy']
