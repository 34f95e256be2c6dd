"""
Report formatting and display for the CLI interface.

Sets arrive already ordered by the keep policy, so the first path of each
set is the one to keep.
"""

from __future__ import annotations

from typing import Iterable

from ..models import UpdateStats


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "-" * 70)
    print(title)
    print("-" * 70)


def print_update_summary(stats: UpdateStats) -> None:
    """Print the outcome counters of an index update."""
    _print_section_header("INDEX UPDATE")
    print(stats.summary())
    if stats.failed:
        print(f"{stats.failed:,} files could not be indexed (run with -v for details)")


def print_duplicate_sets(path_sets: Iterable[list[str]], title: str) -> tuple[int, int]:
    """
    Print duplicate sets as they arrive.

    Args:
        path_sets: Lists of member paths, keep candidate first
        title: Section title

    Returns:
        Tuple of (sets printed, extra files marked)
    """
    _print_section_header(title)

    set_count = 0
    extra_count = 0
    for paths in path_sets:
        set_count += 1
        print(f"\nSet {set_count} ({len(paths)} files):")
        for idx, path in enumerate(paths):
            marker = "  [KEEP] " if idx == 0 else "  [EXTRA]"
            print(f"{marker} {path}")
        extra_count += len(paths) - 1

    if set_count == 0:
        print("\nNo duplicates found.")
    else:
        print(f"\n{set_count:,} sets, {extra_count:,} extra files")

    return set_count, extra_count


__all__ = ['print_update_summary', 'print_duplicate_sets']
