"""
File discovery module for the indexer package.

Enumerates candidate files under root directories for the update driver.
"""

from __future__ import annotations

from pathlib import Path

from ..config import IMAGE_EXTENSIONS


def find_candidate_files(
    root_path: str | Path,
    recursive: bool = True,
    images_only: bool = False,
) -> list[str]:
    """
    Find files to index under a directory.

    Every regular file is a candidate by default: non-images are indexed
    as ignored so byte-identical copies can still be reported.

    Args:
        root_path: Directory path to search
        recursive: If True, search subdirectories recursively
        images_only: Restrict to IMAGE_EXTENSIONS

    Returns:
        List of absolute file paths as strings, without duplicates
    """
    root = Path(root_path)

    files = []
    seen = set()  # Track resolved paths to avoid duplicates

    iterator = root.rglob('*') if recursive else root.glob('*')

    for filepath in iterator:
        if not filepath.is_file():
            continue
        if images_only and filepath.suffix.lower() not in IMAGE_EXTENSIONS:
            continue
        resolved = str(filepath.resolve())
        if resolved not in seen:
            seen.add(resolved)
            files.append(resolved)

    return files


__all__ = ['find_candidate_files']
