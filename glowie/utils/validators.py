"""
Input validation for Glowie.

Provides validators for clustering parameters and scan roots.
"""

from __future__ import annotations

import os
from typing import Optional


def validate_distance_percent(percent: float) -> tuple[bool, Optional[str]]:
    """
    Validate a near-duplicate distance threshold.

    Args:
        percent: Share of perceptual hash bits allowed to differ

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_distance_percent(10)
        (True, None)
        >>> validate_distance_percent(150)
        (False, 'Distance threshold must be between 0 and 100 percent, got 150')
    """
    if isinstance(percent, bool) or not isinstance(percent, (int, float)):
        return False, f"Distance threshold must be a number, got {type(percent).__name__}"
    if not 0 <= percent <= 100:
        return False, f"Distance threshold must be between 0 and 100 percent, got {percent}"
    return True, None


def validate_directory(directory: str) -> tuple[bool, Optional[str]]:
    """
    Validate that a scan root exists and is a readable directory.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not os.path.exists(directory):
        return False, f"Directory does not exist: {directory}"
    if not os.path.isdir(directory):
        return False, f"Not a directory: {directory}"
    if not os.access(directory, os.R_OK | os.X_OK):
        return False, f"Directory not readable: {directory}"
    return True, None


__all__ = ['validate_distance_percent', 'validate_directory']
