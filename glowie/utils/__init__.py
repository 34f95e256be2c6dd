"""
Utilities package for Glowie.

Provides:
- selection: Keep policies for choosing the canonical duplicate
- validators: Input validation for clustering parameters and scan roots
"""

from __future__ import annotations

from . import selection
from . import validators

from .selection import KeepPolicy, order_entries, resolve_keep, apply_keep_policy
from .validators import validate_distance_percent, validate_directory

__all__ = [
    # Submodules
    'selection',
    'validators',
    # Selection
    'KeepPolicy',
    'order_entries',
    'resolve_keep',
    'apply_keep_policy',
    # Validators
    'validate_distance_percent',
    'validate_directory',
]
