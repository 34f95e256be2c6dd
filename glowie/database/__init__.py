"""
SQLite database backend for Glowie.

Persists one entry per indexed file so repeated scans only re-hash files
whose size or modification time changed, and serves the group/scan
queries used by duplicate clustering.

Public API:
- IndexStore: Main store class
- get_store(): Get process-wide store instance
- reset_store(): Reset process-wide instance (testing)
"""

from __future__ import annotations

import threading
from typing import Optional

from .core import IndexStore


_store_instance: Optional[IndexStore] = None
_store_lock = threading.Lock()


def get_store(db_path: Optional[str] = None) -> IndexStore:
    """
    Get or create the process-wide store instance (thread-safe).

    Args:
        db_path: Database path used only when the instance is first created

    Returns:
        Singleton IndexStore instance
    """
    global _store_instance
    if _store_instance is None:
        with _store_lock:
            # Double-check after acquiring lock
            if _store_instance is None:
                _store_instance = IndexStore(db_path)
    return _store_instance


def reset_store():
    """Reset the process-wide store instance (mainly for testing)."""
    global _store_instance
    with _store_lock:
        _store_instance = None


__all__ = [
    'IndexStore',
    'get_store',
    'reset_store',
]
