"""
Parallel processing module for the indexer package.

Fans update() out over a thread pool with a shared cancellation flag,
progress tracking, and per-path failure isolation.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Optional, Callable, Any

from ..config import DEFAULT_WORKERS
from ..errors import ErrorKind, IndexUpdateError
from ..models import UpdateOutcome, UpdateStats
from .dependencies import HAS_TQDM, _tqdm_class, _logger
from .pipeline import update


_FAILURE_LOG_LEVELS = {
    ErrorKind.FORMAT: _logger.debug,
    ErrorKind.NOT_FOUND: _logger.info,
}


def _update_unless_cancelled(
    path: str,
    store,
    cancel: Optional[threading.Event],
) -> Optional[UpdateOutcome]:
    """Run one update, or return None when cancellation was already requested."""
    if cancel is not None and cancel.is_set():
        return None
    return update(path, store)


def update_paths_parallel(
    filepaths: Iterable[str],
    store,
    max_workers: int = DEFAULT_WORKERS,
    cancel: Optional[threading.Event] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = True,
) -> UpdateStats:
    """
    Update many paths concurrently.

    One failing path never aborts its siblings: every IndexUpdateError is
    logged and counted in the returned stats. Setting `cancel` stops new
    paths from starting; paths already being updated run to completion.

    Args:
        filepaths: Paths to update
        store: IndexStore shared by all workers
        max_workers: Number of worker threads
        cancel: Shared cancellation flag checked before each path
        progress_callback: Optional callback(done, total) for progress updates
        show_progress: Whether to show tqdm progress bar

    Returns:
        UpdateStats with counts per outcome and failure kind
    """
    paths = list(filepaths)
    stats = UpdateStats(total_files=len(paths))
    if not paths:
        return stats

    pbar: Optional[Any] = None
    if HAS_TQDM and show_progress and _tqdm_class is not None:
        pbar = _tqdm_class(
            total=len(paths),
            desc="Updating index",
            unit="file",
            ncols=80,
        )

    # Batch progress callbacks to reduce overhead (every 1000 files or 1 second)
    last_callback_time = time.time()
    callback_batch_size = 1000
    callback_interval = 1.0  # seconds

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(_update_unless_cancelled, path, store, cancel): path
            for path in paths
        }

        for i, future in enumerate(as_completed(futures)):
            path = futures[future]
            try:
                outcome = future.result()
                if outcome is None:
                    stats.cancelled += 1
                else:
                    stats.record(outcome.value)
            except IndexUpdateError as e:
                stats.record(e.kind.value)
                log = _FAILURE_LOG_LEVELS.get(e.kind, _logger.warning)
                log(str(e))
            except Exception as e:
                stats.other += 1
                _logger.warning(f"Unexpected failure updating {path}: {e}")

            if pbar is not None:
                pbar.update(1)

            if progress_callback:
                current_time = time.time()
                should_callback = (
                    (i + 1) % callback_batch_size == 0 or
                    current_time - last_callback_time >= callback_interval or
                    i == len(paths) - 1
                )
                if should_callback:
                    progress_callback(i + 1, len(paths))
                    last_callback_time = current_time

    if pbar is not None:
        pbar.close()

    if stats.format or stats.encoding:
        _logger.info(
            f"{stats.format:,} files were not images and {stats.encoding:,} images "
            f"could not be decoded"
        )

    return stats


__all__ = ['update_paths_parallel']
