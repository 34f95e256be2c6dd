"""
Streaming delivery of duplicate sets.

A producer thread drains a clustering iterator onto a queue as a flat
message stream: NewSet, then one EntryMessage per member path, for every
set. A close sentinel ends the stream when clustering completes, fails or
is cancelled, so a slow consumer can render sets as they arrive.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Iterable, Iterator, Optional, Union

from ..models import DuplicateSet, EntryMessage, NewSet
from ..utils.selection import KeepPolicy
from .exact import find_exact_duplicates
from .near import find_near_duplicates


logger = logging.getLogger(__name__)

# Put on the channel after the last message
CHANNEL_CLOSED = object()

# How long a blocked put waits before re-checking cancellation
_PUT_POLL_SECONDS = 0.1

SetMessage = Union[NewSet, EntryMessage]


class DuplicateStream:
    """
    Runs a clustering pass on a background thread and exposes its output
    as a message channel.

    Usage:
        stream = stream_exact_duplicates(store, cancel=cancel)
        for paths in stream.iter_sets():
            show(paths)

    Iterating the stream (or iter_sets) re-raises a producer failure once
    every message sent before the failure has been delivered.
    """

    def __init__(
        self,
        sets: Iterable[DuplicateSet],
        cancel: Optional[threading.Event] = None,
        maxsize: int = 0,
    ):
        """
        Args:
            sets: Clustering iterator, consumed on the producer thread
            cancel: Shared cancellation flag; production stops between messages
            maxsize: Queue bound (0 for unbounded)
        """
        self._sets = sets
        self.cancel = cancel if cancel is not None else threading.Event()
        self.channel: queue.Queue = queue.Queue(maxsize)
        self.error: Optional[BaseException] = None
        self.sets_emitted = 0
        self._abandoned = threading.Event()
        self._thread = threading.Thread(
            target=self._produce,
            name="glowie-duplicate-stream",
            daemon=True,
        )

    def start(self) -> 'DuplicateStream':
        self._thread.start()
        return self

    def _put(self, message, stop: threading.Event) -> bool:
        """Put a message, giving up once `stop` is set while the channel is full."""
        while True:
            try:
                self.channel.put(message, timeout=_PUT_POLL_SECONDS)
                return True
            except queue.Full:
                if stop.is_set():
                    return False

    def _send_set(self, dupes: DuplicateSet) -> bool:
        """
        Send one set; False if the stream stopped before it went out.

        Cancellation is honoured only before NewSet. Once a set has started
        it is completed unless the consumer has gone away.
        """
        if not self._put(NewSet(), self.cancel):
            return False
        for entry in dupes.entries:
            if not self._put(EntryMessage(entry.full_path), self._abandoned):
                return False
        return True

    def _produce(self):
        try:
            for dupes in self._sets:
                if self.cancel.is_set() or not self._send_set(dupes):
                    break
                self.sets_emitted += 1
        except Exception as e:
            self.error = e
            logger.warning(f"Duplicate clustering aborted after {self.sets_emitted:,} sets: {e}")
        finally:
            self._put(CHANNEL_CLOSED, self._abandoned)

    def __iter__(self) -> Iterator[SetMessage]:
        while True:
            message = self.channel.get()
            if message is CHANNEL_CLOSED:
                break
            yield message
        if self.error is not None:
            raise self.error

    def iter_sets(self) -> Iterator[list[str]]:
        """
        Regroup the message stream into lists of member paths.

        A group with fewer than two paths is never a duplicate set and is
        dropped.
        """
        current: Optional[list[str]] = None
        for message in self:
            if isinstance(message, NewSet):
                if current is not None and len(current) > 1:
                    yield current
                current = []
            elif current is not None:
                current.append(message.path)
        if current is not None and len(current) > 1:
            yield current

    def close(self):
        """Stop production; for consumers that quit before the channel closes."""
        self._abandoned.set()
        self.cancel.set()

    def join(self, timeout: Optional[float] = None):
        self._thread.join(timeout)


def stream_exact_duplicates(
    store,
    include_ignored: bool = False,
    keep_policy: Optional[KeepPolicy] = None,
    reversed: bool = False,
    cancel: Optional[threading.Event] = None,
    maxsize: int = 0,
) -> DuplicateStream:
    """Start an exact-duplicate pass and return its message stream."""
    sets = find_exact_duplicates(
        store,
        include_ignored=include_ignored,
        keep_policy=keep_policy,
        reversed=reversed,
        cancel=cancel,
    )
    return DuplicateStream(sets, cancel=cancel, maxsize=maxsize).start()


def stream_near_duplicates(
    store,
    distance_threshold_percent: float,
    keep_policy: Optional[KeepPolicy] = None,
    reversed: bool = False,
    cancel: Optional[threading.Event] = None,
    maxsize: int = 0,
) -> DuplicateStream:
    """
    Start a near-duplicate pass and return its message stream.

    Raises:
        ValueError: If the percentage is outside 0..100 (before any thread starts)
    """
    sets = find_near_duplicates(
        store,
        distance_threshold_percent,
        keep_policy=keep_policy,
        reversed=reversed,
        cancel=cancel,
    )
    return DuplicateStream(sets, cancel=cancel, maxsize=maxsize).start()


__all__ = [
    'CHANNEL_CLOSED',
    'DuplicateStream',
    'stream_exact_duplicates',
    'stream_near_duplicates',
]
