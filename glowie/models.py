"""
Data models for Glowie.

Contains dataclasses for index entries, duplicate sets, update outcomes and
the messages carried by the duplicate-set channel.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Optional
import os


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


def path_depth(full_path: str) -> int:
    """Number of path components, not counting the root/drive anchor."""
    pure = PurePath(full_path)
    parts = pure.parts
    if pure.anchor:
        parts = parts[1:]
    return len(parts)


class UpdateOutcome(str, Enum):
    """Result of a successful update() call."""
    UNCHANGED = 'unchanged'
    ADDED = 'added'
    UPDATED = 'updated'


@dataclass
class Entry:
    """
    One indexed file.

    Attributes:
        full_path: Full path to the file (unique key)
        content_hash: Unsigned 64-bit xxHash64 of the raw bytes
        perceptual_hash: Packed pHash bytes, None when ignored
        file_size: Size in bytes
        modified_time: Modification time, unix seconds
        created_time: Creation time, unix seconds
        file_name: Final path component
        path_depth: Count of path components below the root
        ignored: True when the file could not be decoded as an image
    """
    full_path: str
    content_hash: int = 0
    perceptual_hash: Optional[bytes] = None
    file_size: int = 0
    modified_time: int = 0
    created_time: int = 0
    file_name: str = ""
    path_depth: int = 0
    ignored: bool = False

    def __post_init__(self):
        if not self.file_name:
            self.file_name = os.path.basename(self.full_path)
        if not self.path_depth:
            self.path_depth = path_depth(self.full_path)

    def __hash__(self):
        return hash(self.full_path)

    def __eq__(self, other):
        if not isinstance(other, Entry):
            return False
        return self.full_path == other.full_path

    @property
    def directory(self) -> str:
        """Return the directory containing this file."""
        return os.path.dirname(self.full_path)

    @property
    def file_size_formatted(self) -> str:
        """Return human-readable file size."""
        return format_size(self.file_size)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'full_path': self.full_path,
            'content_hash': f"{self.content_hash:016x}",
            'perceptual_hash': self.perceptual_hash.hex() if self.perceptual_hash else None,
            'file_size': self.file_size,
            'file_size_formatted': self.file_size_formatted,
            'modified_time': self.modified_time,
            'created_time': self.created_time,
            'file_name': self.file_name,
            'path_depth': self.path_depth,
            'ignored': self.ignored,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Entry':
        """Create Entry from dictionary."""
        phash = data.get('perceptual_hash')
        return cls(
            full_path=data['full_path'],
            content_hash=int(data.get('content_hash', '0'), 16),
            perceptual_hash=bytes.fromhex(phash) if phash else None,
            file_size=data.get('file_size', 0),
            modified_time=data.get('modified_time', 0),
            created_time=data.get('created_time', 0),
            file_name=data.get('file_name', ''),
            path_depth=data.get('path_depth', 0),
            ignored=data.get('ignored', False),
        )


@dataclass
class DuplicateSet:
    """
    A group of duplicate entries, built fresh by each clustering pass.

    Attributes:
        entries: Members, ordered by keep policy when one was applied
        match_type: How duplicates were detected ('exact' or 'near')
    """
    entries: list = field(default_factory=list)
    match_type: str = "exact"

    @property
    def keep(self) -> Optional[Entry]:
        """The canonical member (first in order)."""
        return self.entries[0] if self.entries else None

    @property
    def extras(self) -> list:
        """All members other than the canonical one."""
        return self.entries[1:]

    @property
    def paths(self) -> list:
        return [entry.full_path for entry in self.entries]

    @property
    def potential_savings(self) -> int:
        """Bytes that could be reclaimed by removing the extras."""
        return sum(entry.file_size for entry in self.extras)

    def __len__(self):
        return len(self.entries)


@dataclass(frozen=True)
class NewSet:
    """Channel marker: the following EntryMessages belong to a new set."""


@dataclass(frozen=True)
class EntryMessage:
    """Channel message carrying one member path of the current set."""
    path: str


@dataclass
class UpdateStats:
    """Outcome and failure counters for one batch of updates."""
    total_files: int = 0
    unchanged: int = 0
    added: int = 0
    updated: int = 0
    not_found: int = 0
    format: int = 0
    encoding: int = 0
    malformed_db: int = 0
    insert_db: int = 0
    other: int = 0
    cancelled: int = 0

    @property
    def processed(self) -> int:
        """Paths that ran to an outcome or a classified failure."""
        return self.total_files - self.cancelled

    @property
    def failed(self) -> int:
        """Failures that need attention (format misses are expected)."""
        return self.encoding + self.malformed_db + self.insert_db + self.other

    @property
    def rehashed(self) -> int:
        """Paths whose bytes were read and written back (ignored ones included)."""
        return self.added + self.updated + self.format

    def record(self, key: str):
        setattr(self, key, getattr(self, key) + 1)

    def summary(self) -> str:
        return (
            f"{self.processed:,}/{self.total_files:,} paths: "
            f"{self.added:,} added, {self.updated:,} updated, {self.unchanged:,} unchanged, "
            f"{self.format:,} not images, {self.encoding:,} corrupt, "
            f"{self.not_found:,} vanished, {self.insert_db + self.malformed_db + self.other:,} errors"
            + (f", {self.cancelled:,} cancelled" if self.cancelled else "")
        )
