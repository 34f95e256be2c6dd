"""
Exception types raised by the indexing and clustering engine.

Per-path update failures all derive from IndexUpdateError and carry an
ErrorKind so drivers can count them without matching on classes.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of a failed update."""
    NOT_FOUND = 'not_found'
    FORMAT = 'format'
    ENCODING = 'encoding'
    MALFORMED_DB = 'malformed_db'
    INSERT_DB = 'insert_db'
    OTHER = 'other'


class GlowieError(Exception):
    """Base class for all engine errors."""


class IndexUpdateError(GlowieError):
    """
    Update of a single path failed.

    Attributes:
        path: Path that was being updated
        kind: ErrorKind classifying the failure
    """
    kind = ErrorKind.OTHER

    def __init__(self, path: str, message: str = ""):
        self.path = path
        super().__init__(message or f"{self.kind.value}: {path}")


class NotFoundError(IndexUpdateError):
    """Path vanished between enumeration and update."""
    kind = ErrorKind.NOT_FOUND


class FormatError(IndexUpdateError):
    """File is not a decodable image. The entry was still written as ignored."""
    kind = ErrorKind.FORMAT


class EncodingError(IndexUpdateError):
    """Image format recognised but the data is corrupt or truncated."""
    kind = ErrorKind.ENCODING


class MalformedDBError(IndexUpdateError):
    """More than one stored row exists for the path."""
    kind = ErrorKind.MALFORMED_DB


class InsertDBError(IndexUpdateError):
    """Writing the entry to the store failed."""
    kind = ErrorKind.INSERT_DB


class OtherError(IndexUpdateError):
    """Unclassified I/O or store read failure."""
    kind = ErrorKind.OTHER


class ClusteringError(GlowieError):
    """The store failed during a clustering pass."""


__all__ = [
    'ErrorKind',
    'GlowieError',
    'IndexUpdateError',
    'NotFoundError',
    'FormatError',
    'EncodingError',
    'MalformedDBError',
    'InsertDBError',
    'OtherError',
    'ClusteringError',
]
