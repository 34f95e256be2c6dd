"""
Hashing module for the indexer package.

Provides the content hash (xxHash64 over raw bytes) and the perceptual
hash (pHash over decoded pixels), plus conversions between imagehash
objects and the packed bytes stored in the index.
"""

from __future__ import annotations

import io
import math

import numpy as np
import xxhash

from ..config import PHASH_SIZE
from ..errors import EncodingError, FormatError
from .dependencies import Image, imagehash, _logger

# Pillow reads this many bytes to pick a plugin
_SIGNATURE_BYTES = 16


def compute_content_hash(data: bytes) -> int:
    """Unsigned 64-bit xxHash64 of a byte string."""
    return xxhash.xxh64_intdigest(data)


def _claimed_by_plugin(data: bytes) -> bool:
    """
    True if a registered Pillow plugin recognises the file signature.

    Image.open reports a plugin's header parse failure the same way as an
    unknown format, so the signature check tells the two apart.
    """
    prefix = data[:_SIGNATURE_BYTES]
    if not prefix:
        return False
    for _, accept in Image.OPEN.values():
        if accept is None:
            continue
        try:
            result = accept(prefix)
        except Exception:
            # Some accept functions index into the prefix unguarded
            continue
        # A str result is a plugin warning, not a match
        if result and not isinstance(result, str):
            return True
    return False


def hash_to_bytes(phash: imagehash.ImageHash) -> bytes:
    """Pack an ImageHash bit matrix into bytes (row-major, MSB first)."""
    return np.packbits(phash.hash.flatten()).tobytes()


def bytes_to_hash(data: bytes) -> imagehash.ImageHash:
    """Rebuild an ImageHash from bytes produced by hash_to_bytes()."""
    bits = np.unpackbits(np.frombuffer(data, dtype=np.uint8)).astype(bool)
    side = math.isqrt(bits.size)
    if side * side != bits.size:
        raise ValueError(f"Perceptual hash of {len(data)} bytes is not a square bit matrix")
    return imagehash.ImageHash(bits.reshape(side, side))


def hamming_distance(a: bytes, b: bytes) -> int:
    """Count of differing bits between two packed perceptual hashes."""
    return bytes_to_hash(a) - bytes_to_hash(b)


def extract_perceptual_hash(data: bytes, path: str = "", hash_size: int = PHASH_SIZE) -> bytes:
    """
    Decode image bytes and compute their perceptual hash.

    Args:
        data: Raw file contents
        path: Source path, used for error messages only
        hash_size: pHash side length (hash_size**2 bits)

    Returns:
        Packed perceptual hash bytes

    Raises:
        FormatError: No Pillow plugin recognises the data
        EncodingError: Format recognised but decoding failed
    """
    try:
        img = Image.open(io.BytesIO(data))
    except Image.UnidentifiedImageError as e:
        if _claimed_by_plugin(data):
            raise EncodingError(path, f"Corrupt image header in {path}") from e
        raise FormatError(path, f"Not a recognised image format: {path}") from e
    except Exception as e:
        raise EncodingError(path, f"Failed to read image header for {path}: {e}") from e

    with img:
        # Force a full decode so truncated/corrupt data fails here
        try:
            img.load()
        except Exception as e:
            raise EncodingError(path, f"Corrupt or truncated image {path}: {e}") from e

        try:
            if img.mode not in ('RGB', 'L'):
                img = img.convert('RGB')
            phash = imagehash.phash(img, hash_size=hash_size)
        except Exception as e:
            _logger.debug(f"Perceptual hash failed for {path} (mode={img.mode}): {e}")
            raise EncodingError(path, f"Could not hash decoded image {path}: {e}") from e

    return hash_to_bytes(phash)


__all__ = [
    'compute_content_hash',
    'hash_to_bytes',
    'bytes_to_hash',
    'hamming_distance',
    'extract_perceptual_hash',
]
