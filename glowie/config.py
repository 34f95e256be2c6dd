"""
Configuration constants for Glowie.

This module contains all configurable settings including:
- Perceptual hash geometry used by the fingerprint extractor
- Defaults for the update pool and near-duplicate clustering
- Extensions treated as likely images during discovery
"""

import os

# Extensions considered "image-like" when discovery is restricted to images.
# Every regular file is indexed by default; non-images end up ignored.
IMAGE_EXTENSIONS = {
    # Common formats
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tiff', '.tif',
    # Other formats Pillow can decode
    '.ico', '.icns', '.psd', '.heic', '.heif', '.avif',
    '.pbm', '.pgm', '.ppm', '.pnm', '.tga', '.dds',
    '.jp2', '.j2k', '.jpf', '.jpx', '.pcx', '.sgi',
}

# Perceptual hash geometry: pHash over an 8x8 DCT block -> 64 bits (8 bytes)
PHASH_SIZE = 8
PHASH_BITS = PHASH_SIZE * PHASH_SIZE
PHASH_BYTES = PHASH_BITS // 8

# Default near-duplicate threshold, as percent of PHASH_BITS that may differ
DEFAULT_DISTANCE_PERCENT = 10

# Default number of concurrent update workers
DEFAULT_WORKERS = 8

# Pillow decompression bomb limit for large scans/panoramas
MAX_IMAGE_PIXELS = 500_000_000  # 500 megapixels

# SQLite index database location
INDEX_DB_FILE = os.path.join(os.path.expanduser('~'), '.glowie', 'glowie.db')
