"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from PIL import Image


def _mandelbrot(size=128):
    """Deterministic textured test image."""
    return Image.effect_mandelbrot((size, size), (-2.0, -1.5, 1.0, 1.5), 100).convert('RGB')


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_files(temp_dir):
    """
    Create a set of sample files for testing.

    Returns:
        dict with paths to:
        - identical1.png, identical2.png (byte-identical copies)
        - recompressed.png (same pixels as identical1, different bytes)
        - photo.jpg (same picture saved as JPEG)
        - mirrored.png (same picture flipped left-right)
        - notes.png, notes_copy.png (text files misnamed as images)
        - truncated.png (PNG cut off halfway)
    """
    files = {}
    base = _mandelbrot()

    path = temp_dir / "identical1.png"
    base.save(path, 'PNG')
    files['identical1'] = str(path)

    path = temp_dir / "identical2.png"
    shutil.copyfile(files['identical1'], path)
    files['identical2'] = str(path)

    path = temp_dir / "recompressed.png"
    base.save(path, 'PNG', optimize=True, compress_level=9)
    files['recompressed'] = str(path)

    path = temp_dir / "photo.jpg"
    base.save(path, 'JPEG', quality=95)
    files['photo'] = str(path)

    path = temp_dir / "mirrored.png"
    base.transpose(Image.Transpose.FLIP_LEFT_RIGHT).save(path, 'PNG')
    files['mirrored'] = str(path)

    path = temp_dir / "notes.png"
    path.write_text("definitely not an image")
    files['notes'] = str(path)

    path = temp_dir / "notes_copy.png"
    path.write_text("definitely not an image")
    files['notes_copy'] = str(path)

    data = Path(files['identical1']).read_bytes()
    path = temp_dir / "truncated.png"
    path.write_bytes(data[:len(data) // 2])
    files['truncated'] = str(path)

    return files


@pytest.fixture
def temp_db(temp_dir):
    """Path for a temporary index database."""
    return str(temp_dir / "index" / "test_index.db")


@pytest.fixture
def store(temp_db):
    """Fresh IndexStore backed by a temporary database."""
    from glowie.database import IndexStore

    return IndexStore(db_path=temp_db)


@pytest.fixture
def make_entry():
    """Factory for Entry objects with sensible defaults."""
    from glowie.models import Entry

    def _make(full_path, content_hash=1, perceptual_hash=b'\x00' * 8, ignored=False, **kwargs):
        if ignored:
            perceptual_hash = None
        return Entry(
            full_path=full_path,
            content_hash=content_hash,
            perceptual_hash=perceptual_hash,
            file_size=kwargs.pop('file_size', 100),
            modified_time=kwargs.pop('modified_time', 1_700_000_000),
            created_time=kwargs.pop('created_time', 1_700_000_000),
            ignored=ignored,
            **kwargs,
        )

    return _make
