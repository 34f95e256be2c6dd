"""
Unit tests for the update pipeline and parallel driver.
"""

import os
import sqlite3
import threading

import pytest

from glowie.database import IndexStore
from glowie.errors import (
    EncodingError,
    ErrorKind,
    FormatError,
    InsertDBError,
    MalformedDBError,
    NotFoundError,
)
from glowie.indexer import find_candidate_files, update, update_paths_parallel
from glowie.models import Entry, UpdateOutcome


class CountingStore(IndexStore):
    """IndexStore that records every upsert."""

    def __init__(self, db_path):
        super().__init__(db_path)
        self.upserts = []

    def upsert(self, entry):
        self.upserts.append(entry.full_path)
        super().upsert(entry)


class TwoRowStore:
    """Store whose lookup reports a duplicated path."""

    def __init__(self):
        self.upserts = []

    def get_rows(self, full_path):
        return [Entry(full_path=full_path), Entry(full_path=full_path)]

    def upsert(self, entry):
        self.upserts.append(entry)


class FailingWriteStore:
    """Store that cannot write."""

    def get_rows(self, full_path):
        return []

    def upsert(self, entry):
        raise sqlite3.OperationalError("database is locked")


@pytest.fixture
def counting_store(temp_db):
    return CountingStore(temp_db)


class TestUpdate:
    """Test update() for a single path."""

    def test_new_file_added(self, store, sample_files):
        path = sample_files['identical1']
        assert update(path, store) == UpdateOutcome.ADDED

        entry = store.get(path)
        assert entry is not None
        assert entry.file_size == os.path.getsize(path)
        assert entry.file_name == "identical1.png"
        assert entry.ignored is False
        assert len(entry.perceptual_hash) == 8

    def test_second_update_is_unchanged(self, counting_store, sample_files):
        path = sample_files['photo']
        assert update(path, counting_store) == UpdateOutcome.ADDED
        assert update(path, counting_store) == UpdateOutcome.UNCHANGED
        assert update(path, counting_store) == UpdateOutcome.UNCHANGED
        assert counting_store.upserts == [path]

    def test_touched_file_is_updated(self, store, sample_files):
        path = sample_files['identical1']
        update(path, store)
        before = store.get(path)

        st = os.stat(path)
        os.utime(path, (st.st_atime, st.st_mtime + 100))

        assert update(path, store) == UpdateOutcome.UPDATED
        after = store.get(path)
        assert after.modified_time == before.modified_time + 100
        assert after.content_hash == before.content_hash
        assert len(store.get_rows(path)) == 1

    def test_identical_bytes_share_content_hash(self, store, sample_files):
        update(sample_files['identical1'], store)
        update(sample_files['identical2'], store)
        assert (
            store.get(sample_files['identical1']).content_hash
            == store.get(sample_files['identical2']).content_hash
        )

    def test_relative_path_is_normalized(self, store, sample_files, monkeypatch):
        directory, name = os.path.split(sample_files['photo'])
        monkeypatch.chdir(directory)
        update(name, store)
        assert store.get(os.path.abspath(name)) is not None

    def test_not_an_image_is_stored_as_ignored(self, counting_store, sample_files):
        path = sample_files['notes']
        with pytest.raises(FormatError) as exc_info:
            update(path, counting_store)
        assert exc_info.value.kind == ErrorKind.FORMAT

        entry = counting_store.get(path)
        assert entry is not None
        assert entry.ignored is True
        assert entry.perceptual_hash is None
        assert counting_store.upserts == [path]

    def test_ignored_file_not_rehashed(self, counting_store, sample_files):
        path = sample_files['notes']
        with pytest.raises(FormatError):
            update(path, counting_store)
        assert update(path, counting_store) == UpdateOutcome.UNCHANGED
        assert len(counting_store.upserts) == 1

    def test_corrupt_image_not_written(self, counting_store, sample_files):
        path = sample_files['truncated']
        with pytest.raises(EncodingError):
            update(path, counting_store)
        assert counting_store.get(path) is None
        assert counting_store.upserts == []

    @pytest.mark.parametrize("length", [8, 12, 30])
    def test_cut_header_not_written(self, counting_store, sample_files, temp_dir, length):
        path = temp_dir / f"cut{length}.png"
        with open(sample_files['identical1'], 'rb') as f:
            path.write_bytes(f.read()[:length])

        with pytest.raises(EncodingError):
            update(str(path), counting_store)
        assert counting_store.get(str(path)) is None
        assert counting_store.upserts == []

    def test_missing_file(self, store, temp_dir):
        missing = str(temp_dir / "gone.png")
        with pytest.raises(NotFoundError) as exc_info:
            update(missing, store)
        assert exc_info.value.path == missing
        assert store.get(missing) is None

    def test_duplicated_row_is_malformed(self, sample_files):
        fake = TwoRowStore()
        with pytest.raises(MalformedDBError) as exc_info:
            update(sample_files['identical1'], fake)
        assert exc_info.value.kind == ErrorKind.MALFORMED_DB
        assert fake.upserts == []

    def test_write_failure(self, sample_files):
        with pytest.raises(InsertDBError) as exc_info:
            update(sample_files['identical1'], FailingWriteStore())
        assert exc_info.value.kind == ErrorKind.INSERT_DB
        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)


class TestUpdatePathsParallel:
    """Test the parallel update driver."""

    def test_counts_every_outcome(self, store, sample_files):
        missing = str(os.path.join(os.path.dirname(sample_files['photo']), "gone.png"))
        paths = list(sample_files.values()) + [missing]

        stats = update_paths_parallel(paths, store, max_workers=4, show_progress=False)

        assert stats.total_files == len(paths)
        assert stats.added == 5
        assert stats.format == 2
        assert stats.encoding == 1
        assert stats.not_found == 1
        assert stats.cancelled == 0
        assert stats.processed == len(paths)

    def test_rerun_is_unchanged(self, store, sample_files):
        paths = [sample_files['identical1'], sample_files['photo']]
        update_paths_parallel(paths, store, show_progress=False)
        stats = update_paths_parallel(paths, store, show_progress=False)
        assert stats.unchanged == 2
        assert stats.rehashed == 0

    def test_cancelled_before_start(self, counting_store, sample_files):
        cancel = threading.Event()
        cancel.set()
        paths = list(sample_files.values())

        stats = update_paths_parallel(paths, counting_store, cancel=cancel, show_progress=False)

        assert stats.cancelled == len(paths)
        assert stats.processed == 0
        assert counting_store.upserts == []

    def test_progress_callback(self, store, sample_files):
        calls = []
        paths = [sample_files['identical1'], sample_files['identical2']]
        update_paths_parallel(
            paths, store, show_progress=False,
            progress_callback=lambda done, total: calls.append((done, total)),
        )
        assert calls[-1] == (2, 2)

    def test_empty_input(self, store):
        stats = update_paths_parallel([], store, show_progress=False)
        assert stats.total_files == 0


class TestFindCandidateFiles:
    """Test file discovery."""

    def test_all_files_by_default(self, temp_dir, sample_files):
        (temp_dir / "sub").mkdir()
        (temp_dir / "sub" / "readme.txt").write_text("hello")
        found = find_candidate_files(temp_dir)
        assert len(found) == len(sample_files) + 1
        assert all(os.path.isabs(p) for p in found)

    def test_images_only(self, temp_dir, sample_files):
        (temp_dir / "readme.txt").write_text("hello")
        found = find_candidate_files(temp_dir, images_only=True)
        assert not any(p.endswith(".txt") for p in found)
        assert len(found) == len(sample_files)

    def test_non_recursive(self, temp_dir, sample_files):
        (temp_dir / "sub").mkdir()
        (temp_dir / "sub" / "deep.png").write_bytes(b"x")
        found = find_candidate_files(temp_dir, recursive=False)
        assert not any(p.endswith("deep.png") for p in found)
