"""
Unit tests for the database/index store module.
"""

import os
import sqlite3

import pytest

from glowie.database import IndexStore, get_store, reset_store
from glowie.database.utils import to_signed64, to_unsigned64


class TestSignedConversion:
    """Test the unsigned <-> signed 64-bit mapping."""

    @pytest.mark.parametrize("value", [0, 1, 2 ** 63 - 1, 2 ** 63, 2 ** 64 - 1])
    def test_roundtrip(self, value):
        signed = to_signed64(value)
        assert -(2 ** 63) <= signed < 2 ** 63
        assert to_unsigned64(signed) == value


class TestIndexStore:
    """Test IndexStore class."""

    def test_initialization(self, temp_db):
        IndexStore(db_path=temp_db)
        assert os.path.exists(temp_db)

    def test_reopen_keeps_rows(self, temp_db, make_entry):
        IndexStore(db_path=temp_db).upsert(make_entry("/a.png"))
        assert IndexStore(db_path=temp_db).get("/a.png") is not None

    def test_upsert_and_get(self, store, make_entry):
        entry = make_entry("/photos/a.png", content_hash=2 ** 64 - 5, perceptual_hash=bytes(range(8)))
        store.upsert(entry)

        stored = store.get("/photos/a.png")
        assert stored is not None
        assert stored.content_hash == 2 ** 64 - 5
        assert stored.perceptual_hash == bytes(range(8))
        assert stored.file_name == "a.png"
        assert stored.path_depth == 2
        assert stored.ignored is False

    def test_get_missing(self, store):
        assert store.get("/nope.png") is None
        assert store.get_rows("/nope.png") == []

    def test_upsert_replaces_in_place(self, store, make_entry):
        store.upsert(make_entry("/a.png", content_hash=1))
        store.upsert(make_entry("/b.png", content_hash=2))
        store.upsert(make_entry("/a.png", content_hash=3, file_size=999))

        rows = store.get_rows("/a.png")
        assert len(rows) == 1
        assert rows[0].content_hash == 3
        assert rows[0].file_size == 999
        # Row id kept, so natural order is unchanged
        assert store.list_paths() == ["/a.png", "/b.png"]

    def test_ignored_entry(self, store, make_entry):
        store.upsert(make_entry("/notes.png", ignored=True))
        stored = store.get("/notes.png")
        assert stored.ignored is True
        assert stored.perceptual_hash is None

    def test_duplicate_content_hashes(self, store, make_entry):
        store.upsert(make_entry("/a.png", content_hash=10))
        store.upsert(make_entry("/b.png", content_hash=10))
        store.upsert(make_entry("/c.png", content_hash=20))
        store.upsert(make_entry("/x.txt", content_hash=30, ignored=True))
        store.upsert(make_entry("/y.txt", content_hash=30, ignored=True))

        assert [to_unsigned64(h) for h in store.duplicate_content_hashes()] == [10]
        assert sorted(to_unsigned64(h) for h in store.duplicate_content_hashes(include_ignored=True)) == [10, 30]

    def test_entries_with_hash(self, store, make_entry):
        big = 2 ** 64 - 1
        store.upsert(make_entry("/b.png", content_hash=big))
        store.upsert(make_entry("/a.png", content_hash=big))
        members = store.entries_with_hash(big)
        assert [m.full_path for m in members] == ["/b.png", "/a.png"]

    def test_iter_image_entries_sorted_and_paged(self, store, make_entry):
        paths = [f"/img{i:03d}.png" for i in range(7)]
        for path in reversed(paths):
            store.upsert(make_entry(path))
        store.upsert(make_entry("/img000.txt", ignored=True))

        listed = [e.full_path for e in store._operations.iter_image_entries(page_size=3)]
        assert listed == paths

    def test_list_paths_prefix(self, store, make_entry):
        store.upsert(make_entry("/photos/a.png"))
        store.upsert(make_entry("/photos/sub/b.png"))
        store.upsert(make_entry("/photos_old/c.png"))
        store.upsert(make_entry("/other/100%_d.png"))

        assert store.list_paths(prefix="/photos/") == ["/photos/a.png", "/photos/sub/b.png"]
        assert store.list_paths(prefix="/other/100%") == ["/other/100%_d.png"]
        assert store.list_paths(prefix="/other/100_") == []

    def test_count_and_stats(self, store, make_entry):
        store.upsert(make_entry("/a.png"))
        store.upsert(make_entry("/b.png"))
        store.upsert(make_entry("/c.txt", ignored=True))

        assert store.count_entries() == 2
        assert store.count_entries(include_ignored=True) == 3

        stats = store.get_stats()
        assert stats['total_entries'] == 3
        assert stats['image_entries'] == 2
        assert stats['ignored_entries'] == 1
        assert stats['db_path'] == store.db_path

    def test_unique_path_constraint(self, store, temp_db):
        conn = sqlite3.connect(temp_db)
        try:
            conn.execute(
                "INSERT INTO entries (full_path, content_hash, file_size, modified_time, "
                "created_time, file_name, path_depth) VALUES ('/a', 1, 1, 1, 1, 'a', 1)"
            )
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO entries (full_path, content_hash, file_size, modified_time, "
                    "created_time, file_name, path_depth) VALUES ('/a', 2, 1, 1, 1, 'a', 1)"
                )
        finally:
            conn.close()

    def test_vacuum(self, store, make_entry):
        store.upsert(make_entry("/a.png"))
        store.vacuum()
        assert store.count_entries() == 1


class TestGetStore:
    """Test the process-wide store accessor."""

    def test_singleton(self, temp_db):
        reset_store()
        try:
            first = get_store(temp_db)
            assert get_store() is first
            assert first.db_path == temp_db
        finally:
            reset_store()


class TestImageScanPaging:
    """Test the default page size of the image scan."""

    def test_scan_crosses_page_boundary(self, store, make_entry):
        from glowie.database.utils import PAGE_SIZE

        paths = [f"/img{i:05d}.png" for i in range(PAGE_SIZE + 1)]
        for path in paths:
            store.upsert(make_entry(path))

        assert [e.full_path for e in store.iter_image_entries()] == paths
