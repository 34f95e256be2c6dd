"""
Unit tests for keep policies and input validators.
"""

import random

import pytest

from glowie.models import DuplicateSet, Entry
from glowie.utils import (
    KeepPolicy,
    apply_keep_policy,
    order_entries,
    resolve_keep,
    validate_directory,
    validate_distance_percent,
)


def _entries():
    return [
        Entry(full_path="/a/b/c/img.png", created_time=30, modified_time=10),
        Entry(full_path="/img.png", created_time=20, modified_time=30),
        Entry(full_path="/a/longer_name.png", created_time=10, modified_time=20),
        Entry(full_path="/x.png", created_time=20, modified_time=20),
    ]


class TestOrderEntries:
    """Test ordering under each keep policy."""

    @pytest.mark.parametrize("policy,first", [
        (KeepPolicy.CREATED_FIRST, "/a/longer_name.png"),
        (KeepPolicy.MODIFIED_FIRST, "/a/b/c/img.png"),
        (KeepPolicy.PATH_SHORTEST, "/x.png"),
        (KeepPolicy.NAME_SHORTEST, "/x.png"),
        (KeepPolicy.PATH_SHALLOWEST, "/img.png"),
    ])
    def test_first_entry(self, policy, first):
        assert order_entries(_entries(), policy)[0].full_path == first

    def test_full_path_breaks_ties(self):
        # /img.png and /x.png share created_time=20
        ordered = [e.full_path for e in order_entries(_entries(), KeepPolicy.CREATED_FIRST)]
        assert ordered == ["/a/longer_name.png", "/img.png", "/x.png", "/a/b/c/img.png"]

    @pytest.mark.parametrize("policy", list(KeepPolicy))
    def test_order_independent_of_input_order(self, policy):
        expected = [e.full_path for e in order_entries(_entries(), policy)]
        rng = random.Random(1234)
        for _ in range(10):
            shuffled = _entries()
            rng.shuffle(shuffled)
            assert [e.full_path for e in order_entries(shuffled, policy)] == expected

    @pytest.mark.parametrize("policy", list(KeepPolicy))
    def test_reversed_is_exact_reverse(self, policy):
        forward = [e.full_path for e in order_entries(_entries(), policy)]
        backward = [e.full_path for e in order_entries(_entries(), policy, reversed=True)]
        assert backward == forward[::-1]

    def test_shallowest_prefers_root(self):
        entries = [Entry(full_path="/a/b/c/img.png"), Entry(full_path="/img.png")]
        assert order_entries(entries, KeepPolicy.PATH_SHALLOWEST)[0].full_path == "/img.png"
        assert order_entries(entries, KeepPolicy.PATH_SHALLOWEST, reversed=True)[0].full_path == "/a/b/c/img.png"

    def test_policy_by_value(self):
        assert order_entries(_entries(), 'path-shallowest')[0].full_path == "/img.png"

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            order_entries(_entries(), 'largest-first')


class TestResolveKeep:
    """Test keep/extra split."""

    def test_split(self):
        keep, extras = resolve_keep(_entries(), KeepPolicy.PATH_SHALLOWEST)
        assert keep.full_path == "/img.png"
        assert len(extras) == 3
        assert keep not in extras

    def test_empty(self):
        assert resolve_keep([], KeepPolicy.PATH_SHORTEST) == (None, [])

    def test_apply_keep_policy(self):
        sets = [
            DuplicateSet(entries=[Entry(full_path="/a/x.png"), Entry(full_path="/x.png")]),
            DuplicateSet(entries=[Entry(full_path="/p/q/y.png"), Entry(full_path="/p/y.png")]),
        ]
        selections = apply_keep_policy(sets, KeepPolicy.PATH_SHALLOWEST)
        assert selections == {
            "/x.png": 'keep',
            "/a/x.png": 'extra',
            "/p/y.png": 'keep',
            "/p/q/y.png": 'extra',
        }


class TestValidators:
    """Test input validation helpers."""

    @pytest.mark.parametrize("value", [0, 10, 12.5, 100])
    def test_valid_percent(self, value):
        assert validate_distance_percent(value) == (True, None)

    @pytest.mark.parametrize("value", [-1, 100.1, "10", None, True])
    def test_invalid_percent(self, value):
        valid, message = validate_distance_percent(value)
        assert valid is False
        assert message

    def test_directory(self, temp_dir):
        assert validate_directory(temp_dir)[0] is True
        assert validate_directory(temp_dir / "missing")[0] is False
        file_path = temp_dir / "f.txt"
        file_path.write_text("x")
        assert validate_directory(file_path)[0] is False
