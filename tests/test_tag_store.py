"""Tests for the bounded tag store."""

import pytest

from eepytagger.errors import (
    CapacityExceededError,
    EmptyStoreError,
    InvalidIndexError,
    NegativeResultError,
    TimestampOverflowError,
)
from eepytagger.store import TagEntry, TagStore, expand_marker
from eepytagger.timecode import MAX_SECONDS


def _store(*pairs, **kwargs):
    store = TagStore(**kwargs)
    for seconds, text in pairs:
        store.append(seconds, text)
    return store


def _pairs(store):
    return [(e.seconds, e.text) for e in store]


def test_append_returns_one_based_number():
    store = TagStore()
    assert store.append(5, "first") == 1
    assert store.append(9, "second") == 2
    assert _pairs(store) == [(5, "first"), (9, "second")]


def test_append_rejected_at_capacity():
    store = _store((1, "a"), (2, "b"), max_entries=2)

    with pytest.raises(CapacityExceededError) as exc:
        store.append(3, "c")

    assert "(2)" in str(exc.value)
    assert len(store) == 2


def test_append_truncates_long_text():
    store = TagStore(max_text_length=5)
    store.append(0, "abcdefgh")
    assert store.get(1).text == "abcde"


def test_constructor_copies_entries():
    source = [TagEntry(1, "a"), TagEntry(2, "b")]
    store = TagStore(source)
    store.offset_all(10)
    assert source[0].seconds == 1
    assert _pairs(store) == [(11, "a"), (12, "b")]


class TestEditText:
    def test_replaces_text(self):
        store = _store((1, "old"))
        store.edit_text(1, "new")
        assert store.get(1).text == "new"

    def test_marker_expands_to_previous_text(self):
        store = _store((1, "a"), (2, "world"))
        store.edit_text(2, "new $")
        assert store.get(2).text == "new world"

    def test_escaped_marker_is_literal(self):
        store = _store((1, "price"))
        store.edit_text(1, "\\$5 $")
        assert store.get(1).text == "$5 price"

    def test_invalid_index(self):
        store = _store((1, "a"))
        for number in (0, 2, -1):
            with pytest.raises(InvalidIndexError):
                store.edit_text(number, "x")


class TestExpandMarker:
    def test_multiple_markers(self):
        assert expand_marker("$-$", "ab") == "ab-ab"

    def test_lone_backslash_is_literal(self):
        assert expand_marker("a\\b", "x") == "a\\b"

    def test_result_is_truncated(self):
        assert expand_marker("$$$", "abcd", max_length=10) == "abcdabcdab"


class TestDelete:
    def test_later_entries_shift_down(self):
        store = _store((1, "a"), (2, "b"), (3, "c"), (4, "d"))

        removed = store.delete(2)

        assert (removed.seconds, removed.text) == (2, "b")
        assert _pairs(store) == [(1, "a"), (3, "c"), (4, "d")]
        assert store.get(2).text == "c"

    def test_invalid_index(self):
        store = _store((1, "a"))
        with pytest.raises(InvalidIndexError):
            store.delete(2)
        assert len(store) == 1


class TestOffsets:
    def test_offset_one(self):
        store = _store((10, "a"), (20, "b"))
        store.offset_one(1, 5)
        assert _pairs(store) == [(15, "a"), (20, "b")]

    def test_offset_one_rejects_negative_without_mutating(self):
        store = _store((10, "a"))
        with pytest.raises(NegativeResultError):
            store.offset_one(1, -11)
        assert store.get(1).seconds == 10

    def test_offset_one_to_exactly_zero(self):
        store = _store((10, "a"))
        store.offset_one(1, -10)
        assert store.get(1).seconds == 0

    def test_offset_one_invalid_index(self):
        with pytest.raises(InvalidIndexError):
            _store((1, "a")).offset_one(3, 1)

    def test_offset_last(self):
        store = _store((10, "a"), (20, "b"))
        number, entry = store.offset_last(-5)
        assert number == 2
        assert entry.seconds == 15

    def test_offset_last_rejects_negative(self):
        store = _store((10, "a"), (3, "b"))
        with pytest.raises(NegativeResultError):
            store.offset_last(-4)
        assert store.get(2).seconds == 3

    def test_offset_last_empty(self):
        with pytest.raises(EmptyStoreError):
            TagStore().offset_last(1)

    def test_offset_all_clamps_instead_of_rejecting(self):
        store = _store((10, "a"), (100, "b"), (5, "c"))

        clamped = store.offset_all(-20)

        assert clamped == [1, 3]
        assert _pairs(store) == [(0, "a"), (80, "b"), (0, "c")]

    def test_offset_all_empty(self):
        with pytest.raises(EmptyStoreError):
            TagStore().offset_all(5)

    def test_offset_one_rejects_overflow_without_mutating(self):
        store = _store((10, "a"))
        with pytest.raises(TimestampOverflowError):
            store.offset_one(1, MAX_SECONDS)
        assert store.get(1).seconds == 10

        store.offset_one(1, MAX_SECONDS - 10)
        assert store.get(1).seconds == MAX_SECONDS

    def test_offset_all_overflow_leaves_every_tag_unchanged(self):
        store = _store((0, "a"), (50, "b"))
        with pytest.raises(TimestampOverflowError):
            store.offset_all(MAX_SECONDS - 10)
        assert _pairs(store) == [(0, "a"), (50, "b")]
