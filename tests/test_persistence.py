"""Tests for reading and writing tag files."""

import pytest

from eepytagger.errors import PersistenceError
from eepytagger.persistence import load_tags, parse_line, save_tags
from eepytagger.store import TagStore


def _store(*pairs, **kwargs):
    store = TagStore(**kwargs)
    for seconds, text in pairs:
        store.append(seconds, text)
    return store


def _pairs(store):
    return [(e.seconds, e.text) for e in store]


def test_save_indexed_format(tmp_path):
    path = tmp_path / "scratch.txt"
    store = _store((0, "hello"), (3725, "world"))

    save_tags(path, store, include_index=True)

    assert path.read_text(encoding="utf-8") == " 1. 00:00:00 hello\n 2. 01:02:05 world\n"


def test_save_plain_format(tmp_path):
    path = tmp_path / "out.txt"
    save_tags(path, _store((61, "a b c")), include_index=False)
    assert path.read_text(encoding="utf-8") == "00:01:01 a b c\n"


def test_save_index_widens_past_two_digits(tmp_path):
    path = tmp_path / "scratch.txt"
    store = _store(*[(i, f"t{i}") for i in range(12)])

    save_tags(path, store, include_index=True)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == " 1. 00:00:00 t0"
    assert lines[11] == "12. 00:00:11 t11"


def test_save_truncates_previous_contents(tmp_path):
    path = tmp_path / "out.txt"
    path.write_text("stale\n" * 10, encoding="utf-8")

    save_tags(path, _store((1, "fresh")), include_index=False)

    assert path.read_text(encoding="utf-8") == "00:00:01 fresh\n"


def test_save_failure_raises_persistence_error(tmp_path):
    with pytest.raises(PersistenceError):
        save_tags(tmp_path / "missing" / "out.txt", _store((1, "a")), include_index=True)


@pytest.mark.parametrize("include_index", [True, False])
def test_round_trip(tmp_path, include_index):
    path = tmp_path / "tags.txt"
    store = _store((0, "start"), (59, "  padded text"), (3600, "$ and \\ kept"), (99 * 3600, "late"))

    save_tags(path, store, include_index=include_index)
    loaded = load_tags(path)

    assert _pairs(loaded) == _pairs(store)


def test_load_skips_invalid_timestamps_with_warning(tmp_path):
    path = tmp_path / "tags.txt"
    path.write_text(
        "00:00:05 fine\n"
        " 2. 00:61:00 bad minutes\n"
        "999999999:00:00 too big\n"
        "00:00:07 also fine\n",
        encoding="utf-8",
    )
    warnings = []

    loaded = load_tags(path, warn=warnings.append)

    assert _pairs(loaded) == [(5, "fine"), (7, "also fine")]
    assert warnings == [
        "Invalid timestamp in file: 00:61:00",
        "Timestamp too large: 999999999:00:00",
    ]


def test_load_skips_timestamp_with_huge_digit_run(tmp_path):
    path = tmp_path / "tags.txt"
    huge = "1" * 5000 + ":00:00"
    path.write_text(f"{huge} text\n00:00:01 ok\n", encoding="utf-8")
    warnings = []

    loaded = load_tags(path, warn=warnings.append)

    assert _pairs(loaded) == [(1, "ok")]
    assert warnings == [f"Timestamp too large: {huge}"]


def test_load_silently_skips_unrecognized_lines(tmp_path):
    path = tmp_path / "tags.txt"
    path.write_text(
        "just some notes\n"
        "\n"
        "1. not-a-time here\n"
        "00:00:09\n"
        " 3. 00:00:10 kept\n",
        encoding="utf-8",
    )
    warnings = []

    loaded = load_tags(path, warn=warnings.append)

    assert _pairs(loaded) == [(10, "kept")]
    assert warnings == []


def test_load_stops_at_max_entries(tmp_path):
    path = tmp_path / "tags.txt"
    path.write_text("".join(f"00:00:{i:02d} t{i}\n" for i in range(10)), encoding="utf-8")

    loaded = load_tags(path, max_entries=3)

    assert _pairs(loaded) == [(0, "t0"), (1, "t1"), (2, "t2")]


def test_load_missing_file_is_empty(tmp_path):
    warnings = []
    loaded = load_tags(tmp_path / "nope.txt", warn=warnings.append)

    assert len(loaded) == 0
    assert len(warnings) == 1


def test_load_windows_line_endings(tmp_path):
    path = tmp_path / "tags.txt"
    path.write_bytes(b"00:00:01 crlf\r\n")
    assert _pairs(load_tags(path)) == [(1, "crlf")]


def test_parse_line_prefers_indexed_shape():
    assert parse_line(" 4. 00:00:03 x y\n") == ("00:00:03", "x y")
    assert parse_line("00:00:03 4. x\n") == ("00:00:03", "4. x")
    assert parse_line("hello world\n") is None
