"""Reading and writing tag files.

Two line formats are used:

    " 1. 00:01:05 opening titles"   indexed, written to the scratch file
    "00:01:05 opening titles"       plain, written to the final destination

The reader accepts either, so a scratch file can be resumed directly.
"""

import re
from pathlib import Path

import click

from eepytagger.errors import PersistenceError, TimestampError, TimestampOverflowError
from eepytagger.store import MAX_ENTRIES, TagStore
from eepytagger.timecode import format_time, looks_like_timestamp, parse_time

INDEXED_LINE = re.compile(r"^\s*[+-]?\d+\.\s*(\S+) (.+)$")
PLAIN_LINE = re.compile(r"^\s*(\S+) (.+)$")


def format_line(number: int, seconds: int, text: str, *, include_index: bool) -> str:
    if include_index:
        return f"{number:2d}. {format_time(seconds)} {text}\n"
    return f"{format_time(seconds)} {text}\n"


def save_tags(path, store: TagStore, *, include_index: bool) -> Path:
    """Write every tag in ``store`` to ``path``, replacing its contents."""
    target = Path(path)
    try:
        with open(target, "w", encoding="utf-8") as f:
            for number, entry in enumerate(store, start=1):
                f.write(format_line(number, entry.seconds, entry.text, include_index=include_index))
    except OSError as e:
        raise PersistenceError(f"Failed to save {target}: {e.strerror or e}") from e
    return target


def _echo_warning(message: str) -> None:
    click.echo(message, err=True)


def parse_line(line: str):
    """Split a tag line into ``(timestamp_token, text)``, or None."""
    line = line.rstrip("\r\n")
    for pattern in (INDEXED_LINE, PLAIN_LINE):
        match = pattern.match(line)
        if match is not None and looks_like_timestamp(match.group(1)):
            return match.group(1), match.group(2)
    return None


def load_tags(path, *, max_entries: int = MAX_ENTRIES, warn=None) -> TagStore:
    """Load a tag file written in either format.

    Lines that are not tag lines are skipped silently; lines whose timestamp
    is out of range are skipped with a warning. A file that cannot be opened
    yields an empty store.
    """
    warn = warn or _echo_warning
    store = TagStore(max_entries=max_entries)
    target = Path(path)
    try:
        with open(target, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                if store.is_full:
                    break
                parsed = parse_line(line)
                if parsed is None:
                    continue
                token, text = parsed
                try:
                    seconds = parse_time(token)
                except TimestampOverflowError:
                    warn(f"Timestamp too large: {token}")
                    continue
                except TimestampError:
                    warn(f"Invalid timestamp in file: {token}")
                    continue
                store.append(seconds, text)
    except OSError as e:
        warn(f"Failed to open {target} for loading: {e.strerror or e}")
        return TagStore(max_entries=max_entries)
    return store
