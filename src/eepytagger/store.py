"""Ordered, bounded collection of timestamped tags."""

from dataclasses import dataclass

from eepytagger.errors import (
    CapacityExceededError,
    EmptyStoreError,
    InvalidIndexError,
    NegativeResultError,
    TimestampOverflowError,
)
from eepytagger.timecode import MAX_SECONDS

MAX_ENTRIES = 1000
MAX_TEXT_LENGTH = 1023

SUBSTITUTION_MARKER = "$"
ESCAPED_MARKER = "\\$"


@dataclass
class TagEntry:
    seconds: int
    text: str


def expand_marker(template: str, previous: str, *, max_length: int = MAX_TEXT_LENGTH) -> str:
    """Replace each ``$`` in ``template`` with ``previous``.

    ``\\$`` produces a literal ``$``. The result is cut to ``max_length``.
    """
    parts: list[str] = []
    i = 0
    while i < len(template):
        if template.startswith(ESCAPED_MARKER, i):
            parts.append(SUBSTITUTION_MARKER)
            i += len(ESCAPED_MARKER)
            continue
        ch = template[i]
        parts.append(previous if ch == SUBSTITUTION_MARKER else ch)
        i += 1
    return "".join(parts)[:max_length]


class TagStore:
    """Tags in insertion order, addressed by 1-based tag numbers.

    The store never holds more than ``max_entries`` tags and never lets a
    single-tag offset take ``seconds`` below zero.
    """

    def __init__(self, entries=None, *, max_entries: int = MAX_ENTRIES, max_text_length: int = MAX_TEXT_LENGTH):
        self.max_entries = max_entries
        self.max_text_length = max_text_length
        self._entries: list[TagEntry] = []
        for entry in entries or ():
            self.append(entry.seconds, entry.text)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def entries(self) -> list[TagEntry]:
        return list(self._entries)

    def get(self, number: int) -> TagEntry:
        return self._entries[self._position(number)]

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.max_entries

    def _position(self, number: int) -> int:
        if number < 1 or number > len(self._entries):
            raise InvalidIndexError()
        return number - 1

    def append(self, seconds: int, text: str) -> int:
        """Append a tag and return its 1-based number."""
        if self.is_full:
            raise CapacityExceededError(f"Maximum number of entries ({self.max_entries}) reached.")
        self._entries.append(TagEntry(seconds=max(int(seconds), 0), text=text[: self.max_text_length]))
        return len(self._entries)

    def edit_text(self, number: int, template: str) -> TagEntry:
        entry = self._entries[self._position(number)]
        entry.text = expand_marker(template, entry.text, max_length=self.max_text_length)
        return entry

    def delete(self, number: int) -> TagEntry:
        return self._entries.pop(self._position(number))

    def offset_one(self, number: int, delta: int) -> TagEntry:
        entry = self._entries[self._position(number)]
        if entry.seconds + delta < 0:
            raise NegativeResultError()
        if entry.seconds + delta > MAX_SECONDS:
            raise TimestampOverflowError("Adjustment would exceed the largest timestamp.")
        entry.seconds += delta
        return entry

    def offset_last(self, delta: int) -> tuple[int, TagEntry]:
        if not self._entries:
            raise EmptyStoreError()
        number = len(self._entries)
        return number, self.offset_one(number, delta)

    def offset_all(self, delta: int) -> list[int]:
        """Shift every tag by ``delta``, clamping negatives to zero.

        Unlike offset_one/offset_last a negative result is not rejected.
        A result above ``MAX_SECONDS`` rejects the whole call before any tag
        changes. Returns the numbers of the tags that were clamped.
        """
        if not self._entries:
            raise EmptyStoreError()
        if any(entry.seconds + delta > MAX_SECONDS for entry in self._entries):
            raise TimestampOverflowError("Adjustment would exceed the largest timestamp.")
        clamped = []
        for number, entry in enumerate(self._entries, start=1):
            shifted = entry.seconds + delta
            if shifted < 0:
                shifted = 0
                clamped.append(number)
            entry.seconds = shifted
        return clamped
