"""Conversion between elapsed seconds and ``HH:MM:SS`` strings."""

import re

from eepytagger.errors import InvalidTimestampError, TimestampOverflowError

# Tag files store seconds as signed 32-bit values.
MAX_SECONDS = 2**31 - 1

TIMESTAMP_PATTERN = re.compile(r"^([+-]?\d+):([+-]?\d+):([+-]?\d+)$")


def format_time(seconds: int) -> str:
    """Format ``seconds`` as ``HH:MM:SS``.

    Negative values are clamped to zero. Hours are not wrapped at 24 and grow
    past two digits when needed.
    """
    seconds = max(int(seconds), 0)
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def looks_like_timestamp(token: str) -> bool:
    return TIMESTAMP_PATTERN.match(token or "") is not None


def parse_time(text: str) -> int:
    """Parse ``H:M:S`` into total seconds.

    Raises InvalidTimestampError for a malformed string, a negative field, or
    minutes/seconds above 59, and TimestampOverflowError when the total does
    not fit in ``MAX_SECONDS``.
    """
    match = TIMESTAMP_PATTERN.match((text or "").strip())
    if match is None:
        raise InvalidTimestampError()
    try:
        hours, minutes, secs = (int(part) for part in match.groups())
    except ValueError as e:
        # digit runs past the interpreter's int conversion limit
        raise TimestampOverflowError() from e
    if hours < 0 or minutes < 0 or minutes > 59 or secs < 0 or secs > 59:
        raise InvalidTimestampError()
    total = hours * 3600 + minutes * 60 + secs
    if total > MAX_SECONDS:
        raise TimestampOverflowError()
    return total
