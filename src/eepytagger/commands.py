"""Parsing of trimmed input lines into command objects.

A line starting with ``!`` is split into a command word and its argument
string; the word selects a parser from ``COMMAND_PARSERS``. Any other line is
a new tag.
"""

import re
from dataclasses import dataclass

from eepytagger.errors import UsageError
from eepytagger.timecode import looks_like_timestamp, parse_time

COMMAND_MARKER = "!"
ALL = "all"

DELTA_PATTERN = re.compile(r"^[+-]?\d+$")
NUMBER_PATTERN = re.compile(r"^\d+$")


@dataclass(frozen=True)
class StartCommand:
    offset: int = 0


@dataclass(frozen=True)
class EndCommand:
    pass


@dataclass(frozen=True)
class HelpCommand:
    pass


@dataclass(frozen=True)
class PauseCommand:
    pass


@dataclass(frozen=True)
class ResumeCommand:
    pass


@dataclass(frozen=True)
class OffsetCommand:
    """Shift tag timestamps by ``delta`` seconds.

    ``target`` is a 1-based tag number, ``ALL``, or None for the last tag.
    """

    target: int | str | None
    delta: int


@dataclass(frozen=True)
class EditCommand:
    number: int | None
    text: str


@dataclass(frozen=True)
class DeleteCommand:
    number: int


@dataclass(frozen=True)
class UnknownCommand:
    line: str


@dataclass(frozen=True)
class TagCommand:
    text: str


def _no_arguments(word: str, command):
    def parse(args: str):
        if args:
            raise UsageError(f"Usage: {word}")
        return command()

    return parse


def _to_int(token: str, usage: str) -> int:
    try:
        return int(token)
    except ValueError as e:
        # digit runs past the interpreter's int conversion limit
        raise UsageError(usage) from e


def _parse_delta(token: str, usage: str) -> int:
    if not DELTA_PATTERN.match(token):
        raise UsageError(usage)
    return _to_int(token, usage)


def parse_start(args: str) -> StartCommand:
    if not args:
        return StartCommand()
    if not looks_like_timestamp(args):
        raise UsageError("Invalid !start format. Use !start [HH:MM:SS].")
    return StartCommand(offset=parse_time(args))


def parse_offset(args: str) -> OffsetCommand:
    usage = "Usage: !offset <n|all> +/-<seconds>"
    tokens = args.split()
    if len(tokens) == 1:
        return OffsetCommand(target=None, delta=_parse_delta(tokens[0], usage))
    if len(tokens) != 2:
        raise UsageError(usage)
    target, delta = tokens
    if target == ALL:
        return OffsetCommand(target=ALL, delta=_parse_delta(delta, usage))
    if not NUMBER_PATTERN.match(target):
        raise UsageError(usage)
    return OffsetCommand(target=_to_int(target, usage), delta=_parse_delta(delta, usage))


def parse_previous(args: str) -> OffsetCommand:
    usage = "Usage: !previous +/-<seconds>"
    tokens = args.split()
    if len(tokens) != 1:
        raise UsageError(usage)
    return OffsetCommand(target=None, delta=_parse_delta(tokens[0], usage))


def parse_edit(args: str) -> EditCommand:
    number = None
    text = args
    parts = args.split(maxsplit=1)
    if parts and NUMBER_PATTERN.match(parts[0]):
        number = _to_int(parts[0], "Usage: !e [n] new text")
        text = parts[1].strip() if len(parts) > 1 else ""
    if not text:
        raise UsageError("Usage: !e [n] new text")
    return EditCommand(number=number, text=text)


def parse_delete(args: str) -> DeleteCommand:
    tokens = args.split()
    if len(tokens) != 1 or not NUMBER_PATTERN.match(tokens[0]):
        raise UsageError("Usage: !delete <n>")
    return DeleteCommand(number=_to_int(tokens[0], "Usage: !delete <n>"))


COMMAND_PARSERS = {
    "!start": parse_start,
    "!end": _no_arguments("!end", EndCommand),
    "!help": _no_arguments("!help", HelpCommand),
    "!pause": _no_arguments("!pause", PauseCommand),
    "!resume": _no_arguments("!resume", ResumeCommand),
    "!offset": parse_offset,
    "!previous": parse_previous,
    "!p": parse_previous,
    "!e": parse_edit,
    "!delete": parse_delete,
}


def split_command(line: str) -> tuple[str, str]:
    parts = line.split(maxsplit=1)
    args = parts[1].strip() if len(parts) > 1 else ""
    return parts[0], args


def parse_command(line: str):
    """Turn one trimmed, non-empty input line into a command object.

    Raises UsageError (or a TimestampError for ``!start``) when a known
    command has malformed arguments.
    """
    if not line.startswith(COMMAND_MARKER):
        return TagCommand(text=line)
    word, args = split_command(line)
    parser = COMMAND_PARSERS.get(word)
    if parser is None:
        return UnknownCommand(line=line)
    return parser(args)
