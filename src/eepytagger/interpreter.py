"""The tagging session state machine.

``CommandInterpreter.execute`` consumes one trimmed input line, updates the
session clock and tag store, autosaves the store to the scratch file after
every change, and returns an ``Outcome`` for the front end to display.
"""

from dataclasses import dataclass
from pathlib import Path

from eepytagger.clock import SessionClock
from eepytagger.commands import (
    ALL,
    DeleteCommand,
    EditCommand,
    EndCommand,
    HelpCommand,
    OffsetCommand,
    PauseCommand,
    ResumeCommand,
    StartCommand,
    TagCommand,
    UnknownCommand,
    parse_command,
)
from eepytagger.errors import (
    CapacityExceededError,
    NotStartedError,
    PersistenceError,
    TaggerError,
    UnknownCommandError,
)
from eepytagger.persistence import save_tags
from eepytagger.store import TagStore
from eepytagger.timecode import format_time

HELP_TEMPLATE = """
--- eepytagger ---
Commands:
  !start [HH:MM:SS]                Start a tagging session, optionally setting an initial timestamp offset.
  !end                             End the tagging session and save to the output file.
  !offset <n>/all +/-<seconds>     Adjust the timestamp of tag(s) <n>/all by +/- seconds.
  !offset +/-<seconds>             Adjust the timestamp of the last tag by +/- seconds.
  !previous +/-<seconds>           Adjust the timestamp of the last tag by +/- seconds.
  !p +/-<seconds>                  Same as !previous.
  !e <n> <new text>                Change the text of tag <n>, if <n> is not provided it edits the last tag,
                                   '$' represents the previous version of the tag (can be escaped).
  !pause                           Pauses the timer.
  !resume                          Resumes the timer.
  !delete <n>                      Delete tag <n>.
  !help                            Show this help message.
  <any text>                       Add a new tag with the current timestamp and the input text.

Command-line options:
  -f <output_file>                 Specify output file (current: {destination}).
  -t <temp_file>                   Specify temporary file (current: {scratch}).
  --resume <file>                  Resume tagging from an existing file.

Use up/down arrow keys to cycle through command history.
Maximum {max_entries} tags allowed.
------------------
"""


@dataclass(frozen=True)
class Outcome:
    lines: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    error: bool = False
    terminate: bool = False

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def render_help(destination, scratch, max_entries: int) -> str:
    return HELP_TEMPLATE.format(destination=destination, scratch=scratch, max_entries=max_entries)


class CommandInterpreter:
    """Owns the tag store and session clock for one tagging session."""

    def __init__(self, destination, scratch, store: TagStore | None = None, clock: SessionClock | None = None):
        self.destination = Path(destination)
        self.scratch = Path(scratch)
        self.store = store if store is not None else TagStore()
        self.clock = clock if clock is not None else SessionClock()
        self._handlers = {
            StartCommand: self._start,
            EndCommand: self._end,
            HelpCommand: self._help,
            PauseCommand: self._pause,
            ResumeCommand: self._resume,
            OffsetCommand: self._offset,
            EditCommand: self._edit,
            DeleteCommand: self._delete,
            UnknownCommand: self._unknown,
            TagCommand: self._tag,
        }

    def execute(self, line: str) -> Outcome:
        line = line.strip()
        if not line:
            return Outcome()
        try:
            command = parse_command(line)
            return self._handlers[type(command)](command)
        except CapacityExceededError as e:
            return Outcome(lines=(str(e),), error=True, terminate=True)
        except TaggerError as e:
            return Outcome(lines=(str(e),), error=True)

    def save_final(self) -> Path | None:
        """Write the plain-format transcript to the destination.

        Nothing is written for an empty session.
        """
        if not self.store:
            return None
        return save_tags(self.destination, self.store, include_index=False)

    def _autosave(self) -> tuple[str, ...]:
        try:
            save_tags(self.scratch, self.store, include_index=True)
        except PersistenceError as e:
            return (str(e),)
        return ()

    def _changed(self, *lines: str) -> Outcome:
        return Outcome(lines=lines, warnings=self._autosave())

    def _start(self, command: StartCommand) -> Outcome:
        self.clock.start(command.offset)
        return Outcome(lines=(f"Started tagging from {format_time(command.offset)}",))

    def _end(self, command: EndCommand) -> Outcome:
        return Outcome(terminate=True)

    def _help(self, command: HelpCommand) -> Outcome:
        return Outcome(lines=(render_help(self.destination, self.scratch, self.store.max_entries),))

    def _pause(self, command: PauseCommand) -> Outcome:
        return Outcome(lines=(f"Paused at {format_time(self.clock.pause())}",))

    def _resume(self, command: ResumeCommand) -> Outcome:
        return Outcome(lines=(f"Resumed at {format_time(self.clock.resume())}",))

    def _offset(self, command: OffsetCommand) -> Outcome:
        if command.target == ALL:
            clamped = self.store.offset_all(command.delta)
            lines = [f"Tag {number} clamped to 00:00:00 (was negative after offset)." for number in clamped]
            lines.append(f"Adjusted all tags by {command.delta:+d} seconds.")
            return self._changed(*lines)
        if command.target is None:
            number, entry = self.store.offset_last(command.delta)
        else:
            number = command.target
            entry = self.store.offset_one(number, command.delta)
        return self._changed(f"Adjusted tag {number} to {format_time(entry.seconds)}")

    def _edit(self, command: EditCommand) -> Outcome:
        number = command.number if command.number is not None else len(self.store)
        self.store.edit_text(number, command.text)
        return self._changed(f"Edited tag {number}.")

    def _delete(self, command: DeleteCommand) -> Outcome:
        self.store.delete(command.number)
        return self._changed(f"Deleted tag {command.number}.")

    def _unknown(self, command: UnknownCommand) -> Outcome:
        raise UnknownCommandError(f"Unknown command: {command.line}. Use !help for a list of valid commands.")

    def _tag(self, command: TagCommand) -> Outcome:
        if not self.clock.started:
            raise NotStartedError("Use !start [HH:MM:SS] before tagging.")
        seconds, paused = self.clock.tag_elapsed()
        warnings = ("Warning: tagging while paused.",) if paused else ()
        try:
            self.store.append(seconds, command.text)
        except CapacityExceededError as e:
            return Outcome(lines=(str(e),), warnings=warnings, error=True, terminate=True)
        return Outcome(warnings=warnings + self._autosave())
