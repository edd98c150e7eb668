"""Error types raised by the tagging session engine.

Every error carries the one-line message shown to the user; the command
interpreter turns them into diagnostics instead of letting them escape.
"""


class TaggerError(Exception):
    """Base class for recoverable session errors."""

    default_message = "Tagging error."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class TimestampError(TaggerError):
    default_message = "Invalid timestamp."


class InvalidTimestampError(TimestampError):
    default_message = "Invalid timestamp format. Use HH:MM:SS with valid values."


class TimestampOverflowError(TimestampError):
    default_message = "Timestamp too large."


class InvalidIndexError(TaggerError):
    default_message = "Invalid tag index."


class CapacityExceededError(TaggerError):
    default_message = "Maximum number of entries reached."


class EmptyStoreError(TaggerError):
    default_message = "No tags to adjust."


class NegativeResultError(TaggerError):
    default_message = "Adjustment would result in negative timestamp."


class UnknownCommandError(TaggerError):
    default_message = "Unknown command. Use !help for a list of valid commands."


class NotStartedError(TaggerError):
    default_message = "Session not started yet."


class AlreadyInStateError(TaggerError):
    default_message = "Session is already in that state."


class UsageError(TaggerError):
    default_message = "Invalid command arguments."


class PersistenceError(TaggerError):
    """Opening or writing a tag file failed."""

    default_message = "Failed to write tag file."
