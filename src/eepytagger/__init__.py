"""Tag a live or replayed timeline with elapsed-time stamps."""

from eepytagger.cli import cli, main

__all__ = ["cli", "main"]
