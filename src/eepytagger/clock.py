"""Session lifecycle and elapsed-time arithmetic."""

import time
from enum import Enum

from eepytagger.errors import AlreadyInStateError, NotStartedError


class SessionState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"


class SessionClock:
    """Elapsed session time, net of paused intervals.

    Time is sampled from ``now`` on demand; nothing ticks in the background.
    Elapsed values are whole seconds and never negative.
    """

    def __init__(self, now=time.monotonic):
        self._now = now
        self.state = SessionState.NOT_STARTED
        self._reference: float | None = None
        self._paused_at: float | None = None
        self._paused_total = 0.0

    @property
    def started(self) -> bool:
        return self.state is not SessionState.NOT_STARTED

    @property
    def paused(self) -> bool:
        return self.state is SessionState.PAUSED

    def _elapsed_at(self, instant: float, paused_total: float) -> int:
        return max(int(instant - self._reference - paused_total), 0)

    def _require_started(self) -> None:
        if not self.started:
            raise NotStartedError()

    def start(self, offset: int = 0) -> int:
        """Start the session as if ``offset`` seconds had already elapsed."""
        if self.started:
            raise AlreadyInStateError("Session already started.")
        self._reference = self._now() - offset
        self.state = SessionState.RUNNING
        return self.elapsed()

    def pause(self) -> int:
        self._require_started()
        if self.paused:
            raise AlreadyInStateError("Already paused.")
        self._paused_at = self._now()
        self.state = SessionState.PAUSED
        return self._elapsed_at(self._paused_at, self._paused_total)

    def resume(self) -> int:
        self._require_started()
        if not self.paused:
            raise AlreadyInStateError("Not currently paused.")
        now = self._now()
        self._paused_total += now - self._paused_at
        self._paused_at = None
        self.state = SessionState.RUNNING
        return self._elapsed_at(now, self._paused_total)

    def elapsed(self) -> int:
        """Elapsed seconds; frozen at the pause instant while paused."""
        self._require_started()
        if self.paused:
            return self._elapsed_at(self._paused_at, self._paused_total)
        return self._elapsed_at(self._now(), self._paused_total)

    def tag_elapsed(self) -> tuple[int, bool]:
        """Elapsed seconds for a new tag, and whether the session is paused.

        While paused, the in-progress pause counts as if it ended now.
        """
        self._require_started()
        now = self._now()
        paused_total = self._paused_total
        if self.paused:
            paused_total += now - self._paused_at
        return self._elapsed_at(now, paused_total), self.paused
