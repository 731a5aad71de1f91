"""
Shared run flag between the foreground loop and the presence watcher.

The flag starts active and can be switched off exactly once, either by the
user cancelling or by the watcher claiming a match. Whichever comes first
wins; the other call reports False.
"""

from __future__ import annotations

import threading
from typing import Literal, Optional

FlagOutcome = Literal["CANCELLED", "CLAIMED"]


class CancellationFlag:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stopped = threading.Event()
        self._outcome: Optional[FlagOutcome] = None

    @property
    def active(self) -> bool:
        return not self._stopped.is_set()

    @property
    def outcome(self) -> Optional[FlagOutcome]:
        with self._lock:
            return self._outcome

    def cancel(self) -> bool:
        """Stop the watch. Returns False if the flag was already off."""
        return self._finish("CANCELLED")

    def claim(self) -> bool:
        """Mark the watch as matched. Returns False if it was already off."""
        return self._finish("CLAIMED")

    def wait(self, timeout: Optional[float]) -> bool:
        """
        Sleep up to `timeout` seconds, waking early if the flag goes off.
        Returns True if the flag is still active afterwards.
        """
        self._stopped.wait(timeout)
        return self.active

    def _finish(self, outcome: FlagOutcome) -> bool:
        with self._lock:
            if self._outcome is not None:
                return False
            self._outcome = outcome
            self._stopped.set()
            return True
