"""
One-shot "found" notification from the watcher thread to the Qt thread.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from PySide6.QtCore import QObject, Qt, Signal

log = logging.getLogger(__name__)


class EventBridge(QObject):
    """
    Carries a single unit event across threads.

    `send()` may be called from any thread and never blocks. The Qt signal is
    queued, so the attached callback always runs on the thread that owns the
    bridge (the foreground loop), exactly once, after which it is detached.
    """

    found = Signal()

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._lock = threading.Lock()
        self._sent = False
        self._delivered = False
        self._callback: Optional[Callable[[], None]] = None
        self.found.connect(self._deliver, Qt.QueuedConnection)

    @property
    def sent(self) -> bool:
        with self._lock:
            return self._sent

    @property
    def delivered(self) -> bool:
        return self._delivered

    def attach(self, callback: Callable[[], None]) -> None:
        """Register the consumer. A signal already in flight still reaches it."""
        self._callback = callback

    def send(self) -> bool:
        with self._lock:
            if self._sent:
                log.debug("Found signal already sent; dropping duplicate")
                return False
            self._sent = True
        self.found.emit()
        return True

    def _deliver(self) -> None:
        if self._delivered:
            return
        self._delivered = True
        self.found.disconnect(self._deliver)
        callback, self._callback = self._callback, None
        if callback is None:
            log.debug("Found signal delivered with no consumer attached")
            return
        callback()
