"""
Fire-and-forget shell command launcher.

Commands are handed to `sh -c` in a new session and never waited on: no exit
code tracking, no output capture. A daemon thread waits on each child only
so that it is reaped when it exits. Launch failures are logged and dropped; an
optional error callback is the only way they surface.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import Callable, Optional

log = logging.getLogger(__name__)

DEFAULT_SHELL = "/bin/sh"


class ActionDispatcher:
    def __init__(self, shell: str = DEFAULT_SHELL) -> None:
        self._shell = shell
        self._error_cb: Optional[Callable[[str, OSError], None]] = None

    def on_error(self, cb: Callable[[str, OSError], None]) -> None:
        self._error_cb = cb

    def launch(self, command: str) -> bool:
        """
        Start `command` and return at once without waiting for it.

        Returns:
            True if the process was spawned, False if spawning failed.
        """
        try:
            proc = subprocess.Popen(
                [self._shell, "-c", command],
                stdin=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            log.warning("Failed to launch %r via %s: %s", command, self._shell, e)
            self._emit_error(command, e)
            return False
        # Reap the child when it exits; its result is not inspected.
        threading.Thread(target=proc.wait, name="ActionReaper", daemon=True).start()
        log.info("Launched %r (pid %s)", command, proc.pid)
        return True

    def dispatch(self, command: str) -> threading.Thread:
        """Launch `command` from a separate short-lived thread."""
        t = threading.Thread(target=self.launch, args=(command,), name="ActionDispatch")
        t.start()
        return t

    def _emit_error(self, command: str, error: OSError) -> None:
        if self._error_cb:
            try:
                self._error_cb(command, error)
            except Exception:
                log.exception("Dispatch error callback failed")
