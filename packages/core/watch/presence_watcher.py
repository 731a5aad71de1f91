"""
Background watcher that polls for a presence file.

Loop: check path -> (found) claim flag, run match action, send signal, exit
                 -> (missing) wait poll interval, re-check flag, repeat
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Callable, Optional, Protocol

from .cancellation import CancellationFlag
from .types import WatchConfig

log = logging.getLogger(__name__)


class SignalSender(Protocol):
    def send(self) -> bool:
        ...


def path_exists(path: str) -> bool:
    """Existence check that reports any OS-level failure as 'not present'."""
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except (OSError, ValueError) as e:
        log.debug("Existence check for %s failed: %s", path, e)
        return False
    return True


class PresenceWatcher:
    """
    Polls `config.path` on its own thread until it appears or the flag is
    cancelled. On a match the action and the signal each fire once.
    """

    def __init__(
        self,
        config: WatchConfig,
        flag: CancellationFlag,
        on_match: Callable[[], None],
        sender: SignalSender,
        exists: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self._cfg = config
        self._flag = flag
        self._on_match = on_match
        self._sender = sender
        self._exists = exists or path_exists

        self._thread: Optional[threading.Thread] = None
        self._polls = 0

    @property
    def polls(self) -> int:
        """Number of existence checks performed so far."""
        return self._polls

    def start(self) -> None:
        if self._thread is not None:
            log.debug("Presence watcher already started; ignoring")
            return
        self._thread = threading.Thread(target=self._run, name="PresenceWatcher", daemon=True)
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the watcher thread. Returns True once it has exited."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _check(self) -> bool:
        self._polls += 1
        try:
            return bool(self._exists(self._cfg.path))
        except Exception:
            log.exception("Existence probe raised; treating %s as not present", self._cfg.path)
            return False

    def _run(self) -> None:
        log.info("Watching for %s (every %.1fs)", self._cfg.path, self._cfg.poll_interval_s)
        while self._flag.active:
            if self._check():
                # Lost the race against cancel(): stay silent.
                if not self._flag.claim():
                    break
                log.info("Presence file %s found after %d poll(s)", self._cfg.path, self._polls)
                self._fire()
                return

            if not self._flag.wait(self._cfg.poll_interval_s):
                break

        log.info("Watch for %s cancelled after %d poll(s)", self._cfg.path, self._polls)

    def _fire(self) -> None:
        try:
            self._on_match()
        except Exception:
            log.exception("Match action failed; signalling anyway")
        self._sender.send()
