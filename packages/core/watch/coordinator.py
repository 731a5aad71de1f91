"""
Coordinator tying together the run flag, presence watcher, found signal and
command dispatch.

State machine: IDLE -> WATCHING -> MATCHED | CANCELLED
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from packages.core.actions.dispatcher import ActionDispatcher
from packages.shared.config import AppConfig

from .cancellation import CancellationFlag
from .event_bridge import EventBridge
from .presence_watcher import PresenceWatcher
from .types import DEFAULT_POLL_INTERVAL_S, TERMINAL_STATES, CoordinatorState

log = logging.getLogger(__name__)


class WaitCoordinator:
    """
    Waits for the presence file, then launches the main command once.

    Must be created on the Qt thread: the matched callback is delivered there.
    """

    def __init__(
        self,
        config: AppConfig,
        dispatcher: Optional[ActionDispatcher] = None,
        exists: Optional[Callable[[str], bool]] = None,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    ) -> None:
        self._cfg = config
        self._dispatcher = dispatcher or ActionDispatcher()
        self._lock = threading.Lock()
        self._state: CoordinatorState = "IDLE"

        self._flag = CancellationFlag()
        self._bridge = EventBridge()
        self._bridge.attach(self._on_found)
        self._watcher = PresenceWatcher(
            config=config.to_watch_config(poll_interval_s),
            flag=self._flag,
            on_match=self._run_main_command,
            sender=_MatchedSender(self),
            exists=exists,
        )

        self._matched_cb: Optional[Callable[[], None]] = None
        self._cancelled_cb: Optional[Callable[[], None]] = None

    @property
    def config(self) -> AppConfig:
        return self._cfg

    @property
    def state(self) -> CoordinatorState:
        with self._lock:
            return self._state

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def on_matched(self, cb: Callable[[], None]) -> None:
        self._matched_cb = cb

    def on_cancelled(self, cb: Callable[[], None]) -> None:
        self._cancelled_cb = cb

    def start(self) -> None:
        with self._lock:
            if self._state != "IDLE":
                log.debug("start() ignored in state %s", self._state)
                return
            self._state = "WATCHING"
        self._watcher.start()

    def cancel(self) -> bool:
        """
        Stop watching. Returns True if this call cancelled the watch, False if
        it was a no-op (already matched, already cancelled).
        """
        with self._lock:
            if self._state in TERMINAL_STATES:
                log.debug("cancel() ignored in state %s", self._state)
                return False
            if not self._flag.cancel():
                # The watcher claimed a match first.
                log.debug("cancel() lost the race against a match")
                return False
            self._state = "CANCELLED"

        log.info("Watch cancelled by user")
        if self._cancelled_cb:
            self._cancelled_cb()
        return True

    def trigger_auxiliary(self) -> threading.Thread:
        spec = self._cfg.extra_command
        log.info("Triggering %s action", spec.label)
        return self._dispatcher.dispatch(spec.command)

    def auto_trigger(self) -> Optional[threading.Thread]:
        if not self._cfg.auto_trigger_extra:
            return None
        return self.trigger_auxiliary()

    def join(self, timeout: Optional[float] = None) -> bool:
        return self._watcher.join(timeout)

    def _run_main_command(self) -> None:
        # Watcher thread, after a successful claim on the flag.
        self._dispatcher.launch(self._cfg.command)

    def _mark_matched(self) -> bool:
        # Watcher thread, after the main command was launched. Sending and the
        # state change happen under one lock so MATCHED implies "signal sent".
        with self._lock:
            sent = self._bridge.send()
            self._state = "MATCHED"
        return sent

    def _on_found(self) -> None:
        # Qt thread.
        log.debug("Found signal received")
        if self._matched_cb:
            self._matched_cb()


class _MatchedSender:
    """Signal sender handed to the watcher; records the match on the coordinator."""

    def __init__(self, coordinator: WaitCoordinator) -> None:
        self._coordinator = coordinator

    def send(self) -> bool:
        return self._coordinator._mark_matched()
