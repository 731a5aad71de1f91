"""Unit tests for PresenceWatcher (existence probe and signal sender faked)."""

from __future__ import annotations

import os
import threading

import pytest

from packages.core.watch.cancellation import CancellationFlag
from packages.core.watch.presence_watcher import PresenceWatcher, path_exists
from packages.core.watch.types import WatchConfig

FAST = 0.01


class FakeSender:
    def __init__(self) -> None:
        self.count = 0
        self.sent = threading.Event()

    def send(self) -> bool:
        self.count += 1
        self.sent.set()
        return True


class ScriptedProbe:
    """Reports missing for the first `misses` polls, then present."""

    def __init__(self, misses: int) -> None:
        self.misses = misses
        self.calls = 0

    def __call__(self, path: str) -> bool:
        self.calls += 1
        return self.calls > self.misses


def make_watcher(probe, on_match=None, interval=FAST):
    flag = CancellationFlag()
    sender = FakeSender()
    matches = []
    watcher = PresenceWatcher(
        config=WatchConfig(path="/presence", poll_interval_s=interval),
        flag=flag,
        on_match=on_match or (lambda: matches.append(sender.count)),
        sender=sender,
        exists=probe,
    )
    return watcher, flag, sender, matches


@pytest.mark.parametrize("misses", [0, 1, 5])
def test_match_after_n_missing_polls(misses):
    probe = ScriptedProbe(misses)
    watcher, flag, sender, matches = make_watcher(probe)

    watcher.start()
    assert watcher.join(timeout=3.0)

    assert probe.calls == misses + 1
    assert watcher.polls == misses + 1
    assert sender.count == 1
    # Match action ran before the signal was sent.
    assert matches == [0]
    assert flag.outcome == "CLAIMED"


def test_cancel_before_file_appears():
    probe = ScriptedProbe(misses=10**9)
    watcher, flag, sender, matches = make_watcher(probe, interval=0.2)

    watcher.start()
    flag.cancel()
    assert watcher.join(timeout=1.0)
    assert matches == []
    assert sender.count == 0


def test_file_appearing_after_cancel_is_ignored():
    present = threading.Event()
    watcher, flag, sender, matches = make_watcher(lambda _: present.is_set())

    watcher.start()
    flag.cancel()
    present.set()
    assert watcher.join(timeout=1.0)
    assert matches == []
    assert sender.count == 0


def test_cancel_observed_within_one_poll_interval():
    watcher, flag, sender, _ = make_watcher(lambda _: False, interval=0.5)
    watcher.start()
    flag.cancel()
    assert watcher.join(timeout=0.5)


def test_probe_errors_do_not_stop_polling():
    calls = []

    def flaky(path):
        calls.append(path)
        if len(calls) < 3:
            raise PermissionError("denied")
        return True

    watcher, flag, sender, matches = make_watcher(flaky)
    watcher.start()
    assert watcher.join(timeout=3.0)
    assert len(calls) == 3
    assert sender.count == 1


def test_failing_match_action_still_signals():
    def boom():
        raise RuntimeError("spawn exploded")

    watcher, flag, sender, _ = make_watcher(ScriptedProbe(0), on_match=boom)
    watcher.start()
    assert watcher.join(timeout=3.0)
    assert sender.count == 1


def test_file_flapping_fires_once():
    # Present, missing, present again: still only one match.
    states = iter([True, False, True, True])
    watcher, flag, sender, matches = make_watcher(lambda _: next(states, True))
    watcher.start()
    assert watcher.join(timeout=3.0)
    assert len(matches) == 1
    assert sender.count == 1


def test_start_twice_is_noop():
    watcher, flag, sender, _ = make_watcher(ScriptedProbe(0))
    watcher.start()
    watcher.start()
    assert watcher.join(timeout=3.0)
    assert sender.count == 1


def test_real_file(tmp_path):
    target = tmp_path / "ready"
    flag = CancellationFlag()
    sender = FakeSender()
    watcher = PresenceWatcher(
        WatchConfig(path=str(target), poll_interval_s=FAST), flag, lambda: None, sender
    )
    watcher.start()
    assert not sender.sent.wait(0.05)
    target.touch()
    assert sender.sent.wait(3.0)
    assert watcher.join(timeout=1.0)


class TestPathExists:
    def test_existing(self, tmp_path):
        assert path_exists(str(tmp_path))

    def test_missing(self, tmp_path):
        assert not path_exists(str(tmp_path / "nope"))

    def test_invalid_path(self):
        assert not path_exists("bad\0path")

    @pytest.mark.skipif(os.geteuid() == 0, reason="root ignores directory permissions")
    def test_permission_denied_is_not_present(self, tmp_path):
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "file").touch()
        locked.chmod(0)
        try:
            assert not path_exists(str(locked / "file"))
        finally:
            locked.chmod(0o700)
