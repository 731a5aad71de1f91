from __future__ import annotations

import os
import time
from typing import Callable

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def pump(qapp) -> Callable[..., bool]:
    """Process Qt events until `predicate()` holds or `timeout` expires."""

    def _pump(predicate: Callable[[], bool], timeout: float = 3.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            qapp.processEvents()
            if predicate():
                return True
            time.sleep(0.01)
        qapp.processEvents()
        return predicate()

    return _pump


class RecordingDispatcher:
    """Stands in for ActionDispatcher; records commands instead of spawning."""

    def __init__(self, fail: bool = False) -> None:
        self.launched: list[str] = []
        self.dispatched: list[str] = []
        self.fail = fail

    def launch(self, command: str) -> bool:
        self.launched.append(command)
        return not self.fail

    def dispatch(self, command: str):
        self.dispatched.append(command)
        return None


@pytest.fixture
def recorder() -> RecordingDispatcher:
    return RecordingDispatcher()
