from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

DEFAULT_POLL_INTERVAL_S = 1.0

CoordinatorState = Literal["IDLE", "WATCHING", "MATCHED", "CANCELLED"]
TERMINAL_STATES: frozenset[str] = frozenset({"MATCHED", "CANCELLED"})


@dataclass(frozen=True)
class WatchConfig:
    """What to watch for and how often to look."""
    path: str
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S  # seconds
