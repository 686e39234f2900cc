"""Tracking of heuristic sessions whose alerts are in cool down."""

from __future__ import annotations

import time
from typing import Callable

from pessimism.core.ids import SUUID


class CoolDownHandler:
    """Remembers until when each session's alerts are suppressed."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._sessions: dict[SUUID, float] = {}

    def add(self, suuid: SUUID, cool_down_seconds: float) -> None:
        """Start a cool down period for a session."""
        self._sessions[suuid] = self._clock() + cool_down_seconds

    def update(self) -> None:
        """Forget sessions whose cool down has ended."""
        now = self._clock()
        self._sessions = {
            suuid: until for suuid, until in self._sessions.items() if until >= now
        }

    def is_cool_down(self, suuid: SUUID) -> bool:
        """Whether the session is currently in cool down."""
        until = self._sessions.get(suuid)
        return until is not None and until > self._clock()

    def __len__(self) -> int:
        return len(self._sessions)