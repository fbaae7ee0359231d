"""Clock collaborators (signed Unix seconds)."""

from __future__ import annotations

import time

from ..state.widths import require_i64


class SystemClock:
    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """Deterministic clock for tests and replays."""

    def __init__(self, start: int = 0) -> None:
        self._now = require_i64("start", start)

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int = 1) -> int:
        self._now = require_i64("now", self._now + seconds)
        return self._now
