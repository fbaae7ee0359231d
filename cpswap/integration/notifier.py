"""
Notification collaborators for swap-completed records.

Delivery is fire-and-forget from the engine's point of view (see
`cpswap.core.engine.emit_safely`).
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Dict, List, Union

from ..core.types import SwapEvent
from ..state.canonical import canonical_json_bytes


EVENT_NAME = "SwapEvent"


def event_to_dict(event: SwapEvent) -> Dict[str, Union[int, str]]:
    """Plain-dict form handed to external consumers (indexers, UIs)."""
    out: Dict[str, Union[int, str]] = {"event": EVENT_NAME}
    out.update(asdict(event))
    return out


class EventLog:
    """Collects events in memory, in emission order."""

    def __init__(self) -> None:
        self.events: List[SwapEvent] = []

    def notify(self, event: SwapEvent) -> None:
        self.events.append(event)

    def __len__(self) -> int:
        return len(self.events)


class LoggingNotifier:
    """Writes each event as one canonical-JSON log line."""

    def __init__(self, logger_name: str = "cpswap.events") -> None:
        self._logger = logging.getLogger(logger_name)

    def notify(self, event: SwapEvent) -> None:
        self._logger.info(canonical_json_bytes(event_to_dict(event)).decode("utf-8"))
