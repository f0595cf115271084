from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

EventType = Literal[
    "ENTRIES_CHANGED",
    "MODE_CHANGED",
    "SETTINGS_CHANGED",
    "DRAW_RECORDED",
    "DRAW_UNDONE",
    "SESSION_RESET",
]


@dataclass(frozen=True, slots=True)
class SessionEvent:
    type: EventType
    payload: dict[str, Any]
    ts: datetime

    @staticmethod
    def now(*, type: EventType, payload: dict[str, Any]) -> "SessionEvent":
        return SessionEvent(type=type, payload=payload, ts=datetime.now(tz=UTC))

    def as_message(self) -> dict[str, Any]:
        """JSON-friendly form for websocket subscribers."""

        return {"type": self.type, "payload": self.payload, "ts": self.ts.isoformat()}


EventListener = Callable[[SessionEvent], None]
