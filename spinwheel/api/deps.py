from __future__ import annotations

import random
from dataclasses import dataclass, field

from fastapi import Request

from spinwheel.config import SessionSettings
from spinwheel.core.events import SessionEvent
from spinwheel.session import WheelSession
from spinwheel.websocket_hub import SessionWebSocketHub


@dataclass(slots=True)
class SessionRuntime:
    """The one wheel session served by this process, plus its websocket fan-out.

    Engine events are queued in `outbox` as they happen and pushed to sockets by
    `flush()` once the route has finished mutating.
    """

    session: WheelSession
    hub: SessionWebSocketHub = field(default_factory=SessionWebSocketHub)
    outbox: list[SessionEvent] = field(default_factory=list)
    coin_rng: random.Random = field(default_factory=random.Random)

    async def flush(self) -> None:
        pending = list(self.outbox)
        self.outbox.clear()
        for event in pending:
            await self.hub.broadcast(event.as_message())


def create_runtime(settings: SessionSettings) -> SessionRuntime:
    runtime = SessionRuntime(session=WheelSession(settings), coin_rng=random.Random(settings.seed))
    runtime.session.subscribe(runtime.outbox.append)
    return runtime


def get_runtime(request: Request) -> SessionRuntime:
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise RuntimeError("Session runtime not initialized. Start the app before serving requests.")
    return runtime
