from __future__ import annotations

import asyncio
from typing import Any

from fastapi import WebSocket


class SessionWebSocketHub:
    """In-process WebSocket fan-out for one wheel session.

    Contract:
      - register a connection with `connect(websocket)`.
      - broadcast JSON-serializable dicts with `broadcast(payload)`.

    Sockets that fail to receive are dropped.
    """

    def __init__(self) -> None:
        self._conns: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._conns.add(websocket)

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._conns.discard(websocket)

    async def broadcast(self, payload: dict[str, Any]) -> None:
        async with self._lock:
            conns = list(self._conns)

        if not conns:
            return

        dead: list[WebSocket] = []
        for ws in conns:
            try:
                await ws.send_json(payload)
            except Exception:
                dead.append(ws)

        if dead:
            async with self._lock:
                for ws in dead:
                    self._conns.discard(ws)
