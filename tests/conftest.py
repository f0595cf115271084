from __future__ import annotations

import random
from collections.abc import Generator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from spinwheel.config import SessionSettings
from spinwheel.session import WheelSession


@pytest.fixture(autouse=True)
def _isolate_spinwheel_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests hermetic: ignore any SPINWHEEL_* settings from the developer's shell."""

    for key in ("SPINWHEEL_NAME_MAX_LENGTH", "SPINWHEEL_PALETTE", "SPINWHEEL_SEED", "SPINWHEEL_DEFAULT_MODE"):
        monkeypatch.delenv(key, raising=False)


class TickingClock:
    """Deterministic clock: each call is one second after the previous one."""

    def __init__(self) -> None:
        self._t = datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        self._t += timedelta(seconds=1)
        return self._t


@pytest.fixture()
def session() -> WheelSession:
    return WheelSession(SessionSettings(seed=1234), rng=random.Random(1234), clock=TickingClock())


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    """A TestClient with a fresh wheel session (startup runs per client context)."""

    from spinwheel.main import app

    with TestClient(app) as c:
        yield c
