from __future__ import annotations

import random

import pytest
from statemachine.exceptions import TransitionNotAllowed

from spinwheel.api.models import CoinSide, GameMode
from spinwheel.coin import flip_coin
from spinwheel.config import DEFAULT_PALETTE, SessionSettings, settings_from_env
from spinwheel.fsm import ModeFSM
from spinwheel.session import WheelSession


def test_mode_fsm_starts_in_reward() -> None:
    fsm = ModeFSM()
    assert fsm.mode == GameMode.reward


def test_mode_fsm_switches_both_ways() -> None:
    fsm = ModeFSM()
    assert fsm.switch_to(GameMode.elimination) is True
    assert fsm.mode == GameMode.elimination
    assert fsm.switch_to(GameMode.elimination) is False
    assert fsm.switch_to(GameMode.reward) is True
    assert fsm.mode == GameMode.reward


def test_mode_fsm_guards_raw_transitions() -> None:
    fsm = ModeFSM(GameMode.elimination)
    with pytest.raises(TransitionNotAllowed):
        fsm.start_elimination()


def test_set_mode_accepts_string_values() -> None:
    s = WheelSession()
    s.set_mode("elimination")
    assert s.mode == GameMode.elimination
    with pytest.raises(ValueError):
        s.set_mode("chaos")


def test_default_mode_from_settings() -> None:
    s = WheelSession(SessionSettings(default_mode=GameMode.elimination))
    assert s.mode == GameMode.elimination


def test_settings_defaults_from_empty_env() -> None:
    settings = settings_from_env()
    assert settings.name_max_length == 50
    assert settings.palette == DEFAULT_PALETTE
    assert settings.seed is None
    assert settings.default_mode == GameMode.reward


def test_settings_from_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SPINWHEEL_NAME_MAX_LENGTH", "20")
    monkeypatch.setenv("SPINWHEEL_PALETTE", "#111111, #222222")
    monkeypatch.setenv("SPINWHEEL_SEED", "99")
    monkeypatch.setenv("SPINWHEEL_DEFAULT_MODE", "elimination")

    settings = settings_from_env()

    assert settings.name_max_length == 20
    assert settings.palette == ("#111111", "#222222")
    assert settings.seed == 99
    assert settings.default_mode == GameMode.elimination


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("SPINWHEEL_NAME_MAX_LENGTH", "lots"),
        ("SPINWHEEL_NAME_MAX_LENGTH", "0"),
        ("SPINWHEEL_PALETTE", "#111111"),
        ("SPINWHEEL_PALETTE", "#111111,#111111"),
        ("SPINWHEEL_DEFAULT_MODE", "chaos"),
    ],
)
def test_settings_from_env_rejects_bad_values(monkeypatch: pytest.MonkeyPatch, key: str, value: str) -> None:
    monkeypatch.setenv(key, value)
    with pytest.raises(ValueError):
        settings_from_env()


def test_flip_coin_is_seedable_and_uses_both_sides() -> None:
    sides = [flip_coin(random.Random(3)) for _ in range(5)]
    assert len(set(sides)) == 1

    rng = random.Random(11)
    seen = {flip_coin(rng) for _ in range(100)}
    assert seen == {CoinSide.heads, CoinSide.tails}
