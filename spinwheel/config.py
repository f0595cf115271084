from __future__ import annotations

import os
from dataclasses import dataclass

from spinwheel.api.models import GameMode


DEFAULT_NAME_MAX_LENGTH = 50
DEFAULT_PALETTE: tuple[str, str] = ("#FF6B6B", "#4ECDC4")


@dataclass(frozen=True, slots=True)
class SessionSettings:
    name_max_length: int = DEFAULT_NAME_MAX_LENGTH
    # Exactly two colors; entries alternate between them starting at palette[0].
    palette: tuple[str, str] = DEFAULT_PALETTE
    # For reproducible draws (tests, demos). None => seeded from the OS.
    seed: int | None = None
    default_mode: GameMode = GameMode.reward

    def __post_init__(self) -> None:
        if self.name_max_length <= 0:
            raise ValueError("name_max_length must be positive")
        if len(self.palette) != 2:
            raise ValueError("palette must contain exactly two colors")
        if self.palette[0] == self.palette[1]:
            raise ValueError("palette colors must differ")


def _parse_palette(raw: str) -> tuple[str, str]:
    colors = [c.strip() for c in raw.split(",") if c.strip()]
    if len(colors) != 2:
        raise ValueError(f"SPINWHEEL_PALETTE must list exactly two colors, got {raw!r}")
    return colors[0], colors[1]


def settings_from_env() -> SessionSettings:
    max_len_raw = os.environ.get("SPINWHEEL_NAME_MAX_LENGTH")
    palette_raw = os.environ.get("SPINWHEEL_PALETTE")
    seed_raw = os.environ.get("SPINWHEEL_SEED")
    mode_raw = os.environ.get("SPINWHEEL_DEFAULT_MODE")

    try:
        max_len = int(max_len_raw) if max_len_raw else DEFAULT_NAME_MAX_LENGTH
        seed = int(seed_raw) if seed_raw else None
    except ValueError as e:
        raise ValueError(f"Invalid integer in spinwheel settings: {e}") from e

    try:
        mode = GameMode(mode_raw) if mode_raw else GameMode.reward
    except ValueError as e:
        allowed = ",".join(m.value for m in GameMode)
        raise ValueError(f"SPINWHEEL_DEFAULT_MODE must be one of: {allowed}") from e

    return SessionSettings(
        name_max_length=max_len,
        palette=_parse_palette(palette_raw) if palette_raw else DEFAULT_PALETTE,
        seed=seed,
        default_mode=mode,
    )
