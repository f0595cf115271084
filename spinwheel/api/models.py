from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class GameMode(StrEnum):
    reward = "reward"
    elimination = "elimination"


class CoinSide(StrEnum):
    heads = "heads"
    tails = "tails"


class ImportChoice(StrEnum):
    """Which subset of an imported batch actually lands on the wheel."""

    all = "all"
    unique = "unique"
    duplicates = "duplicates"


class Entry(BaseModel):
    """One item on the wheel.

    Frozen: renames and recolors swap in a copy at the same position, so
    snapshots handed to collaborators (and history records) never change under them.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    color: str


class DrawRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry: Entry
    timestamp: datetime


class DrawOutcome(BaseModel):
    winner: Entry
    removed: bool
    remaining: int

    # Set only in elimination mode once the wheel is down to its last entry.
    terminal_winner: Entry | None = None


class SessionView(BaseModel):
    """Everything a renderer needs to draw the wheel and its controls."""

    entries: list[Entry]
    mode: GameMode
    persist_draw_result: bool
    sound_enabled: bool
    can_undo: bool
    last_result: DrawRecord | None = None
    terminal_winner: Entry | None = None
    history: list[DrawRecord] = Field(default_factory=list)
    snapshot_size: int = 0


class AddEntryRequest(BaseModel):
    name: str = Field(..., min_length=1)


class RenameEntryRequest(BaseModel):
    name: str = Field(..., min_length=1)


class NamesRequest(BaseModel):
    names: list[str] = Field(default_factory=list)


class ImportRequest(BaseModel):
    names: list[str] = Field(default_factory=list)
    choice: ImportChoice = ImportChoice.all
    clear_first: bool = False


class ImportResponse(BaseModel):
    added: list[Entry]
    duplicates: list[str]


class DuplicatesResponse(BaseModel):
    duplicates: list[str]


class SettingsUpdateRequest(BaseModel):
    mode: GameMode | None = None
    persist_draw_result: bool | None = None
    sound_enabled: bool | None = None


class DrawResultRequest(BaseModel):
    entry_id: str


class CoinTossResponse(BaseModel):
    side: CoinSide
