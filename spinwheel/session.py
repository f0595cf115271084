"""The session state engine: entries, mode policy, last-draw undo and the elimination snapshot.

A `WheelSession` is created once per active session and handed to whoever needs
it (HTTP routes, import helpers, tests). Every public operation either completes
fully or raises a `SessionError` without touching state.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from spinwheel.api.models import DrawOutcome, DrawRecord, Entry, GameMode, SessionView
from spinwheel.config import SessionSettings
from spinwheel.core.events import EventListener, EventType, SessionEvent
from spinwheel.errors import InvalidStateError, NoUndoAvailableError, NotFoundError, ValidationError
from spinwheel.fsm import ModeFSM
from spinwheel.validators import default_name_pipeline

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _new_entry_id() -> str:
    return str(uuid4())


class WheelSession:
    def __init__(
        self,
        settings: SessionSettings | None = None,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self.settings = settings or SessionSettings()
        self._names = default_name_pipeline(max_length=self.settings.name_max_length)
        self._rng = rng or random.Random(self.settings.seed)
        self._clock = clock
        self._fsm = ModeFSM(self.settings.default_mode)

        self._entries: list[Entry] = []
        self._persist_draw_result = False
        self._sound_enabled = True
        self._last_result: DrawRecord | None = None
        self._history: list[DrawRecord] = []
        self._snapshot: list[Entry] = []
        # Set only when a draw removed the last entry; any other change to the wheel clears it.
        self._emptied_by_draw = False
        self._listeners: list[EventListener] = []

    # ------------- Queries -------------

    @property
    def entries(self) -> list[Entry]:
        return list(self._entries)

    @property
    def mode(self) -> GameMode:
        return self._fsm.mode

    @property
    def persist_draw_result(self) -> bool:
        return self._persist_draw_result

    @property
    def sound_enabled(self) -> bool:
        return self._sound_enabled

    @property
    def last_result(self) -> DrawRecord | None:
        return self._last_result

    @property
    def history(self) -> list[DrawRecord]:
        return list(self._history)

    @property
    def elimination_snapshot(self) -> list[Entry]:
        return list(self._snapshot)

    @property
    def can_undo(self) -> bool:
        if self._last_result is None:
            return False
        return self._find_index(self._last_result.entry.id) is None

    def get(self, entry_id: str) -> Entry:
        return self._entries[self._require_index(entry_id)]

    def find_duplicates(self, candidates: Iterable[str]) -> list[str]:
        """Return the candidates whose name already exists on the wheel, ignoring case.

        Order and repeats follow `candidates`; nothing is mutated.
        """

        existing = {e.name.casefold() for e in self._entries}
        return [c for c in candidates if c.strip().casefold() in existing]

    def terminal_winner(self) -> Entry | None:
        """Winner of an elimination round, derived from what is left on the wheel.

        One entry left means it is the last one standing. Zero left after a draw
        means the final draw consumed the only remaining entry.
        """

        if self.mode != GameMode.elimination:
            return None
        if len(self._entries) == 1:
            return self._entries[0]
        if not self._entries and self._emptied_by_draw and self._last_result is not None:
            return self._last_result.entry
        return None

    def view(self) -> SessionView:
        return SessionView(
            entries=self.entries,
            mode=self.mode,
            persist_draw_result=self._persist_draw_result,
            sound_enabled=self._sound_enabled,
            can_undo=self.can_undo,
            last_result=self._last_result,
            terminal_winner=self.terminal_winner(),
            history=self.history,
            snapshot_size=len(self._snapshot),
        )

    # ------------- Entry collection -------------

    def add_one(self, name: str) -> Entry:
        clean = self._names.clean(name)
        entry = Entry(id=_new_entry_id(), name=clean, color=self._color_at(len(self._entries)))
        self._entries.append(entry)
        self._emptied_by_draw = False
        self._track_added([entry])
        logger.debug("Added entry id=%s name=%r", entry.id, entry.name)
        self._emit("ENTRIES_CHANGED", {"action": "added", "ids": [entry.id]})
        return entry

    def add_many(self, names: Sequence[str]) -> list[Entry]:
        cleaned = self._names.clean_all(list(names))
        if not cleaned:
            return []

        start = len(self._entries)
        created = [
            Entry(id=_new_entry_id(), name=n, color=self._color_at(start + i)) for i, n in enumerate(cleaned)
        ]
        self._entries.extend(created)
        self._emptied_by_draw = False
        self._track_added(created)
        logger.debug("Added %d entries", len(created))
        self._emit("ENTRIES_CHANGED", {"action": "added", "ids": [e.id for e in created]})
        return created

    def rename(self, entry_id: str, new_name: str) -> Entry:
        idx = self._require_index(entry_id)
        clean = self._names.clean(new_name)

        renamed = self._entries[idx].model_copy(update={"name": clean})
        self._entries[idx] = renamed
        # Keep the snapshot in step so a reset brings back the current name.
        self._snapshot = [e.model_copy(update={"name": clean}) if e.id == entry_id else e for e in self._snapshot]
        self._emit("ENTRIES_CHANGED", {"action": "renamed", "ids": [entry_id]})
        return renamed

    def remove(self, entry_id: str) -> Entry:
        idx = self._require_index(entry_id)
        removed = self._entries.pop(idx)
        self._entries = self._recolored(self._entries)
        self._emptied_by_draw = False
        logger.debug("Removed entry id=%s", entry_id)
        self._emit("ENTRIES_CHANGED", {"action": "removed", "ids": [entry_id]})
        return removed

    def clear_all(self) -> None:
        count = len(self._entries)
        self._entries = []
        self._emptied_by_draw = False
        logger.debug("Cleared %d entries", count)
        self._emit("ENTRIES_CHANGED", {"action": "cleared", "ids": []})

    def replace_all(self, entries: Iterable[Entry]) -> list[Entry]:
        incoming = list(entries)

        seen: set[str] = set()
        checked: list[Entry] = []
        for e in incoming:
            if e.id in seen:
                raise ValidationError(f"Duplicate entry id in replacement: {e.id}")
            seen.add(e.id)
            clean = self._names.clean(e.name)
            checked.append(e if clean == e.name else e.model_copy(update={"name": clean}))

        self._entries = self._recolored(checked)
        self._emptied_by_draw = False
        if self.mode == GameMode.elimination:
            self._snapshot = list(self._entries)
        logger.debug("Replaced wheel with %d entries", len(self._entries))
        self._emit("ENTRIES_CHANGED", {"action": "replaced", "ids": [e.id for e in self._entries]})
        return self.entries

    def replace_with_names(self, names: Sequence[str]) -> list[Entry]:
        cleaned = self._names.clean_all(list(names))
        fresh = [Entry(id=_new_entry_id(), name=n, color=self._color_at(i)) for i, n in enumerate(cleaned)]
        return self.replace_all(fresh)

    # ------------- Mode & flags -------------

    def set_mode(self, mode: GameMode | str) -> None:
        target = GameMode(mode)
        if not self._fsm.switch_to(target):
            return

        if target == GameMode.elimination and self._entries:
            # A fresh round starts from whatever is on the wheel right now; an empty wheel keeps the previous round.
            self._snapshot = list(self._entries)
        logger.info("Mode changed to %s (snapshot=%d)", target.value, len(self._snapshot))
        self._emit("MODE_CHANGED", {"mode": target.value})

    def set_persist_draw_result(self, value: bool) -> None:
        self._persist_draw_result = bool(value)
        self._emit("SETTINGS_CHANGED", {"persist_draw_result": self._persist_draw_result})

    def set_sound_enabled(self, value: bool) -> None:
        self._sound_enabled = bool(value)
        self._emit("SETTINGS_CHANGED", {"sound_enabled": self._sound_enabled})

    # ------------- Draws -------------

    def pick_winner(self) -> Entry:
        """Choose the next winner uniformly from the current entries.

        The renderer animates to this entry and reports it back via
        `record_draw_result`, so what is shown and what is recorded cannot drift.
        """

        if not self._entries:
            raise InvalidStateError("No entries to draw from")
        return self._rng.choice(self._entries)

    def record_draw_result(self, winner: Entry | str) -> DrawOutcome:
        entry_id = winner if isinstance(winner, str) else winner.id
        idx = self._find_index(entry_id)
        if idx is None:
            raise NotFoundError(f"Drawn entry is not on the wheel: {entry_id}")

        live = self._entries[idx]
        record = DrawRecord(entry=live, timestamp=self._clock())
        self._history.append(record)
        self._last_result = record

        removed = self.mode == GameMode.elimination or self._persist_draw_result
        if removed:
            del self._entries[idx]
            self._entries = self._recolored(self._entries)
        self._emptied_by_draw = removed and not self._entries

        outcome = DrawOutcome(
            winner=live,
            removed=removed,
            remaining=len(self._entries),
            terminal_winner=self.terminal_winner(),
        )
        logger.debug("Recorded draw id=%s removed=%s remaining=%d", live.id, removed, outcome.remaining)
        self._emit(
            "DRAW_RECORDED",
            {
                "entry_id": live.id,
                "name": live.name,
                "removed": removed,
                "remaining": outcome.remaining,
                "terminal": outcome.terminal_winner is not None,
            },
        )
        return outcome

    def undo_last_draw(self) -> Entry:
        last = self._last_result
        if last is None:
            raise NoUndoAvailableError("Nothing to undo")
        if self._find_index(last.entry.id) is not None:
            raise NoUndoAvailableError("Last drawn entry is still on the wheel")

        self._entries = self._recolored([*self._entries, last.entry])
        self._emptied_by_draw = False
        restored = self._entries[-1]
        self._last_result = None
        logger.debug("Undid draw id=%s", restored.id)
        self._emit("DRAW_UNDONE", {"entry_id": restored.id})
        return restored

    def reset_to_snapshot(self) -> list[Entry]:
        if self.mode != GameMode.elimination:
            raise InvalidStateError("Reset is only available in elimination mode")
        if not self._snapshot:
            raise InvalidStateError("No elimination snapshot to reset to")

        self._entries = self._recolored(self._snapshot)
        self._emptied_by_draw = False
        self._history.clear()
        self._last_result = None
        logger.info("Reset wheel to elimination snapshot (%d entries)", len(self._entries))
        self._emit("SESSION_RESET", {"ids": [e.id for e in self._entries]})
        return self.entries

    # ------------- Events -------------

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, type: EventType, payload: dict[str, Any]) -> None:
        event = SessionEvent.now(type=type, payload=payload)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # Listeners are side-effect consumers (sound, toasts, sockets); state is already committed.
                logger.exception("Session event listener failed for %s", type)

    # ------------- Helpers -------------

    def _color_at(self, position: int) -> str:
        return self.settings.palette[position % 2]

    def _recolored(self, entries: Sequence[Entry]) -> list[Entry]:
        # Full recompute on every structural change keeps the alternation intact under any deletion pattern.
        out: list[Entry] = []
        for i, e in enumerate(entries):
            color = self._color_at(i)
            out.append(e if e.color == color else e.model_copy(update={"color": color}))
        return out

    def _track_added(self, created: list[Entry]) -> None:
        if self.mode == GameMode.elimination:
            self._snapshot.extend(created)

    def _find_index(self, entry_id: str) -> int | None:
        for idx, e in enumerate(self._entries):
            if e.id == entry_id:
                return idx
        return None

    def _require_index(self, entry_id: str) -> int:
        idx = self._find_index(entry_id)
        if idx is None:
            raise NotFoundError(f"Entry not found: {entry_id}")
        return idx
