from __future__ import annotations

import pytest

from spinwheel.api.models import Entry, GameMode
from spinwheel.config import DEFAULT_PALETTE
from spinwheel.errors import NotFoundError, ValidationError
from spinwheel.session import WheelSession

FIRST, SECOND = DEFAULT_PALETTE


def _assert_alternating(session: WheelSession) -> None:
    colors = [e.color for e in session.entries]
    assert colors == [FIRST if i % 2 == 0 else SECOND for i in range(len(colors))]


def _assert_unique_ids(session: WheelSession) -> None:
    ids = [e.id for e in session.entries]
    assert len(ids) == len(set(ids))


def test_add_one_trims_and_assigns_alternating_colors(session: WheelSession) -> None:
    a = session.add_one("  Pizza ")
    b = session.add_one("Tacos")
    c = session.add_one("Sushi")

    assert a.name == "Pizza"
    assert [a.color, b.color, c.color] == [FIRST, SECOND, FIRST]
    assert [e.id for e in session.entries] == [a.id, b.id, c.id]


@pytest.mark.parametrize("bad", ["", "   ", "\t\n"])
def test_add_one_rejects_blank_names(session: WheelSession, bad: str) -> None:
    with pytest.raises(ValidationError):
        session.add_one(bad)
    assert session.entries == []


def test_add_one_rejects_names_over_max_length(session: WheelSession) -> None:
    session.add_one("x" * 50)
    with pytest.raises(ValidationError):
        session.add_one("x" * 51)
    assert len(session.entries) == 1


def test_add_many_continues_alternation_from_current_length(session: WheelSession) -> None:
    session.add_one("Existing")
    created = session.add_many(["A", "B", "C"])

    assert [e.name for e in created] == ["A", "B", "C"]
    assert [e.color for e in created] == [SECOND, FIRST, SECOND]
    _assert_alternating(session)
    _assert_unique_ids(session)


def test_add_many_empty_is_noop(session: WheelSession) -> None:
    events: list[object] = []
    session.subscribe(events.append)

    assert session.add_many([]) == []
    assert session.entries == []
    assert events == []


def test_add_many_is_all_or_nothing(session: WheelSession) -> None:
    session.add_one("Keep")
    with pytest.raises(ValidationError):
        session.add_many(["Good", "  ", "Also good"])
    assert [e.name for e in session.entries] == ["Keep"]


def test_rename_keeps_color_and_position(session: WheelSession) -> None:
    a, b, c = session.add_many(["A", "B", "C"])

    renamed = session.rename(b.id, "  Bee ")

    assert renamed.id == b.id
    assert renamed.name == "Bee"
    assert renamed.color == b.color
    assert [e.name for e in session.entries] == ["A", "Bee", "C"]


def test_rename_errors_leave_state_unchanged(session: WheelSession) -> None:
    a = session.add_one("A")

    with pytest.raises(NotFoundError):
        session.rename("missing", "X")
    with pytest.raises(ValidationError):
        session.rename(a.id, "   ")

    assert session.get(a.id).name == "A"


def test_remove_middle_entry_recolors_everything(session: WheelSession) -> None:
    entries = session.add_many(["A", "B", "C", "D", "E"])

    session.remove(entries[1].id)

    assert [e.name for e in session.entries] == ["A", "C", "D", "E"]
    _assert_alternating(session)


def test_remove_unknown_id_raises(session: WheelSession) -> None:
    session.add_one("A")
    with pytest.raises(NotFoundError):
        session.remove("nope")
    assert len(session.entries) == 1


def test_add_then_remove_round_trip(session: WheelSession) -> None:
    session.add_many(["A", "B", "C"])
    before = session.entries

    pizza = session.add_one("Pizza")
    session.remove(pizza.id)

    assert session.entries == before


def test_mixed_add_remove_sequence_keeps_invariants(session: WheelSession) -> None:
    ops: list[tuple[str, int]] = [("add", 4), ("rm", 0), ("add", 3), ("rm", 2), ("rm", -1), ("add", 1), ("rm", 1)]
    counter = 0
    for op, n in ops:
        if op == "add":
            names = [f"item-{counter + i}" for i in range(n)]
            counter += n
            session.add_many(names)
        else:
            session.remove(session.entries[n].id)
        _assert_alternating(session)
        _assert_unique_ids(session)


def test_clear_all_keeps_mode_flags_history_and_snapshot(session: WheelSession) -> None:
    a, _ = session.add_many(["A", "B"])
    session.set_mode(GameMode.elimination)
    session.record_draw_result(a)
    session.set_sound_enabled(False)

    session.clear_all()

    assert session.entries == []
    assert session.mode == GameMode.elimination
    assert session.sound_enabled is False
    assert len(session.history) == 1
    assert [e.name for e in session.elimination_snapshot] == ["A", "B"]


def test_replace_all_recolors_and_keeps_ids(session: WheelSession) -> None:
    incoming = [
        Entry(id="x1", name="One", color="#000000"),
        Entry(id="x2", name="Two", color="#000000"),
        Entry(id="x3", name=" Three ", color="#000000"),
    ]

    result = session.replace_all(incoming)

    assert [e.id for e in result] == ["x1", "x2", "x3"]
    assert [e.name for e in result] == ["One", "Two", "Three"]
    _assert_alternating(session)


def test_replace_all_rejects_duplicate_ids_atomically(session: WheelSession) -> None:
    session.add_one("Keep")
    with pytest.raises(ValidationError):
        session.replace_all([Entry(id="dup", name="A", color=FIRST), Entry(id="dup", name="B", color=SECOND)])
    assert [e.name for e in session.entries] == ["Keep"]


def test_replace_all_refreshes_snapshot_only_in_elimination(session: WheelSession) -> None:
    session.replace_with_names(["A", "B"])
    assert session.elimination_snapshot == []

    session.set_mode(GameMode.elimination)
    session.replace_with_names(["X", "Y", "Z"])

    assert [e.name for e in session.elimination_snapshot] == ["X", "Y", "Z"]


def test_entries_returns_a_copy(session: WheelSession) -> None:
    session.add_one("A")
    snapshot = session.entries
    snapshot.clear()
    assert len(session.entries) == 1


def test_custom_palette_is_used() -> None:
    from spinwheel.config import SessionSettings

    s = WheelSession(SessionSettings(palette=("red", "blue")))
    s.add_many(["a", "b", "c"])
    assert [e.color for e in s.entries] == ["red", "blue", "red"]
