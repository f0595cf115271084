"""Bulk import helpers used by the CSV/image import flows.

Extraction itself (OCR, CSV parsing) happens elsewhere; these helpers take the
extracted strings, drop the unusable ones and apply the user's duplicate choice
before handing the batch to the session.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from spinwheel.api.models import Entry, ImportChoice
from spinwheel.session import WheelSession


@dataclass(frozen=True, slots=True)
class ImportResult:
    added: list[Entry]
    duplicates: list[str]


def clean_candidates(raw: Iterable[str], *, max_length: int) -> list[str]:
    """Trim each candidate and keep the non-empty ones that fit `max_length`."""

    out: list[str] = []
    for item in raw:
        name = item.strip()
        if name and len(name) <= max_length:
            out.append(name)
    return out


def select_candidates(candidates: list[str], duplicates: list[str], *, choice: ImportChoice) -> list[str]:
    if choice == ImportChoice.all:
        return list(candidates)

    dup_keys = {d.casefold() for d in duplicates}
    if choice == ImportChoice.unique:
        return [c for c in candidates if c.casefold() not in dup_keys]
    return [c for c in candidates if c.casefold() in dup_keys]


def import_names(
    session: WheelSession,
    raw: Iterable[str],
    *,
    choice: ImportChoice = ImportChoice.all,
    clear_first: bool = False,
) -> ImportResult:
    candidates = clean_candidates(raw, max_length=session.settings.name_max_length)

    if clear_first:
        # Against an emptied wheel nothing counts as a duplicate.
        selected = select_candidates(candidates, [], choice=choice)
        added = session.replace_with_names(selected)
        return ImportResult(added=added, duplicates=[])

    duplicates = session.find_duplicates(candidates)
    selected = select_candidates(candidates, duplicates, choice=choice)
    added = session.add_many(selected)
    return ImportResult(added=added, duplicates=duplicates)
