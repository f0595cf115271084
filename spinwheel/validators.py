from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from spinwheel.errors import ValidationError


class NameValidator(ABC):
    """A small, composable check applied to an already-trimmed entry name."""

    @abstractmethod
    def validate(self, name: str) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class NonEmptyValidator(NameValidator):
    def validate(self, name: str) -> None:
        if not name:
            raise ValidationError("Entry name must not be empty")


@dataclass(frozen=True, slots=True)
class MaxLengthValidator(NameValidator):
    max_length: int

    def validate(self, name: str) -> None:
        if len(name) > self.max_length:
            raise ValidationError(f"Entry name must be at most {self.max_length} characters (got {len(name)})")


@dataclass(frozen=True, slots=True)
class NamePipeline:
    validators: tuple[NameValidator, ...]

    def clean(self, raw: str) -> str:
        """Trim `raw` and run every validator. Returns the trimmed name."""

        name = raw.strip()
        for v in self.validators:
            v.validate(name)
        return name

    def clean_all(self, raw_names: list[str]) -> list[str]:
        # Validate the whole batch up front so a bad name never leaves a half-added batch.
        return [self.clean(n) for n in raw_names]


def default_name_pipeline(*, max_length: int) -> NamePipeline:
    return NamePipeline(validators=(NonEmptyValidator(), MaxLengthValidator(max_length=max_length)))
