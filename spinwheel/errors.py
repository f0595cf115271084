from __future__ import annotations


class SessionError(ValueError):
    """Base for every recoverable session failure.

    Subclasses ValueError so callers that already guard service calls with
    `except ValueError` keep working. A failed operation never mutates state.
    """


class ValidationError(SessionError):
    """Entry name is empty after trimming or longer than the configured maximum."""


class NotFoundError(SessionError):
    """No live entry carries the requested id."""


class NoUndoAvailableError(SessionError):
    """Nothing to undo, or the remembered entry is already back on the wheel."""


class InvalidStateError(SessionError):
    """Operation not allowed in the current mode or with the current collection."""
