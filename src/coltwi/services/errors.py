"""Service-layer exceptions."""
from __future__ import annotations

from enum import Enum
from pathlib import Path


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class DecodeErrorKind(Enum):
    MISSING_FIELD = "MissingField"
    TYPE_MISMATCH = "TypeMismatch"


class DecodeError(SaveLoadError):
    """A saved game document is missing a field or has one of the wrong shape.

    ``field`` is the bare key name (``"turn"``, ``"coastal"``); ``context`` is
    the dotted location of the value inside the document.
    """

    def __init__(
        self,
        kind: DecodeErrorKind,
        field: str,
        *,
        expected: str | None = None,
        context: str | None = None,
        path: Path | None = None,
    ) -> None:
        self.kind = kind
        self.field = field
        self.expected = expected
        self.context = context or field
        if kind is DecodeErrorKind.MISSING_FIELD:
            message = f"Missing field '{self.context}'."
        else:
            message = f"Field '{self.context}' must be {expected}."
        super().__init__(message, path=path)

    def with_path(self, path: Path) -> "DecodeError":
        return DecodeError(self.kind, self.field, expected=self.expected, context=self.context, path=path)


class SnapshotIOError(SaveLoadError):
    """Raised when the filesystem refuses a snapshot read, write or delete."""


class SnapshotNotFoundError(SaveLoadError):
    """Raised when a game or a turn has no snapshot on disk."""


class RulesError(Exception):
    """Raised when a rules request would leave the game state inconsistent."""
