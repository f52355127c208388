"""Unique-prefix matching of typed input against a set of choices."""
from __future__ import annotations

from typing import Iterable, List, Sequence

CHOICES_TOKEN = "?"
ABORT_TOKEN = "abort"
RESERVED_TOKENS = frozenset({CHOICES_TOKEN, ABORT_TOKEN})


class ResolutionError(Exception):
    """Input could not be turned into one choice; the prompt should repeat."""


class NoMatch(ResolutionError):
    def __init__(self, token: str, choices: Sequence[str]) -> None:
        self.token = token
        self.choices = tuple(choices)
        super().__init__(f"'{token}' is not valid. Must be one of:\n{or_list(self.choices)}")


class Ambiguous(ResolutionError):
    def __init__(self, token: str, matches: Sequence[str]) -> None:
        self.token = token
        self.matches = tuple(matches)
        super().__init__(f"'{token}' is ambiguous. ({or_list(self.matches)})")


class ChoicesListed(ResolutionError):
    """Raised for ``?``: the choices are reported and nothing is selected."""

    def __init__(self, choices: Sequence[str]) -> None:
        self.choices = tuple(choices)
        super().__init__(f"Enter one of:\n{or_list(self.choices)}")


class Cancelled(Exception):
    """The user typed ``abort`` at a prompt that allows it.

    Deliberately not a :class:`ResolutionError`, so prompt loops that retry
    on bad input let it propagate to the command loop.
    """


def normalize(text: str) -> str:
    return " ".join(text.split()).lower()


def or_list(items: Iterable[object]) -> str:
    """Return ``"a, b or c"``."""
    values = [str(item) for item in items]
    if not values:
        return ""
    if len(values) == 1:
        return values[0]
    return f"{', '.join(values[:-1])} or {values[-1]}"


class PrefixResolver:
    """Resolves input to the single choice whose label starts with it.

    Matching ignores case and extra whitespace. When several labels match,
    one equal to the input still wins, so a label that is a prefix of
    another (``"1"`` and ``"10"``) can always be chosen.
    """

    def __init__(self, choices: Iterable[object], *, abortable: bool = False) -> None:
        labels: List[str] = []
        for choice in choices:
            label = str(choice)
            if normalize(label) in RESERVED_TOKENS:
                raise ValueError(f"'{label}' is reserved and cannot be used as a choice.")
            if label not in labels:
                labels.append(label)
        if not labels:
            raise ValueError("At least one choice is required.")
        self._labels = tuple(labels)
        self._abortable = abortable

    @property
    def choices(self) -> tuple[str, ...]:
        return self._labels

    @property
    def abortable(self) -> bool:
        return self._abortable

    def resolve(self, text: str) -> str:
        """Return the matching label, or raise.

        Raises :class:`ChoicesListed` for ``?``, :class:`Cancelled` for
        ``abort`` when abortable, :class:`NoMatch` or :class:`Ambiguous`
        otherwise.
        """
        wanted = normalize(text)
        if wanted == CHOICES_TOKEN:
            raise ChoicesListed(self._labels)
        if wanted == ABORT_TOKEN and self._abortable:
            raise Cancelled()
        if not wanted:
            raise NoMatch("", self._labels)

        matches = [label for label in self._labels if normalize(label).startswith(wanted)]
        if len(matches) == 1:
            return matches[0]
        if not matches:
            raise NoMatch(text.split()[0], self._labels)
        exact = [label for label in matches if normalize(label) == wanted]
        if len(exact) == 1:
            return exact[0]
        raise Ambiguous(text.strip(), matches)


def resolve(text: str, choices: Iterable[object], *, abortable: bool = False) -> str:
    """Resolve ``text`` against ``choices`` in one call."""
    return PrefixResolver(choices, abortable=abortable).resolve(text)


__all__ = [
    "ABORT_TOKEN",
    "CHOICES_TOKEN",
    "Ambiguous",
    "Cancelled",
    "ChoicesListed",
    "NoMatch",
    "PrefixResolver",
    "ResolutionError",
    "or_list",
    "resolve",
]
