"""Event card definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class CardDef:
    """Number and title of one card in the deck."""

    number: int
    name: str
    dual: bool = False

    @property
    def num_and_name(self) -> str:
        return f"#{self.number} {self.name}"

    def __str__(self) -> str:
        return self.num_and_name
