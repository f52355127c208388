"""Piece counts for a map space or a holding box."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Dict, List

from coltwi.core.types import PieceType, amount_of

# Dataclass field backing each piece type, in display order.
PIECE_FIELDS: Dict[PieceType, str] = {
    PieceType.FRENCH_TROOPS: "french_troops",
    PieceType.FRENCH_POLICE: "french_police",
    PieceType.ALGERIAN_TROOPS: "algerian_troops",
    PieceType.ALGERIAN_POLICE: "algerian_police",
    PieceType.HIDDEN_GUERRILLAS: "hidden_guerrillas",
    PieceType.ACTIVE_GUERRILLAS: "active_guerrillas",
    PieceType.GOV_BASES: "gov_bases",
    PieceType.FLN_BASES: "fln_bases",
}


def amount_of_pieces(num: int, piece_type: PieceType) -> str:
    return amount_of(num, piece_type.singular, piece_type.plural)


@dataclass(frozen=True, slots=True)
class Pieces:
    """Immutable bag of the eight piece kinds. Every count is non-negative."""

    french_troops: int = 0
    french_police: int = 0
    algerian_troops: int = 0
    algerian_police: int = 0
    hidden_guerrillas: int = 0
    active_guerrillas: int = 0
    gov_bases: int = 0
    fln_bases: int = 0

    def __post_init__(self) -> None:
        for spec in fields(self):
            value = getattr(self, spec.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"Pieces.{spec.name} must be an integer.")
            if value < 0:
                raise ValueError(f"Pieces.{spec.name} cannot be negative ({value}).")

    @property
    def total_guerrillas(self) -> int:
        return self.hidden_guerrillas + self.active_guerrillas

    @property
    def total_troops(self) -> int:
        return self.french_troops + self.algerian_troops

    @property
    def total_police(self) -> int:
        return self.french_police + self.algerian_police

    @property
    def total_cubes(self) -> int:
        return self.total_troops + self.total_police

    @property
    def total_gov(self) -> int:
        return self.total_cubes + self.gov_bases

    @property
    def total_fln(self) -> int:
        return self.total_guerrillas + self.fln_bases

    @property
    def total(self) -> int:
        return self.total_gov + self.total_fln

    def num_of(self, piece_type: PieceType) -> int:
        return getattr(self, PIECE_FIELDS[piece_type])

    def set(self, num: int, piece_type: PieceType) -> "Pieces":
        return replace(self, **{PIECE_FIELDS[piece_type]: num})

    def __add__(self, other: "Pieces") -> "Pieces":
        return Pieces(**{name: self.num_of(t) + other.num_of(t) for t, name in PIECE_FIELDS.items()})

    def __sub__(self, other: "Pieces") -> "Pieces":
        return Pieces(
            **{name: max(0, self.num_of(t) - other.num_of(t)) for t, name in PIECE_FIELDS.items()}
        )

    def hide_guerrillas(self, num: int) -> "Pieces":
        if self.active_guerrillas < num:
            raise ValueError("Not enough active guerrillas.")
        return self - Pieces(active_guerrillas=num) + Pieces(hidden_guerrillas=num)

    def string_items(self) -> List[str]:
        return [amount_of_pieces(self.num_of(t), t) for t in PieceType if self.num_of(t) > 0]

    def __str__(self) -> str:
        if self.total == 0:
            return "none"
        return ", ".join(self.string_items())
