"""Closed value types shared by the core and domain layers."""
from __future__ import annotations

from enum import Enum
from typing import TypeVar

E = TypeVar("E", bound="LabelledEnum")


class InvalidValue(ValueError):
    """Raised when a label does not name any member of a value type."""

    def __init__(self, label: object, type_name: str) -> None:
        super().__init__(f"Invalid {type_name} value: {label!r}")
        self.label = label
        self.type_name = type_name


class LabelledEnum(Enum):
    """Enum whose only external representation is its canonical label."""

    @classmethod
    def from_label(cls: type[E], label: str, *, exact: bool = False) -> E:
        """Return the member named by ``label``.

        Typed input is matched ignoring case and surrounding blanks. With
        ``exact`` the label must equal the canonical spelling, as stored text does.
        """
        if not isinstance(label, str):
            raise InvalidValue(label, cls.__name__)
        for member in cls:
            if exact:
                if member.value == label:
                    return member
            elif member.value.lower() == label.strip().lower():
                return member
        raise InvalidValue(label, cls.__name__)

    @classmethod
    def labels(cls) -> list[str]:
        return [member.value for member in cls]

    @property
    def label(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


class Role(LabelledEnum):
    GOV = "Government"
    FLN = "FLN"

    @property
    def opposite(self) -> "Role":
        return Role.FLN if self is Role.GOV else Role.GOV


class Action(LabelledEnum):
    PASS = "Pass"
    EVENT = "Execute Event"
    OP_PLUS_ACTIVITY = "Execute Op & Special Activity"
    LIMITED_OP = "Execute Limited Op"
    OP_ONLY = "Execute Op Only"


class SpaceType(LabelledEnum):
    CITY = "City"
    SECTOR = "Sector"
    COUNTRY = "Country"


class Terrain(LabelledEnum):
    MOUNTAINS = "Mountains"
    PLAINS = "Plains"
    URBAN = "Urban"


class SupportValue(LabelledEnum):
    NEUTRAL = "Neutral"
    SUPPORT = "Support"
    OPPOSE = "Oppose"


class Control(LabelledEnum):
    UNCONTROLLED = "Uncontrolled"
    GOV = "Government control"
    FLN = "FLN control"


class PieceType(LabelledEnum):
    """Kinds of playing pieces, labelled by their plural name."""

    FRENCH_TROOPS = "French troops"
    FRENCH_POLICE = "French police"
    ALGERIAN_TROOPS = "Algerian troops"
    ALGERIAN_POLICE = "Algerian police"
    HIDDEN_GUERRILLAS = "Underground guerrillas"
    ACTIVE_GUERRILLAS = "Active guerrillas"
    GOV_BASES = "Government Bases"
    FLN_BASES = "FLN Bases"

    @property
    def singular(self) -> str:
        return _PIECE_SINGULAR[self]

    @property
    def plural(self) -> str:
        return self.value

    @property
    def owner(self) -> Role:
        if self in (PieceType.HIDDEN_GUERRILLAS, PieceType.ACTIVE_GUERRILLAS, PieceType.FLN_BASES):
            return Role.FLN
        return Role.GOV


_PIECE_SINGULAR = {
    PieceType.FRENCH_TROOPS: "French troop",
    PieceType.FRENCH_POLICE: "French police",
    PieceType.ALGERIAN_TROOPS: "Algerian troop",
    PieceType.ALGERIAN_POLICE: "Algerian police",
    PieceType.HIDDEN_GUERRILLAS: "Underground guerrilla",
    PieceType.ACTIVE_GUERRILLAS: "Active guerrilla",
    PieceType.GOV_BASES: "Government Base",
    PieceType.FLN_BASES: "FLN Base",
}


def amount_of(num: int, name: str, plural: str | None = None) -> str:
    """Return ``"1 thing"`` / ``"2 things"`` style text."""
    if num == 1:
        return f"{num} {name}"
    if plural is not None:
        return f"{num} {plural}"
    return f"{num} {name}s"


__all__ = [
    "InvalidValue",
    "LabelledEnum",
    "Role",
    "Action",
    "SpaceType",
    "Terrain",
    "SupportValue",
    "Control",
    "PieceType",
    "amount_of",
]
