"""Map space model."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Tuple

from coltwi.core.types import Control, SpaceType, SupportValue, Terrain
from coltwi.domain.pieces import Pieces

PLUS1_POP_MARKER = "+1 Population"
PLUS1_BASE_MARKER = "+1 Base"
RESETTLED_MARKER = "Resettled"
TERROR_MARKER = "Terror"

ALL_MARKERS: Tuple[str, ...] = (PLUS1_POP_MARKER, PLUS1_BASE_MARKER, RESETTLED_MARKER, TERROR_MARKER)


@dataclass(frozen=True, slots=True)
class Space:
    """One board location.

    ``zone`` is the wilaya for cities ("V"), wilaya-sector for sectors ("V-1")
    and empty for the neighbouring countries. ``markers`` keeps duplicates:
    each terror marker in a space is one entry.
    """

    name: str
    space_type: SpaceType
    zone: str
    terrain: Terrain
    base_pop: int
    coastal: bool = False
    support: SupportValue = SupportValue.NEUTRAL
    pieces: Pieces = field(default_factory=Pieces)
    markers: Tuple[str, ...] = ()

    @property
    def name_and_zone(self) -> str:
        if self.space_type is SpaceType.SECTOR:
            return f"{self.name} {self.zone}"
        return self.name

    @property
    def wilaya(self) -> str:
        return self.zone.split("-", 1)[0]

    @property
    def is_city(self) -> bool:
        return self.space_type is SpaceType.CITY

    @property
    def is_sector(self) -> bool:
        return self.space_type is SpaceType.SECTOR

    @property
    def is_country(self) -> bool:
        return self.space_type is SpaceType.COUNTRY

    def has_marker(self, marker: str) -> bool:
        return marker in self.markers

    @property
    def terror(self) -> int:
        return self.markers.count(TERROR_MARKER)

    @property
    def is_resettled(self) -> bool:
        return self.has_marker(RESETTLED_MARKER)

    @property
    def population(self) -> int:
        if self.is_resettled:
            return 0
        if self.has_marker(PLUS1_POP_MARKER):
            return self.base_pop + 1
        return self.base_pop

    @property
    def max_bases(self) -> int:
        return 3 if self.has_marker(PLUS1_BASE_MARKER) else 2

    @property
    def control(self) -> Control:
        balance = self.pieces.total_gov - self.pieces.total_fln
        if balance == 0:
            return Control.UNCONTROLLED
        return Control.GOV if balance > 0 else Control.FLN

    @property
    def support_value(self) -> int:
        return self.population if self.support is SupportValue.SUPPORT else 0

    @property
    def oppose_value(self) -> int:
        return self.population if self.support is SupportValue.OPPOSE else 0

    def with_pieces(self, pieces: Pieces) -> "Space":
        return replace(self, pieces=pieces)

    def with_support(self, support: SupportValue) -> "Space":
        return replace(self, support=support)

    def add_marker(self, marker: str, num: int = 1) -> "Space":
        return replace(self, markers=self.markers + (marker,) * num)

    def remove_marker(self, marker: str, num: int = 1) -> "Space":
        kept = []
        remaining = num
        for entry in self.markers:
            if entry == marker and remaining > 0:
                remaining -= 1
                continue
            kept.append(entry)
        return replace(self, markers=tuple(kept))
