"""Scenario definition data structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple

from coltwi.core.types import SupportValue
from coltwi.domain.pieces import Pieces


@dataclass(slots=True)
class SpaceOverrideDef:
    """Starting support, pieces and markers for one space in a scenario."""

    name: str
    support: SupportValue = SupportValue.NEUTRAL
    pieces: Pieces = field(default_factory=Pieces)
    markers: Tuple[str, ...] = ()


@dataclass(slots=True)
class ScenarioDef:
    """Initial board and track values for a scenario."""

    id: str
    name: str
    number_of_prop_cards: int
    gov_resources: int
    fln_resources: int
    commitment: int
    france_track: int
    border_zone_track: int
    out_of_play: Pieces
    pivotal_cards_played: FrozenSet[int]
    spaces: Tuple[SpaceOverrideDef, ...]
