"""Aggregate game state for a single point in a session."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, Optional, Tuple

from coltwi.core.types import Role
from coltwi.domain.cards import (
    GOV_PIVOTAL_CARDS,
    FLN_PIVOTAL_CARDS,
    PIVOTAL_COUP_D_ETAT,
    PIVOTAL_MOBILIZATION,
    PIVOTAL_RECALL_DE_GAULLE,
    is_propaganda_card,
)
from coltwi.domain.pieces import Pieces
from coltwi.domain.sequence import SequenceOfPlay
from coltwi.domain.space import (
    PLUS1_BASE_MARKER,
    PLUS1_POP_MARKER,
    Space,
)

EDGE_TRACK_MAX = 50
FRANCE_TRACK_MAX = 5
BORDER_ZONE_TRACK_MAX = 4

# Force pool sizes; whatever is not on the map or in a box is available.
FRENCH_TROOPS_MANIFEST = 9
FRENCH_POLICE_MANIFEST = 21
ALGERIAN_TROOPS_MANIFEST = 3
ALGERIAN_POLICE_MANIFEST = 7
GUERRILLAS_MANIFEST = 30
GOV_BASES_MANIFEST = 6
FLN_BASES_MANIFEST = 15
TERROR_MARKER_MANIFEST = 12
RESETTLED_MARKER_MANIFEST = 7
PLUS1_POP_MARKER_MANIFEST = 2
PLUS1_BASE_MARKER_MANIFEST = 2

MOBILIZATION_SCORE_THRESHOLD = 15


@dataclass(frozen=True, slots=True)
class FranceTrackEntry:
    letter: str
    commit: int
    resource: int


FRANCE_TRACK: Tuple[FranceTrackEntry, ...] = (
    FranceTrackEntry("A", 0, 1),
    FranceTrackEntry("B", 1, 2),
    FranceTrackEntry("C", 2, 3),
    FranceTrackEntry("D", 2, 4),
    FranceTrackEntry("E", 3, 5),
    FranceTrackEntry("F", 3, 6),
)


def france_track_from_letter(letter: str) -> int:
    for index, entry in enumerate(FRANCE_TRACK):
        if entry.letter == letter.upper():
            return index
    raise ValueError(f"France track must be a letter A through F, not {letter!r}.")


@dataclass(frozen=True, slots=True)
class GameParameters:
    """Options fixed when the game is created."""

    scenario_name: str
    final_prop_support: bool = False
    bot_debug: bool = False


@dataclass(frozen=True, slots=True)
class Resources:
    gov: int = 0
    fln: int = 0

    def __getitem__(self, role: Role) -> int:
        return self.gov if role is Role.GOV else self.fln

    def update(self, role: Role, value: int) -> "Resources":
        if role is Role.GOV:
            return replace(self, gov=value)
        return replace(self, fln=value)

    def increase(self, role: Role, amount: int) -> "Resources":
        return self.update(role, min(EDGE_TRACK_MAX, self[role] + amount))

    def decrease(self, role: Role, amount: int) -> "Resources":
        return self.update(role, max(0, self[role] - amount))


@dataclass(frozen=True, slots=True)
class GameState:
    """Full game snapshot. Treated as a value: changes build a new instance."""

    params: GameParameters
    turn: int
    spaces: Tuple[Space, ...]
    number_of_prop_cards: int = 0
    france_track: int = 0
    border_zone_track: int = 0
    commitment: int = 0
    resources: Resources = field(default_factory=Resources)
    out_of_play: Pieces = field(default_factory=Pieces)
    casualties: Pieces = field(default_factory=Pieces)
    sequence: SequenceOfPlay = field(default_factory=SequenceOfPlay)
    capabilities: FrozenSet[str] = frozenset()
    momentum: FrozenSet[str] = frozenset()
    current_card: Optional[int] = None
    previous_card: Optional[int] = None
    prop_cards_played: int = 0
    pivotal_cards_played: FrozenSet[int] = frozenset()
    coup_d_etat_played_once: bool = False
    recall_de_gaulle_cancelled: bool = False
    history: Tuple[str, ...] = ()

    # -- spaces -------------------------------------------------------------

    @property
    def space_names(self) -> list[str]:
        return sorted(space.name for space in self.spaces)

    def get_space(self, name: str) -> Space:
        for space in self.spaces:
            if space.name == name:
                return space
        raise KeyError(name)

    def update_space(self, changed: Space) -> "GameState":
        """Replace the space with the same name, keeping board order."""
        self.get_space(changed.name)
        spaces = tuple(changed if space.name == changed.name else space for space in self.spaces)
        return replace(self, spaces=spaces)

    def total_on_map(self, number_per) -> int:
        return sum(number_per(space) for space in self.spaces)

    def pieces_in_use(self, number_per) -> int:
        return (
            self.total_on_map(lambda space: number_per(space.pieces))
            + number_per(self.casualties)
            + number_per(self.out_of_play)
        )

    # -- availability -------------------------------------------------------

    @property
    def available_pieces(self) -> Pieces:
        return Pieces(
            french_troops=FRENCH_TROOPS_MANIFEST - self.pieces_in_use(lambda p: p.french_troops),
            french_police=FRENCH_POLICE_MANIFEST - self.pieces_in_use(lambda p: p.french_police),
            algerian_troops=ALGERIAN_TROOPS_MANIFEST - self.pieces_in_use(lambda p: p.algerian_troops),
            algerian_police=ALGERIAN_POLICE_MANIFEST - self.pieces_in_use(lambda p: p.algerian_police),
            hidden_guerrillas=GUERRILLAS_MANIFEST - self.pieces_in_use(lambda p: p.total_guerrillas),
            active_guerrillas=0,
            gov_bases=GOV_BASES_MANIFEST - self.pieces_in_use(lambda p: p.gov_bases),
            fln_bases=FLN_BASES_MANIFEST - self.pieces_in_use(lambda p: p.fln_bases),
        )

    @property
    def terror_markers_available(self) -> int:
        return TERROR_MARKER_MANIFEST - self.total_on_map(lambda space: space.terror)

    @property
    def resettled_sectors(self) -> int:
        return sum(1 for space in self.spaces if space.is_resettled)

    @property
    def resettled_markers_available(self) -> int:
        return RESETTLED_MARKER_MANIFEST - self.resettled_sectors

    @property
    def plus1_pop_markers_available(self) -> int:
        return PLUS1_POP_MARKER_MANIFEST - sum(1 for s in self.spaces if s.has_marker(PLUS1_POP_MARKER))

    @property
    def plus1_base_markers_available(self) -> int:
        return PLUS1_BASE_MARKER_MANIFEST - sum(1 for s in self.spaces if s.has_marker(PLUS1_BASE_MARKER))

    # -- scoring and cards --------------------------------------------------

    def calculate_score(self) -> Tuple[int, int]:
        """Return (Government score, FLN score)."""
        gov_score = self.total_on_map(lambda space: space.support_value) + self.commitment
        fln_score = self.total_on_map(lambda space: space.oppose_value) + self.total_on_map(
            lambda space: space.pieces.fln_bases
        )
        return gov_score, fln_score

    @property
    def france_track_entry(self) -> FranceTrackEntry:
        return FRANCE_TRACK[self.france_track]

    @property
    def is_prop_round(self) -> bool:
        return self.current_card is not None and is_propaganda_card(self.current_card)

    @property
    def gov_pivotal_available(self) -> FrozenSet[int]:
        return GOV_PIVOTAL_CARDS - self.pivotal_cards_played

    @property
    def fln_pivotal_available(self) -> FrozenSet[int]:
        return FLN_PIVOTAL_CARDS - self.pivotal_cards_played

    @property
    def gov_pivotal_playable(self) -> FrozenSet[int]:
        playable = set()
        for number in self.gov_pivotal_available:
            if number == PIVOTAL_COUP_D_ETAT:
                playable.add(number)
            elif number == PIVOTAL_MOBILIZATION:
                if self.calculate_score()[0] >= MOBILIZATION_SCORE_THRESHOLD:
                    playable.add(number)
            elif number == PIVOTAL_RECALL_DE_GAULLE:
                if self.coup_d_etat_played_once and not self.recall_de_gaulle_cancelled:
                    playable.add(number)
        return frozenset(playable)

    # -- history ------------------------------------------------------------

    def append_history(self, lines: Iterable[str]) -> "GameState":
        return replace(self, history=self.history + tuple(lines))
