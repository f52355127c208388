"""Repository for scenario setups."""
from __future__ import annotations

from typing import Dict, List

from coltwi.core.types import SupportValue
from coltwi.data.errors import DataReferenceError, DataValidationError
from coltwi.data.repositories.base import RepositoryBase
from coltwi.data.repositories.spaces_repo import SpacesRepository
from coltwi.domain.cards import PIVOTAL_CARDS
from coltwi.domain.defs import ScenarioDef, SpaceOverrideDef
from coltwi.domain.pieces import Pieces
from coltwi.domain.space import ALL_MARKERS
from coltwi.domain.state import BORDER_ZONE_TRACK_MAX, EDGE_TRACK_MAX, france_track_from_letter


class ScenariosRepository(RepositoryBase[ScenarioDef]):
    """Loads scenarios and checks them against the default spaces."""

    def __init__(self, *, spaces_repo: SpacesRepository, base_path=None) -> None:
        super().__init__("scenarios.json", base_path)
        self._spaces_repo = spaces_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, ScenarioDef]:
        known_spaces = set(self._spaces_repo.ids())
        scenarios: Dict[str, ScenarioDef] = {}
        for scenario_id, payload in raw.items():
            ctx = f"scenario '{scenario_id}'"
            mapping = self._require_mapping(payload, ctx)
            name = self._require_str(mapping.get("name"), f"{ctx} name")
            prop_cards = self._require_int(
                mapping.get("number_of_prop_cards"), f"{ctx} number_of_prop_cards"
            )
            resources = self._require_mapping(mapping.get("resources"), f"{ctx} resources")
            gov = self._require_track(resources.get("gov"), f"{ctx} resources.gov", EDGE_TRACK_MAX)
            fln = self._require_track(resources.get("fln"), f"{ctx} resources.fln", EDGE_TRACK_MAX)
            commitment = self._require_track(
                mapping.get("commitment"), f"{ctx} commitment", EDGE_TRACK_MAX
            )
            letter = self._require_str(mapping.get("france_track"), f"{ctx} france_track")
            try:
                france_track = france_track_from_letter(letter)
            except ValueError as exc:
                raise DataValidationError(f"{ctx} {exc}") from exc
            border_zone = self._require_track(
                mapping.get("border_zone_track"), f"{ctx} border_zone_track", BORDER_ZONE_TRACK_MAX
            )
            out_of_play = self._require_pieces(mapping.get("out_of_play", {}), f"{ctx} out_of_play")

            pivotal: set[int] = set()
            for entry in self._require_list(
                mapping.get("pivotal_cards_played", []), f"{ctx} pivotal_cards_played"
            ):
                number = self._require_int(entry, f"{ctx} pivotal_cards_played entry")
                if number not in PIVOTAL_CARDS:
                    raise DataReferenceError(f"{ctx} lists card {number}, which is not a pivotal card.")
                pivotal.add(number)

            overrides_raw = self._require_mapping(mapping.get("spaces", {}), f"{ctx} spaces")
            overrides: List[SpaceOverrideDef] = []
            for space_name, override in overrides_raw.items():
                if space_name not in known_spaces:
                    raise DataReferenceError(f"{ctx} references unknown space '{space_name}'.")
                overrides.append(self._build_override(space_name, override, ctx))

            scenarios[scenario_id] = ScenarioDef(
                id=scenario_id,
                name=name,
                number_of_prop_cards=prop_cards,
                gov_resources=gov,
                fln_resources=fln,
                commitment=commitment,
                france_track=france_track,
                border_zone_track=border_zone,
                out_of_play=out_of_play,
                pivotal_cards_played=frozenset(pivotal),
                spaces=tuple(overrides),
            )
        return scenarios

    def _build_override(self, space_name: str, payload: object, ctx: str) -> SpaceOverrideDef:
        sctx = f"{ctx} space '{space_name}'"
        mapping = self._require_mapping(payload, sctx)
        support = SupportValue.NEUTRAL
        if "support" in mapping:
            support = self._require_label(SupportValue, mapping["support"], f"{sctx} support")
        pieces = Pieces()
        if "pieces" in mapping:
            pieces = self._require_pieces(mapping["pieces"], f"{sctx} pieces")
        markers = []
        for marker in self._require_list(mapping.get("markers", []), f"{sctx} markers"):
            marker = self._require_str(marker, f"{sctx} marker")
            if marker not in ALL_MARKERS:
                raise DataValidationError(f"{sctx} has unknown marker '{marker}'.")
            markers.append(marker)
        return SpaceOverrideDef(name=space_name, support=support, pieces=pieces, markers=tuple(markers))

    def _require_track(self, value: object, context: str, maximum: int) -> int:
        number = self._require_int(value, context)
        if not 0 <= number <= maximum:
            raise DataValidationError(f"{context} must be between 0 and {maximum}.")
        return number
