from __future__ import annotations

from dataclasses import replace

from coltwi.core.types import SpaceType, SupportValue, Terrain
from coltwi.data.repositories import CardsRepository, ScenariosRepository, SpacesRepository
from coltwi.domain.pieces import Pieces
from coltwi.domain.space import Space
from coltwi.domain.state import GameParameters, GameState, Resources
from coltwi.services.rules_service import RulesService
from coltwi.services.setup_service import SetupService


def build_setup_service() -> SetupService:
    spaces_repo = SpacesRepository()
    return SetupService(spaces_repo=spaces_repo, scenarios_repo=ScenariosRepository(spaces_repo=spaces_repo))


def build_rules_service() -> RulesService:
    return RulesService(cards_repo=CardsRepository())


def new_game(scenario_id: str = "full", **kwargs) -> GameState:
    return build_setup_service().new_game(scenario_id, **kwargs)


def make_state(**overrides) -> GameState:
    """Small hand-built state with one city, one sector and one country."""
    spaces = (
        Space(
            name="Algiers",
            space_type=SpaceType.CITY,
            zone="IV",
            terrain=Terrain.URBAN,
            base_pop=3,
            coastal=True,
            support=SupportValue.SUPPORT,
            pieces=Pieces(french_police=2, hidden_guerrillas=1),
        ),
        Space(
            name="Barika",
            space_type=SpaceType.SECTOR,
            zone="I-1",
            terrain=Terrain.MOUNTAINS,
            base_pop=1,
            support=SupportValue.OPPOSE,
            pieces=Pieces(active_guerrillas=2, fln_bases=1),
            markers=("Terror",),
        ),
        Space(
            name="Morocco",
            space_type=SpaceType.COUNTRY,
            zone="",
            terrain=Terrain.PLAINS,
            base_pop=1,
            coastal=True,
        ),
    )
    state = GameState(
        params=GameParameters(scenario_name="Test Scenario"),
        turn=3,
        spaces=spaces,
        number_of_prop_cards=4,
        france_track=2,
        border_zone_track=1,
        commitment=12,
        resources=Resources(gov=10, fln=5),
        out_of_play=Pieces(french_troops=2),
        capabilities=frozenset({"Gov:Napalm"}),
        momentum=frozenset({"Dual: Hardened Attitudes"}),
        current_card=12,
        previous_card=7,
        pivotal_cards_played=frozenset({64, 61}),
        history=("Scenario: Test Scenario", "Card played: #7 Chief Bomber"),
    )
    return replace(state, **overrides)
