"""Builds the opening game state for a scenario."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import List

from coltwi.data.repositories import ScenariosRepository, SpacesRepository
from coltwi.domain.defs import ScenarioDef
from coltwi.domain.space import Space
from coltwi.domain.state import GameParameters, GameState, Resources

LOGGER = logging.getLogger(__name__)

SEPARATOR = "-" * 52


class SetupService:
    """Creates turn-0 game states from scenario definitions."""

    def __init__(self, *, spaces_repo: SpacesRepository, scenarios_repo: ScenariosRepository) -> None:
        self._spaces_repo = spaces_repo
        self._scenarios_repo = scenarios_repo

    def list_scenarios(self) -> List[ScenarioDef]:
        return self._scenarios_repo.all()

    def new_game(
        self,
        scenario_id: str,
        *,
        final_prop_support: bool = False,
        bot_debug: bool = False,
    ) -> GameState:
        """Return the state at the start of the scenario, before any card is drawn."""
        scenario = self._scenarios_repo.get(scenario_id)
        overrides = {override.name: override for override in scenario.spaces}
        spaces: List[Space] = []
        for default in self._spaces_repo.all():
            override = overrides.get(default.name)
            if override is None:
                spaces.append(default)
            else:
                spaces.append(
                    replace(default, support=override.support, pieces=override.pieces, markers=override.markers)
                )

        state = GameState(
            params=GameParameters(
                scenario_name=scenario.name,
                final_prop_support=final_prop_support,
                bot_debug=bot_debug,
            ),
            turn=0,
            spaces=tuple(spaces),
            number_of_prop_cards=scenario.number_of_prop_cards,
            france_track=scenario.france_track,
            border_zone_track=scenario.border_zone_track,
            commitment=scenario.commitment,
            resources=Resources(gov=scenario.gov_resources, fln=scenario.fln_resources),
            out_of_play=scenario.out_of_play,
            pivotal_cards_played=scenario.pivotal_cards_played,
        )
        LOGGER.info("Set up scenario '%s'", scenario_id)
        return state.append_history([f"Scenario: {scenario.name}", SEPARATOR, ""])
