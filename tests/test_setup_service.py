import pytest

from coltwi.core.types import SupportValue
from coltwi.domain.pieces import Pieces
from coltwi.services.setup_service import SEPARATOR
from tests.helpers.builders import build_setup_service, new_game


def test_list_scenarios_in_file_order() -> None:
    names = [scenario.name for scenario in build_setup_service().list_scenarios()]
    assert names[0].startswith("Short")
    assert names[-1] == "Full: 1955-1962: Algerie Francaise!"


def test_full_scenario_board() -> None:
    state = new_game("full")
    assert state.get_space("Batna").pieces == Pieces(hidden_guerrillas=1, fln_bases=1)
    assert state.get_space("Algiers").pieces == Pieces(algerian_troops=1, french_police=1, algerian_police=1)
    assert state.get_space("Philippeville").support is SupportValue.OPPOSE
    assert state.get_space("Morocco").pieces == Pieces()
    assert state.out_of_play == Pieces(french_troops=6, french_police=15, gov_bases=3)
    assert state.france_track_entry.letter == "A"
    assert state.commitment == 25


def test_setup_keeps_board_order() -> None:
    state = new_game("short")
    names = [space.name for space in state.spaces]
    assert names[0] == "Barika"
    assert names[-1] == "Tunisia"
    assert len(names) == 30


def test_short_scenario_pivotal_and_tracks() -> None:
    state = new_game("short")
    assert state.pivotal_cards_played == frozenset({61, 64, 65})
    assert state.border_zone_track == 3
    assert state.number_of_prop_cards == 3


def test_setup_history_and_params() -> None:
    state = new_game("medium", final_prop_support=True)
    assert state.history == (f"Scenario: {state.params.scenario_name}", SEPARATOR, "")
    assert state.params.final_prop_support is True
    assert state.turn == 0
    assert state.current_card is None


def test_scenario_piece_counts_fit_the_pools() -> None:
    for scenario_id in ("short", "medium", "full"):
        available = new_game(scenario_id).available_pieces
        assert min(getattr(available, name) for name in available.__dataclass_fields__) >= 0


def test_unknown_scenario() -> None:
    with pytest.raises(KeyError):
        new_game("epic")
