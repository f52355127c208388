"""Text summaries of the game state for the console."""
from __future__ import annotations

import textwrap
from typing import Iterable, List, Sequence

from coltwi.core.types import Role
from coltwi.domain.state import GameState

SEPARATOR = "-" * 52
_ROLE_WIDTH = max(len(role.label) for role in Role)


def wrap(prefix: str, values: Sequence[str], width: int = 78) -> List[str]:
    """Wrap a comma separated list after ``prefix``, aligning continuation lines."""
    if not values:
        return [f"{prefix}none"]
    return textwrap.wrap(
        ", ".join(values),
        width=width,
        initial_indent=prefix,
        subsequent_indent=" " * len(prefix),
        break_long_words=False,
        break_on_hyphens=False,
    )


def france_track_display(state: GameState) -> str:
    entry = state.france_track_entry
    return f"{entry.letter} (Commitment -{entry.commit}, Resource +{entry.resource})"


def scenario_summary(state: GameState) -> List[str]:
    return [f"Scenario: {state.params.scenario_name}", SEPARATOR]


def status_summary(state: GameState) -> List[str]:
    gov, fln = state.calculate_score()
    return [
        "Status",
        SEPARATOR,
        f"Gov resources    : {state.resources.gov:2d}",
        f"FLN resources    : {state.resources.fln:2d}",
        SEPARATOR,
        f"Support + Commit : {gov:2d} ({gov - 35:+d})",
        f"Oppose  + Bases  : {fln:2d} ({fln - 30:+d})",
        SEPARATOR,
        f"Gov commitment   : {state.commitment:2d}",
        f"Resettled sectors: {state.resettled_sectors:2d}",
        SEPARATOR,
        f"France track     : {france_track_display(state)}",
        f"Border zone track: {state.border_zone_track:d}",
    ]


def available_pieces_summary(state: GameState) -> List[str]:
    available = state.available_pieces
    return [
        "Available Pieces",
        SEPARATOR,
        f"French Troops   : {available.french_troops:2d}",
        f"French Police   : {available.french_police:2d}",
        f"Algerian Troops : {available.algerian_troops:2d}",
        f"Algerian Police : {available.algerian_police:2d}",
        f"Government Bases: {available.gov_bases:2d}",
        SEPARATOR,
        f"FLN guerrillas  : {available.total_guerrillas:2d}",
        f"FLN Bases       : {available.fln_bases:2d}",
        SEPARATOR,
        f"Terror markers  : {state.terror_markers_available:2d}",
    ]


def casualties_summary(state: GameState) -> List[str]:
    casualties = state.casualties
    return [
        "Casualties",
        SEPARATOR,
        f"French Troops   : {casualties.french_troops:2d}",
        f"French Police   : {casualties.french_police:2d}",
        f"Algerian Troops : {casualties.algerian_troops:2d}",
        f"Algerian Police : {casualties.algerian_police:2d}",
        f"Government Bases: {casualties.gov_bases:2d}",
        SEPARATOR,
        f"FLN guerrillas  : {casualties.total_guerrillas:2d}",
        f"FLN Bases       : {casualties.fln_bases:2d}",
    ]


def out_of_play_summary(state: GameState) -> List[str]:
    out_of_play = state.out_of_play
    return [
        "Out of Play",
        SEPARATOR,
        f"French Troops   : {out_of_play.french_troops:2d}",
        f"French Police   : {out_of_play.french_police:2d}",
        f"Government Bases: {out_of_play.gov_bases:2d}",
        SEPARATOR,
        f"FLN guerrillas  : {out_of_play.total_guerrillas:2d}",
    ]


def event_summary(state: GameState) -> List[str]:
    return [
        "Active Events",
        SEPARATOR,
        *wrap("Capabilities: ", sorted(state.capabilities)),
        *wrap("Momentum    : ", sorted(state.momentum)),
    ]


def sequence_summary(state: GameState, card_label: str | None) -> List[str]:
    sequence = state.sequence

    def actor(role: Role, action) -> str:
        desc = "Has not acted" if action is None else action.label
        return f"{role.label:<{_ROLE_WIDTH}} ({desc})"

    return [
        "Sequence of Play",
        SEPARATOR,
        f"Current card  : {card_label or 'none'}",
        f"1st eligible  : {actor(sequence.first_eligible, sequence.first_action)}",
        f"2nd eligible  : {actor(sequence.second_eligible, sequence.second_action)}",
    ]


def space_summary(state: GameState, name: str) -> List[str]:
    space = state.get_space(name)
    lines = [
        "",
        f"{space.name_and_zone}  (Pop {space.population})",
        SEPARATOR,
        *wrap("Status : ", [space.control.label, space.support.label]),
        *wrap("Pieces : ", space.pieces.string_items()),
    ]
    if space.markers:
        lines.extend(wrap("Markers: ", sorted(space.markers)))
    return lines


def print_summary(lines: Iterable[str]) -> None:
    print()
    for line in lines:
        print(line)

