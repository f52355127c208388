"""Applies resolved commands to the game state.

Every operation takes the current :class:`GameState` and returns a
:class:`RuleResult`; nothing here mutates its input or touches the disk.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import FrozenSet, List, Tuple

from coltwi.core.types import Action, PieceType, Role, SupportValue
from coltwi.data.repositories import CardsRepository
from coltwi.domain.cards import (
    CARD_NUMBERS,
    PIVOTAL_COUP_D_ETAT,
    is_gov_pivotal_card,
    is_propaganda_card,
)
from coltwi.domain.events import ALL_CAPABILITIES, ALL_MOMENTUM
from coltwi.domain.sequence import SequenceOfPlay
from coltwi.domain.space import PLUS1_BASE_MARKER, PLUS1_POP_MARKER, RESETTLED_MARKER, TERROR_MARKER
from coltwi.domain.state import (
    BORDER_ZONE_TRACK_MAX,
    EDGE_TRACK_MAX,
    FRANCE_TRACK,
    GameState,
)
from coltwi.services.errors import RulesError

LOGGER = logging.getLogger(__name__)

PASS_INCOME = {Role.GOV: 2, Role.FLN: 1}
MIN_GOV_RESOURCES_FOR_OPS = 2
_FREE_ACTIONS = (Action.EVENT, Action.PASS)

PHASE_VICTORY = "Victory"
PHASE_RESOURCES = "Resources"
PHASE_SUPPORT = "Support"
PHASE_REDEPLOY = "Redeploy"
PHASE_COMMITMENT = "Commitment"
PHASE_RESET = "Reset"
PROPAGANDA_PHASES: Tuple[str, ...] = (
    PHASE_VICTORY,
    PHASE_RESOURCES,
    PHASE_SUPPORT,
    PHASE_REDEPLOY,
    PHASE_COMMITMENT,
    PHASE_RESET,
)


@dataclass(frozen=True, slots=True)
class RuleResult:
    """New state plus the history lines the change produced."""

    state: GameState
    lines: Tuple[str, ...] = ()

    def committed(self) -> GameState:
        """Return the new state with ``lines`` appended to its history."""
        return self.state.append_history(self.lines)


def _normalize(value: object) -> str:
    if isinstance(value, (set, frozenset)):
        value = sorted(value)
    if value is None or value == "" or value == () or value == []:
        return "none"
    if value is True:
        return "yes"
    if value is False:
        return "no"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value).strip() or "none"


def adjustment_line(name: str, old_value: object, new_value: object) -> str:
    return f"{name} adjusted from [{_normalize(old_value)}] to [{_normalize(new_value)}]"


class RulesService:
    """Minimal rules executor for the card-by-card sequence of play."""

    def __init__(self, *, cards_repo: CardsRepository) -> None:
        self._cards_repo = cards_repo

    # -- cards and turns ------------------------------------------------------

    def begin_turn(self, state: GameState) -> RuleResult:
        return RuleResult(replace(state, turn=state.turn + 1))

    def draw_card(self, state: GameState, number: int) -> RuleResult:
        if number not in CARD_NUMBERS:
            raise RulesError(f"Card number must be between {CARD_NUMBERS.start} and {CARD_NUMBERS.stop - 1}.")
        card = self._cards_repo.get_card(number)
        prop_cards_played = state.prop_cards_played + (1 if is_propaganda_card(number) else 0)
        new_state = replace(
            state,
            previous_card=state.current_card,
            current_card=number,
            prop_cards_played=prop_cards_played,
        )
        return RuleResult(new_state, (f"Card played: {card}",))

    def card_name(self, number: int) -> str:
        return str(self._cards_repo.get_card(number))

    def end_card(self, state: GameState) -> RuleResult:
        """Reset the sequence of play once both eligible roles have acted."""
        if state.is_prop_round:
            raise RulesError("Propaganda rounds end with the Reset phase.")
        try:
            sequence = state.sequence.reset()
        except ValueError as exc:
            raise RulesError(str(exc)) from exc
        lines = (
            f"{sequence.first_eligible} is 1st eligible for the next card",
            f"{sequence.second_eligible} is 2nd eligible for the next card",
        )
        return RuleResult(replace(state, sequence=sequence), lines)

    # -- actions --------------------------------------------------------------

    def available_actions(self, state: GameState, role: Role) -> List[Action]:
        if state.sequence.next_role is not role:
            return []
        if state.current_card is not None and is_gov_pivotal_card(state.current_card) and role is Role.GOV:
            return [Action.EVENT]
        actions = state.sequence.available_actions()
        if role is Role.GOV and state.resources.gov < MIN_GOV_RESOURCES_FOR_OPS:
            actions = [action for action in actions if action in _FREE_ACTIONS]
        return actions

    def take_action(self, state: GameState, role: Role, action: Action) -> RuleResult:
        """Record ``action`` for ``role`` and apply its resource effect."""
        if state.current_card is None:
            raise RulesError("No card has been drawn.")
        if state.sequence.next_role is not role:
            raise RulesError(f"{role} is not eligible to act now.")
        if action not in self.available_actions(state, role):
            raise RulesError(f"{action} is not available to {role}.")
        lines = ["", f"{role} chooses: {action}"]
        new_state = state
        if action is Action.PASS:
            income = PASS_INCOME[role]
            before = new_state.resources[role]
            new_state = replace(new_state, resources=new_state.resources.increase(role, income))
            lines.append(f"{role} resources increased from {before} to {new_state.resources[role]}")
        lines.append(f"Place the {role} eligibility cylinder in the {action} box")
        new_state = replace(new_state, sequence=new_state.sequence.next_action(action))
        LOGGER.debug("%s took %s on card %s", role, action, state.current_card)
        return RuleResult(new_state, tuple(lines))

    def bot_action(self, state: GameState) -> RuleResult:
        """The scripted FLN opponent always passes."""
        return self.take_action(state, Role.FLN, Action.PASS)

    def play_pivotal(self, state: GameState, role: Role, number: int) -> RuleResult:
        if state.sequence.num_acted != 0:
            raise RulesError("A pivotal event may only be played before anyone acts on the card.")
        playable = state.gov_pivotal_playable if role is Role.GOV else state.fln_pivotal_available
        if number not in playable:
            raise RulesError(f"Card #{number} is not a pivotal event {role} can play.")
        card = self._cards_repo.get_card(number)
        other = role.opposite
        lines = (
            "",
            f"The {role} plays pivotal event: {card.num_and_name}",
            f"Place the {card.name} card on top of the discard pile",
            f"Place {role} cylinder on the First Eligible space on the sequence track",
            f"Place {other} cylinder on the Second Eligible space on the sequence track",
        )
        new_state = replace(
            state,
            sequence=SequenceOfPlay(first_eligible=role, second_eligible=other),
            current_card=number,
            pivotal_cards_played=state.pivotal_cards_played | {number},
        )
        return RuleResult(new_state, lines)

    def transfer_resources(self, state: GameState, source: Role, amount: int) -> RuleResult:
        """Move up to ``amount`` resources from ``source`` to the other role."""
        if amount < 0:
            raise RulesError("Transfer amount must not be negative.")
        target = source.opposite
        moved = min(amount, state.resources[source], EDGE_TRACK_MAX - state.resources[target])
        resources = state.resources.decrease(source, moved).increase(target, moved)
        line = f"{source} transfers {moved} resources to {target}"
        return RuleResult(replace(state, resources=resources), (line,))

    # -- propaganda -----------------------------------------------------------

    def is_final_prop_round(self, state: GameState) -> bool:
        return state.is_prop_round and state.prop_cards_played >= state.number_of_prop_cards

    def propaganda_phases(self, state: GameState) -> Tuple[str, ...]:
        if self.is_final_prop_round(state):
            if state.params.final_prop_support:
                return (PHASE_VICTORY, PHASE_SUPPORT)
            return (PHASE_VICTORY,)
        return PROPAGANDA_PHASES

    def resolve_propaganda_phase(self, state: GameState, phase: str) -> RuleResult:
        if not state.is_prop_round:
            raise RulesError("The current card is not a Propaganda card.")
        handler = {
            PHASE_VICTORY: self._victory_phase,
            PHASE_RESOURCES: self._resources_phase,
            PHASE_SUPPORT: self._support_phase,
            PHASE_REDEPLOY: self._redeploy_phase,
            PHASE_COMMITMENT: self._commitment_phase,
            PHASE_RESET: self._reset_phase,
        }.get(phase)
        if handler is None:
            raise RulesError(f"Unknown Propaganda phase '{phase}'.")
        result = handler(state)
        return RuleResult(result.state, ("", f"Propaganda: {phase} phase") + result.lines)

    def _victory_phase(self, state: GameState) -> RuleResult:
        gov, fln = state.calculate_score()
        return RuleResult(state, (f"Government: Support + Commitment = {gov}", f"FLN: Opposition + Bases = {fln}"))

    def _resources_phase(self, state: GameState) -> RuleResult:
        entry = state.france_track_entry
        before = state.resources.gov
        resources = state.resources.increase(Role.GOV, entry.resource)
        line = f"France track {entry.letter}: Government resources increased from {before} to {resources.gov}"
        return RuleResult(replace(state, resources=resources), (line,))

    def _support_phase(self, state: GameState) -> RuleResult:
        return RuleResult(state, ("Conduct Pacification and Agitation using the adjust command",))

    def _redeploy_phase(self, state: GameState) -> RuleResult:
        return RuleResult(state, ("Redeploy pieces using the adjust command",))

    def _commitment_phase(self, state: GameState) -> RuleResult:
        entry = state.france_track_entry
        commitment = max(0, state.commitment - entry.commit)
        line = adjustment_line("Commitment", state.commitment, commitment)
        return RuleResult(replace(state, commitment=commitment), (line,))

    def _reset_phase(self, state: GameState) -> RuleResult:
        lines: List[str] = []
        pivotal = state.pivotal_cards_played
        coup_played = state.coup_d_etat_played_once
        if PIVOTAL_COUP_D_ETAT in pivotal:
            pivotal = pivotal - {PIVOTAL_COUP_D_ETAT}
            coup_played = True
            lines.append("Return the Coup d'etat pivotal card to the Government")
        if state.momentum:
            lines.append(f"Discard momentum events: {', '.join(sorted(state.momentum))}")
        spaces = tuple(
            space.with_pieces(space.pieces.hide_guerrillas(space.pieces.active_guerrillas))
            for space in state.spaces
        )
        if any(space.pieces.active_guerrillas for space in state.spaces):
            lines.append("Flip all active guerrillas underground")
        lines.append(f"Place {Role.FLN} cylinder on the First Eligible space on the sequence track")
        lines.append(f"Place {Role.GOV} cylinder on the Second Eligible space on the sequence track")
        new_state = replace(
            state,
            spaces=spaces,
            momentum=frozenset(),
            pivotal_cards_played=pivotal,
            coup_d_etat_played_once=coup_played,
            sequence=SequenceOfPlay(),
        )
        return RuleResult(new_state, tuple(lines))

    # -- adjustments ----------------------------------------------------------

    def adjust_resources(self, state: GameState, role: Role, value: int) -> RuleResult:
        _check_range(f"{role} resources", value, 0, EDGE_TRACK_MAX)
        line = adjustment_line(f"{role} resources", state.resources[role], value)
        return RuleResult(replace(state, resources=state.resources.update(role, value)), (line,))

    def adjust_commitment(self, state: GameState, value: int) -> RuleResult:
        _check_range("Commitment", value, 0, EDGE_TRACK_MAX)
        line = adjustment_line("Commitment", state.commitment, value)
        return RuleResult(replace(state, commitment=value), (line,))

    def adjust_france_track(self, state: GameState, index: int) -> RuleResult:
        _check_range("France track", index, 0, len(FRANCE_TRACK) - 1)
        line = adjustment_line("France track", FRANCE_TRACK[state.france_track].letter, FRANCE_TRACK[index].letter)
        return RuleResult(replace(state, france_track=index), (line,))

    def adjust_border_zone(self, state: GameState, value: int) -> RuleResult:
        _check_range("Border zone track", value, 0, BORDER_ZONE_TRACK_MAX)
        line = adjustment_line("Border zone track", state.border_zone_track, value)
        return RuleResult(replace(state, border_zone_track=value), (line,))

    def toggle_capability(self, state: GameState, name: str) -> RuleResult:
        if name not in ALL_CAPABILITIES:
            raise RulesError(f"Unknown capability '{name}'.")
        updated = _toggle(state.capabilities, name)
        line = adjustment_line("Capabilities", state.capabilities, updated)
        return RuleResult(replace(state, capabilities=updated), (line,))

    def toggle_momentum(self, state: GameState, name: str) -> RuleResult:
        if name not in ALL_MOMENTUM:
            raise RulesError(f"Unknown momentum event '{name}'.")
        updated = _toggle(state.momentum, name)
        line = adjustment_line("Momentum", state.momentum, updated)
        return RuleResult(replace(state, momentum=updated), (line,))

    def toggle_bot_debug(self, state: GameState) -> RuleResult:
        params = replace(state.params, bot_debug=not state.params.bot_debug)
        line = adjustment_line("Bot logging", state.params.bot_debug, params.bot_debug)
        return RuleResult(replace(state, params=params), (line,))

    def adjust_space_support(self, state: GameState, space_name: str, support: SupportValue) -> RuleResult:
        space = _get_space(state, space_name)
        if space.is_country and support is not SupportValue.NEUTRAL:
            raise RulesError(f"{space_name} is a country and is always Neutral.")
        line = adjustment_line(f"{space_name}: Support", space.support, support)
        return RuleResult(state.update_space(space.with_support(support)), (line,))

    def max_space_pieces(self, state: GameState, space_name: str, piece_type: PieceType) -> int:
        """Largest count of ``piece_type`` that ``space_name`` may hold right now."""
        space = _get_space(state, space_name)
        limit = space.pieces.num_of(piece_type) + _pool_available(state, piece_type)
        if piece_type is PieceType.GOV_BASES:
            limit = min(limit, space.max_bases - space.pieces.fln_bases)
        elif piece_type is PieceType.FLN_BASES:
            limit = min(limit, space.max_bases - space.pieces.gov_bases)
        return max(limit, 0)

    def adjust_space_pieces(self, state: GameState, space_name: str, piece_type: PieceType, count: int) -> RuleResult:
        space = _get_space(state, space_name)
        current = space.pieces.num_of(piece_type)
        limit = self.max_space_pieces(state, space_name, piece_type)
        _check_range(f"{space_name}: {piece_type.plural}", count, 0, limit)
        line = adjustment_line(f"{space_name}: {piece_type.plural}", current, count)
        return RuleResult(state.update_space(space.with_pieces(space.pieces.set(count, piece_type))), (line,))

    def adjust_casualties(self, state: GameState, piece_type: PieceType, count: int) -> RuleResult:
        current = state.casualties.num_of(piece_type)
        _check_pool(state, piece_type, current, count)
        line = adjustment_line(f"Casualties: {piece_type.plural}", current, count)
        return RuleResult(replace(state, casualties=state.casualties.set(count, piece_type)), (line,))

    def adjust_out_of_play(self, state: GameState, piece_type: PieceType, count: int) -> RuleResult:
        current = state.out_of_play.num_of(piece_type)
        _check_pool(state, piece_type, current, count)
        line = adjustment_line(f"Out of play: {piece_type.plural}", current, count)
        return RuleResult(replace(state, out_of_play=state.out_of_play.set(count, piece_type)), (line,))

    def adjust_terror(self, state: GameState, space_name: str, count: int) -> RuleResult:
        space = _get_space(state, space_name)
        current = space.terror
        _check_range(f"{space_name}: Terror markers", count, 0, current + state.terror_markers_available)
        updated = space
        while updated.terror < count:
            updated = updated.add_marker(TERROR_MARKER)
        while updated.terror > count:
            updated = updated.remove_marker(TERROR_MARKER)
        line = adjustment_line(f"{space_name}: Terror markers", current, count)
        return RuleResult(state.update_space(updated), (line,))

    def toggle_resettled(self, state: GameState, space_name: str) -> RuleResult:
        space = _get_space(state, space_name)
        if not space.is_sector or space.base_pop != 1:
            raise RulesError("Only sectors with a population of 1 may be resettled.")
        return _toggle_marker(state, space, RESETTLED_MARKER, "Resettled", state.resettled_markers_available)

    def toggle_plus1_pop(self, state: GameState, space_name: str) -> RuleResult:
        space = _get_space(state, space_name)
        if not space.is_city:
            raise RulesError("The +1 Population marker may only be placed in a city.")
        return _toggle_marker(state, space, PLUS1_POP_MARKER, "+1 Population", state.plus1_pop_markers_available)

    def toggle_plus1_base(self, state: GameState, space_name: str) -> RuleResult:
        space = _get_space(state, space_name)
        if not space.is_country:
            raise RulesError("The +1 Base marker may only be placed in a country.")
        return _toggle_marker(state, space, PLUS1_BASE_MARKER, "+1 Base", state.plus1_base_markers_available)


def _toggle_marker(state: GameState, space, marker: str, label: str, available: int) -> RuleResult:
    had_marker = space.has_marker(marker)
    if had_marker:
        updated = space.remove_marker(marker)
    elif available <= 0:
        raise RulesError(f"All {label} markers are already on the map.")
    else:
        updated = space.add_marker(marker)
    line = adjustment_line(f"{space.name}: {label}", had_marker, updated.has_marker(marker))
    return RuleResult(state.update_space(updated), (line,))


def _toggle(names: FrozenSet[str], name: str) -> FrozenSet[str]:
    if name in names:
        return names - {name}
    return names | {name}


def _get_space(state: GameState, space_name: str):
    try:
        return state.get_space(space_name)
    except KeyError as exc:
        raise RulesError(f"Unknown space '{space_name}'.") from exc


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise RulesError(f"{name} must be between {low} and {high}.")


def _pool_available(state: GameState, piece_type: PieceType) -> int:
    available = state.available_pieces
    if piece_type is PieceType.ACTIVE_GUERRILLAS:
        # Guerrillas share one pool; availability is reported as hidden.
        return available.hidden_guerrillas
    return available.num_of(piece_type)


def _check_pool(state: GameState, piece_type: PieceType, current: int, count: int) -> None:
    _check_range(piece_type.plural, count, 0, current + _pool_available(state, piece_type))


__all__ = [
    "PROPAGANDA_PHASES",
    "RuleResult",
    "RulesService",
    "adjustment_line",
]
