"""Console-driven session loop for a solo game against the FLN bot."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from coltwi.core.types import Action, InvalidValue, PieceType, Role, SupportValue
from coltwi.data.repositories import CardsRepository, ScenariosRepository, SpacesRepository
from coltwi.domain.cards import CARD_NUMBERS, PIVOTAL_CARDS
from coltwi.domain.events import ALL_CAPABILITIES, ALL_MOMENTUM
from coltwi.domain.state import FRANCE_TRACK, BORDER_ZONE_TRACK_MAX, EDGE_TRACK_MAX, GameState
from coltwi.presentation.cli import config, prompts, render
from coltwi.services.errors import RulesError, SaveLoadError, SnapshotIOError
from coltwi.services.resolver import Cancelled
from coltwi.services.rules_service import PHASE_REDEPLOY, PHASE_SUPPORT, RuleResult, RulesService
from coltwi.services.setup_service import SetupService
from coltwi.services.snapshot_store import SnapshotStore, validate_game_name

LOGGER = logging.getLogger(__name__)

_INTERACTIVE_PHASES = (PHASE_SUPPORT, PHASE_REDEPLOY)
_SHOW_OPTIONS = ["scenario", "status", "available", "casualties", "out of play", "capabilities", "sequence", "all"]
_ADJUST_OPTIONS = sorted(
    [
        "gov resources",
        "fln resources",
        "commitment",
        "france track",
        "border zone",
        "casualties",
        "out of play",
        "capabilities",
        "momentum",
        "bot logging",
        "transfer resources",
    ]
)

COMMAND_HELP: Dict[str, str] = {
    "gov": "Take an action on the current card",
    "bot": "The FLN Bot acts on the current card",
    "pivot": "Play a pivotal event card",
    "done": "Finish the current Propaganda phase",
    "show": """Display the current game state
  show scenario     - scenario name
  show status       - current score, resources, etc.
  show available    - pieces that are currently available
  show casualties   - pieces in the casualties box
  show out of play  - pieces in the out of play box
  show capabilities - capabilities and momentum events in play
  show sequence     - 1st eligible, 2nd eligible and actions taken
  show all          - entire game state
  show <space>      - state of a single space""",
    "history": """Display game history
  history       - Shows the log from the beginning of the current turn
  history -n    - Shows the log for the turn n turns ago
  history n     - Shows the log for the nth turn
  history all   - Shows the entire log""",
    "rollback": "Roll back to the start of any turn",
    "adjust": """Adjust game settings  (Minimal rule checking is applied)
  adjust gov resources - Current government resource level
  adjust fln resources - Current FLN resource level
  adjust commitment    - Government commitment level
  adjust france track  - Current position of the France track
  adjust border zone   - Current position of the Border Zone track
  adjust casualties    - Pieces in the casualties box
  adjust out of play   - Pieces in the out of play box
  adjust capabilities  - Capabilities currently in play
  adjust momentum      - Momentum events currently in play
  adjust bot logging   - Toggle logging of bot logic
  adjust transfer resources - Move resources from one side to the other
  adjust <space>       - Space specific settings""",
    "quit": "Quit the game.  The game is saved at the end of every turn.",
}


class ExitGame(Exception):
    """Raised to leave the session loop."""


class _RolledBack(Exception):
    def __init__(self, state: GameState) -> None:
        super().__init__("rolled back")
        self.state = state


@dataclass(slots=True)
class Session:
    """Services and identity of the game being played."""

    game_name: str
    store: SnapshotStore
    rules: RulesService


def main() -> int:
    """Start the interactive CLI session; returns the process exit status."""
    cfg = config.load_config()
    prompts.set_confirm_abort(bool(cfg["confirm_abort"]))
    spaces_repo = SpacesRepository()
    setup_service = SetupService(
        spaces_repo=spaces_repo,
        scenarios_repo=ScenariosRepository(spaces_repo=spaces_repo),
    )
    rules = RulesService(cards_repo=CardsRepository())
    store = SnapshotStore(config.get_save_dir())
    print("=== Colonial Twilight ===")
    try:
        _main_menu(store, setup_service, rules)
    except (ExitGame, EOFError, KeyboardInterrupt):
        print()
    except SaveLoadError as exc:
        LOGGER.error("Unable to resume saved game: %s", exc)
        location = f" ({exc.path})" if exc.path is not None else ""
        print(f"Error reading saved game{location}: {exc}")
        return 1
    print("Goodbye!")
    return 0


def _main_menu(store: SnapshotStore, setup_service: SetupService, rules: RulesService) -> None:
    games = store.list_games()
    if games:
        items: List[Tuple[str, str]] = [(name, f"Resume {name}: {_describe(store, name)}") for name in games]
        items += [("", "Start a new game"), ("quit", "Quit")]
        print("\nChoose a game:")
        choice = prompts.ask_menu(items, allow_abort=False)[0]
        if choice == "quit":
            raise ExitGame()
        if choice:
            _resume_game(Session(choice, store, rules))
            return
    _new_game(store, setup_service, rules)


def _describe(store: SnapshotStore, game_name: str) -> str:
    try:
        return str(store.describe_game(game_name))
    except (SaveLoadError, InvalidValue):
        return "(unreadable)"


def _new_game(store: SnapshotStore, setup_service: SetupService, rules: RulesService) -> None:
    print("\nChoose a scenario:")
    items = [(scenario.id, scenario.name) for scenario in setup_service.list_scenarios()]
    choice = prompts.ask_menu(items + [("quit", "Quit")], allow_abort=False)[0]
    if choice == "quit":
        raise ExitGame()
    game_name = _ask_game_name(store)
    final_support = prompts.ask_yes_no("Resolve the Support phase in the final Propaganda round (y/n)? ")
    state = setup_service.new_game(choice, final_prop_support=final_support)
    render.print_summary(state.history)
    session = Session(game_name, store, rules)
    _save(session, state)
    _play(session, state)


def _ask_game_name(store: SnapshotStore) -> str:
    while True:
        raw = prompts.read_line("Enter a name for the new game: ")
        try:
            name = validate_game_name(raw)
        except ValueError as exc:
            print(exc)
            continue
        if store.game_exists(name):
            print(f"A game named '{name}' already exists.")
            continue
        return name


def _resume_game(session: Session) -> None:
    key = session.store.latest_key(session.game_name)
    try:
        state = session.store.load(session.game_name, key)
    except InvalidValue as exc:
        raise SaveLoadError(str(exc), path=session.store.snapshot_path(session.game_name, key)) from exc
    print(f"\nResuming {session.game_name} at the end of {key}")
    render.print_summary(render.scenario_summary(state))
    if key.round_number is None and session.rules.is_final_prop_round(state):
        print("\nThe final Propaganda round is complete.  The game is over.")
        return
    _play(session, state, resume_round=key.round_number)


# -- turn loop ----------------------------------------------------------------


def _play(session: Session, state: GameState, *, resume_round: Optional[int] = None) -> None:
    if resume_round is not None:
        try:
            state = _finish_turn(session, _resolve_propaganda(session, state, start=resume_round))
        except _RolledBack as rolled_back:
            state = rolled_back.state
    while True:
        try:
            state = session.rules.begin_turn(state).committed()
            state = _draw_card(session, state)
            if state.is_prop_round:
                state = _resolve_propaganda(session, state, start=0)
            else:
                state = _resolve_event_card(session, state)
                state = _apply(state, session.rules.end_card(state))
            state = _finish_turn(session, state)
        except _RolledBack as rolled_back:
            state = rolled_back.state


def _finish_turn(session: Session, state: GameState) -> GameState:
    _save(session, state)
    if session.rules.is_final_prop_round(state):
        print("\nThe final Propaganda round is complete.  The game is over.")
        raise ExitGame()
    return state


def _save(session: Session, state: GameState, round_number: int | None = None) -> None:
    try:
        session.store.save(session.game_name, state, round_number=round_number)
    except SnapshotIOError as exc:
        LOGGER.error("Failed to save %s: %s", session.game_name, exc)
        print(f"IO Error writing saved game ({exc.path}): {exc}")


def _apply(state: GameState, result: RuleResult) -> GameState:
    for line in result.lines:
        print(line)
    return result.committed()


def _draw_card(session: Session, state: GameState) -> GameState:
    numbers = [str(n) for n in CARD_NUMBERS if n not in PIVOTAL_CARDS]
    while True:
        answer = prompts.ask_one_of(
            f"\nEnter the card # of the card for turn {state.turn} (or quit): ",
            numbers + ["quit"],
            allow_abort=False,
        )
        if answer == "quit":
            if prompts.ask_yes_no("Really quit (y/n)? "):
                raise ExitGame()
            continue
        assert answer is not None
        return _apply(state, session.rules.draw_card(state, int(answer)))


def _resolve_event_card(session: Session, state: GameState) -> GameState:
    while state.sequence.num_acted < 2:
        role = state.sequence.next_role
        assert role is not None
        position = "1st" if state.sequence.num_acted == 0 else "2nd"
        desc = f"{role} is up ({position} eligible, {state.resources[role]} resources)"
        names = ["bot"] if role is Role.FLN else ["gov"]
        if state.sequence.num_acted == 0 and state.gov_pivotal_playable:
            names.append("pivot")
        names += ["show", "history", "rollback", "adjust", "quit"]
        commands = {name: COMMAND_HELP[name] for name in names}
        card = session.rules.card_name(state.current_card) if state.current_card else "no card"
        prompt = (
            f"\n>>> Turn {state.turn}  ({card}) <<<\n{render.SEPARATOR}\n{desc}\n"
            f"Command ({prompts.or_list(names + ['?'])}): "
        )
        name, param = prompts.ask_command(prompt, commands)
        state = _run_command(session, state, name, param)
    return state


def _resolve_propaganda(session: Session, state: GameState, *, start: int) -> GameState:
    phases = session.rules.propaganda_phases(state)
    for index in range(start, len(phases)):
        phase = phases[index]
        state = _apply(state, session.rules.resolve_propaganda_phase(state, phase))
        if phase in _INTERACTIVE_PHASES:
            state = _phase_commands(session, state, phase)
        _save(session, state, round_number=index + 1)
    return state


def _phase_commands(session: Session, state: GameState, phase: str) -> GameState:
    names = ["done", "show", "history", "rollback", "adjust", "quit"]
    commands = {name: COMMAND_HELP[name] for name in names}
    prompt = f"\n>>> Turn {state.turn}  Propaganda: {phase} <<<\nCommand ({prompts.or_list(names + ['?'])}): "
    while True:
        name, param = prompts.ask_command(prompt, commands)
        if name == "done":
            return state
        state = _run_command(session, state, name, param)


def _run_command(session: Session, state: GameState, name: str, param: str | None) -> GameState:
    handlers: Dict[str, Callable[[], GameState]] = {
        "gov": lambda: _human_action(session, state),
        "bot": lambda: _apply(state, session.rules.bot_action(state)),
        "pivot": lambda: _human_pivot(session, state),
        "show": lambda: _show(session, state, param),
        "history": lambda: _history(session, state, param),
        "rollback": lambda: _rollback(session, state),
        "adjust": lambda: _adjust(session, state, param),
        "quit": lambda: _quit(state),
    }
    try:
        return handlers[name]()
    except Cancelled:
        print("\n>>>> Aborting the current action <<<<")
        print(render.SEPARATOR)
        return state
    except RulesError as exc:
        print(exc)
        return state
    except SaveLoadError as exc:
        LOGGER.error("Saved game access failed: %s", exc)
        print(f"Error reading saved game ({exc.path}): {exc}")
        return state
    except InvalidValue as exc:
        LOGGER.error("Saved game access failed: %s", exc)
        print(f"Error reading saved game: {exc}")
        return state


def _quit(state: GameState) -> GameState:
    if prompts.ask_yes_no("Really quit (y/n)? "):
        raise ExitGame()
    return state


def _human_action(session: Session, state: GameState) -> GameState:
    actions = session.rules.available_actions(state, Role.GOV)
    print("\nChoose one:")
    action: Action = prompts.ask_menu([(a, a.label) for a in actions])[0]
    return _apply(state, session.rules.take_action(state, Role.GOV, action))


def _human_pivot(session: Session, state: GameState) -> GameState:
    items = [(n, f"Play {session.rules.card_name(n)}") for n in sorted(state.gov_pivotal_playable)]
    choice = prompts.ask_menu(items + [(0, "Do not play a pivotal event")], allow_abort=False)[0]
    if choice == 0:
        return state
    return _apply(state, session.rules.play_pivotal(state, Role.GOV, choice))


# -- show / history / rollback ----------------------------------------------------


def _show(session: Session, state: GameState, param: str | None) -> GameState:
    options = _SHOW_OPTIONS + state.space_names
    choice = prompts.ask_one_of("Show: ", options, initial=param, allow_none=True, allow_abort=False)
    if choice is None:
        return state
    card = session.rules.card_name(state.current_card) if state.current_card else None
    sections = {
        "scenario": lambda: render.scenario_summary(state),
        "status": lambda: render.status_summary(state),
        "available": lambda: render.available_pieces_summary(state),
        "casualties": lambda: render.casualties_summary(state),
        "out of play": lambda: render.out_of_play_summary(state),
        "capabilities": lambda: render.event_summary(state),
        "sequence": lambda: render.sequence_summary(state, card),
    }
    if choice == "all":
        for build in sections.values():
            render.print_summary(build())
        for space_name in state.space_names:
            render.print_summary(render.space_summary(state, space_name))
    elif choice in sections:
        render.print_summary(sections[choice]())
    else:
        render.print_summary(render.space_summary(state, choice))
    return state


def _history(session: Session, state: GameState, param: str | None) -> GameState:
    entries = session.store.history(session.game_name)
    saved_len = sum(len(entry.lines) for entry in entries)
    if param is None:
        lines = state.history[saved_len:]
    elif param.strip().lower() == "all":
        lines = state.history
    else:
        try:
            number = int(param)
        except ValueError:
            print(f"'{param}' is not valid. Use a turn number, -n or all.")
            return state
        turn = state.turn + number if number < 0 else number
        if turn == state.turn:
            lines = state.history[saved_len:]
        else:
            lines = tuple(line for entry in entries if entry.key.turn == turn for line in entry.lines)
            if not lines:
                print(f"There is no saved log for turn {turn}.")
                return state
    render.print_summary(lines)
    return state


def _rollback(session: Session, state: GameState) -> GameState:
    completed = [turn for turn in session.store.completed_turns(session.game_name) if turn < state.turn]
    if not completed:
        print("There are no completed turns to roll back to.")
        return state
    starts = [str(turn + 1) for turn in completed]
    answer = prompts.ask_one_of(
        f"Roll back to the start of which turn ({prompts.or_list(starts)})? ", starts, allow_abort=True
    )
    assert answer is not None
    target = int(answer)
    if not prompts.ask_yes_no(f"Discard all plays from turn {target} onward (y/n)? "):
        return state
    try:
        restored = session.store.rollback(session.game_name, target - 1)
    except (SaveLoadError, InvalidValue) as exc:
        print(f"Rollback failed: {exc}")
        return state
    print(f"\nRolled back to the start of turn {target}")
    raise _RolledBack(restored)


# -- adjustments ----------------------------------------------------------------


def _adjust(session: Session, state: GameState, param: str | None) -> GameState:
    rules = session.rules
    options = _ADJUST_OPTIONS + state.space_names
    choice = prompts.ask_one_of(
        "[Adjust] (? for list): ", options, initial=param, allow_none=True, allow_abort=False
    )
    if choice is None:
        return state
    if choice in ("gov resources", "fln resources"):
        role = Role.GOV if choice == "gov resources" else Role.FLN
        value = prompts.ask_int(f"{role} resources is {state.resources[role]}.  New value", 0, EDGE_TRACK_MAX,
                                default=state.resources[role])
        return _apply(state, rules.adjust_resources(state, role, value))
    if choice == "commitment":
        value = prompts.ask_int(f"Commitment is {state.commitment}.  New value", 0, EDGE_TRACK_MAX,
                                default=state.commitment)
        return _apply(state, rules.adjust_commitment(state, value))
    if choice == "france track":
        letters = [entry.letter for entry in FRANCE_TRACK]
        letter = prompts.ask_one_of(f"France track is {state.france_track_entry.letter}.  New value: ", letters)
        assert letter is not None
        return _apply(state, rules.adjust_france_track(state, letters.index(letter)))
    if choice == "border zone":
        value = prompts.ask_int(f"Border zone track is {state.border_zone_track}.  New value", 0,
                                BORDER_ZONE_TRACK_MAX, default=state.border_zone_track)
        return _apply(state, rules.adjust_border_zone(state, value))
    if choice in ("casualties", "out of play"):
        box = state.casualties if choice == "casualties" else state.out_of_play
        piece_type = _ask_piece_type()
        current = box.num_of(piece_type)
        limit = current + _available(state, piece_type)
        value = prompts.ask_int(f"{piece_type.plural} in {choice}", 0, limit, default=current)
        if choice == "casualties":
            return _apply(state, rules.adjust_casualties(state, piece_type, value))
        return _apply(state, rules.adjust_out_of_play(state, piece_type, value))
    if choice == "capabilities":
        name = prompts.ask_one_of("Toggle which capability: ", ALL_CAPABILITIES)
        assert name is not None
        return _apply(state, rules.toggle_capability(state, name))
    if choice == "momentum":
        name = prompts.ask_one_of("Toggle which momentum event: ", ALL_MOMENTUM)
        assert name is not None
        return _apply(state, rules.toggle_momentum(state, name))
    if choice == "bot logging":
        return _apply(state, rules.toggle_bot_debug(state))
    if choice == "transfer resources":
        return _transfer_resources(session, state)
    return _adjust_space(session, state, choice)


def _transfer_resources(session: Session, state: GameState) -> GameState:
    label = prompts.ask_one_of("Transfer resources from: ", Role.labels())
    assert label is not None
    source = Role.from_label(label)
    amount = prompts.ask_int(f"Resources to transfer to {source.opposite}", 0, state.resources[source], default=0)
    return _apply(state, session.rules.transfer_resources(state, source, amount))


def _adjust_space(session: Session, state: GameState, space_name: str) -> GameState:
    rules = session.rules
    space = state.get_space(space_name)
    render.print_summary(render.space_summary(state, space_name))
    options = ["support", "pieces", "terror"]
    if space.is_city:
        options.append("plus 1 population")
    if space.is_sector and space.base_pop == 1:
        options.append("resettled")
    if space.is_country:
        options.append("plus 1 base")
    attribute = prompts.ask_one_of(f"[{space_name}] adjust: ", options)
    if attribute == "support":
        label = prompts.ask_one_of("New support level: ", SupportValue.labels())
        assert label is not None
        return _apply(state, rules.adjust_space_support(state, space_name, SupportValue.from_label(label)))
    if attribute == "pieces":
        piece_type = _ask_piece_type()
        current = space.pieces.num_of(piece_type)
        limit = rules.max_space_pieces(state, space_name, piece_type)
        if limit == 0:
            print(f"There are no {piece_type.plural} available to add to {space_name}.")
            return state
        value = prompts.ask_int(f"{piece_type.plural} in {space_name}", 0, limit, default=min(current, limit))
        return _apply(state, rules.adjust_space_pieces(state, space_name, piece_type, value))
    if attribute == "terror":
        value = prompts.ask_int(f"Terror markers in {space_name}", 0,
                                space.terror + state.terror_markers_available, default=space.terror)
        return _apply(state, rules.adjust_terror(state, space_name, value))
    if attribute == "plus 1 population":
        return _apply(state, rules.toggle_plus1_pop(state, space_name))
    if attribute == "plus 1 base":
        return _apply(state, rules.toggle_plus1_base(state, space_name))
    return _apply(state, rules.toggle_resettled(state, space_name))


def _ask_piece_type() -> PieceType:
    label = prompts.ask_one_of("Which pieces: ", PieceType.labels())
    assert label is not None
    return PieceType.from_label(label)


def _available(state: GameState, piece_type: PieceType) -> int:
    available = state.available_pieces
    if piece_type is PieceType.ACTIVE_GUERRILLAS:
        return available.hidden_guerrillas
    return available.num_of(piece_type)
