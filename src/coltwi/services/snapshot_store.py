"""File-system storage for per-turn game snapshots."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from coltwi.domain.state import GameState
from coltwi.services.errors import DecodeError, SnapshotIOError, SnapshotNotFoundError
from coltwi.services.save_service import SaveService

LOGGER = logging.getLogger(__name__)

_SNAPSHOT_RE = re.compile(r"^turn-(?P<turn>\d+)(?:-round-(?P<round>\d+))?\.json$")
_INVALID_NAME_CHARS = re.compile(r"[\\/:*?\"<>|]")


@dataclass(frozen=True, slots=True)
class SnapshotKey:
    """Identifies one snapshot file within a game directory.

    ``round_number`` is set for snapshots taken between the phases of a
    Propaganda round; such snapshots belong to ``turn`` and sort before the
    snapshot that completes it.
    """

    turn: int
    round_number: Optional[int] = None

    @property
    def is_turn_complete(self) -> bool:
        return self.round_number is None

    @property
    def sort_key(self) -> Tuple[int, int, int]:
        if self.round_number is None:
            return (self.turn, 1, 0)
        return (self.turn, 0, self.round_number)

    @property
    def filename(self) -> str:
        if self.round_number is None:
            return f"turn-{self.turn:03d}.json"
        return f"turn-{self.turn:03d}-round-{self.round_number}.json"

    @classmethod
    def from_filename(cls, filename: str) -> "SnapshotKey | None":
        match = _SNAPSHOT_RE.match(filename)
        if match is None:
            return None
        round_number = match.group("round")
        return cls(int(match.group("turn")), None if round_number is None else int(round_number))

    def __str__(self) -> str:
        if self.round_number is None:
            return f"turn {self.turn}"
        return f"turn {self.turn}, round {self.round_number}"


@dataclass(frozen=True, slots=True)
class TurnHistory:
    """Log lines that were added between one snapshot and the previous one."""

    key: SnapshotKey
    lines: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class GameDescription:
    """Summary used when listing saved games."""

    name: str
    scenario_name: str
    turns_completed: int

    def __str__(self) -> str:
        turns = "1 turn" if self.turns_completed == 1 else f"{self.turns_completed} turns"
        return f"{self.scenario_name}, {turns} completed"


class SnapshotStore:
    """One directory per game, one JSON snapshot per completed turn or round.

    The store is the only component that writes game files. It assumes a
    single running session per game directory and does no locking.
    """

    def __init__(self, base_dir: Path | str, *, save_service: SaveService | None = None) -> None:
        self._base_dir = Path(base_dir)
        self._save_service = save_service or SaveService()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    # -- queries --------------------------------------------------------------

    def list_games(self) -> List[str]:
        """Return the names of games that have at least one snapshot, sorted."""
        if not self._base_dir.is_dir():
            return []
        try:
            entries = list(self._base_dir.iterdir())
        except OSError as exc:
            raise SnapshotIOError(f"Unable to list saved games: {exc}", path=self._base_dir) from exc
        names = [
            entry.name
            for entry in entries
            if entry.is_dir() and _is_game_name(entry.name) and self._scan(entry)
        ]
        return sorted(names, key=str.lower)

    def game_exists(self, game_name: str) -> bool:
        return bool(self._scan(self.game_dir(game_name)))

    def snapshot_keys(self, game_name: str) -> List[SnapshotKey]:
        """Return every snapshot key for ``game_name`` in play order."""
        return self._scan(self.game_dir(game_name))

    def latest_key(self, game_name: str) -> SnapshotKey:
        keys = self.snapshot_keys(game_name)
        if not keys:
            raise SnapshotNotFoundError(f"No saved game named '{game_name}'.", path=self.game_dir(game_name))
        return keys[-1]

    def completed_turns(self, game_name: str) -> List[int]:
        """Turns that have a completion snapshot; valid rollback targets."""
        return [key.turn for key in self.snapshot_keys(game_name) if key.is_turn_complete]

    def snapshot_path(self, game_name: str, key: SnapshotKey) -> Path:
        return self.game_dir(game_name) / key.filename

    def game_dir(self, game_name: str) -> Path:
        return self._base_dir / validate_game_name(game_name)

    # -- load -----------------------------------------------------------------

    def load(self, game_name: str, key: SnapshotKey) -> GameState:
        """Read and decode one snapshot.

        Raises :class:`SnapshotNotFoundError`, :class:`SnapshotIOError` or
        :class:`DecodeError`; the latter two carry the snapshot path.
        """
        path = self.snapshot_path(game_name, key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise SnapshotNotFoundError(f"No snapshot for {key} of '{game_name}'.", path=path) from exc
        except OSError as exc:
            raise SnapshotIOError(f"Unable to read saved game: {exc}", path=path) from exc
        try:
            return self._save_service.decode(text)
        except DecodeError as exc:
            raise exc.with_path(path) from exc

    def load_latest(self, game_name: str) -> GameState:
        """Resume from the most recent snapshot."""
        key = self.latest_key(game_name)
        LOGGER.info("Loading %s of game '%s'", key, game_name)
        return self.load(game_name, key)

    def describe_game(self, game_name: str) -> GameDescription:
        state = self.load_latest(game_name)
        return GameDescription(
            name=game_name,
            scenario_name=state.params.scenario_name,
            turns_completed=max(self.completed_turns(game_name), default=0),
        )

    def history(self, game_name: str) -> List[TurnHistory]:
        """Return the log lines each snapshot added, in play order.

        Nothing on disk is changed.
        """
        entries: List[TurnHistory] = []
        previous: Tuple[str, ...] = ()
        for key in self.snapshot_keys(game_name):
            current = self.load(game_name, key).history
            if current[: len(previous)] == previous:
                added = current[len(previous):]
            else:
                added = current
            entries.append(TurnHistory(key=key, lines=added))
            previous = current
        return entries

    # -- write ----------------------------------------------------------------

    def save(self, game_name: str, state: GameState, *, round_number: int | None = None) -> Path:
        """Write ``state`` as the snapshot for its turn (and round, if given).

        The file is written under a temporary name, flushed to disk and then
        moved into place, so an interrupted write never leaves a truncated
        snapshot.
        """
        key = SnapshotKey(state.turn, round_number)
        game_dir = self.game_dir(game_name)
        path = game_dir / key.filename
        text = self._save_service.encode(state)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            game_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, path)
        except OSError as exc:
            raise SnapshotIOError(f"Unable to write saved game: {exc}", path=path) from exc
        LOGGER.info("Saved %s of game '%s' to %s", key, game_name, path)
        return path

    def rollback(self, game_name: str, target_turn: int) -> GameState:
        """Restore the snapshot that completed ``target_turn``.

        The target is loaded before anything is deleted. Later snapshots are
        then removed newest first, so an interrupted rollback still leaves
        the newest remaining file as a loadable latest.
        """
        target = SnapshotKey(target_turn)
        keys = self.snapshot_keys(game_name)
        if target not in keys:
            raise SnapshotNotFoundError(
                f"Game '{game_name}' has no saved state for the end of turn {target_turn}.",
                path=self.snapshot_path(game_name, target),
            )
        state = self.load(game_name, target)
        later = [key for key in keys if key.sort_key > target.sort_key]
        for key in reversed(later):
            self._delete(game_name, key)
        LOGGER.info("Rolled back game '%s' to %s (%d later snapshots removed)", game_name, target, len(later))
        return state

    def delete_game(self, game_name: str) -> None:
        game_dir = self.game_dir(game_name)
        for key in reversed(self._scan(game_dir)):
            self._delete(game_name, key)
        try:
            game_dir.rmdir()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise SnapshotIOError(f"Unable to remove game directory: {exc}", path=game_dir) from exc

    # -- internals ------------------------------------------------------------

    def _delete(self, game_name: str, key: SnapshotKey) -> None:
        path = self.snapshot_path(game_name, key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise SnapshotIOError(f"Unable to delete snapshot: {exc}", path=path) from exc
        LOGGER.info("Deleted %s of game '%s'", key, game_name)

    @staticmethod
    def _scan(game_dir: Path) -> List[SnapshotKey]:
        if not game_dir.is_dir():
            return []
        try:
            filenames = [entry.name for entry in game_dir.iterdir() if entry.is_file()]
        except OSError as exc:
            raise SnapshotIOError(f"Unable to list snapshots: {exc}", path=game_dir) from exc
        keys = [key for key in map(SnapshotKey.from_filename, filenames) if key is not None]
        return sorted(keys, key=lambda key: key.sort_key)


def validate_game_name(name: str) -> str:
    """Return ``name`` stripped, or raise ValueError if it cannot be a directory name."""
    cleaned = name.strip()
    if not cleaned or cleaned in {".", ".."}:
        raise ValueError("Game name must not be empty.")
    if _INVALID_NAME_CHARS.search(cleaned):
        raise ValueError('Game name must not contain any of \\ / : * ? " < > |')
    return cleaned


def _is_game_name(name: str) -> bool:
    try:
        return validate_game_name(name) == name
    except ValueError:
        return False


__all__ = [
    "GameDescription",
    "SnapshotKey",
    "SnapshotStore",
    "TurnHistory",
    "validate_game_name",
]
