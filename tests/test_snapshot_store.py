from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from coltwi.services.errors import DecodeError, DecodeErrorKind, SnapshotIOError, SnapshotNotFoundError
from coltwi.services import snapshot_store
from coltwi.services.snapshot_store import SnapshotKey, SnapshotStore, validate_game_name
from tests.helpers.builders import make_state


def _play_turns(store: SnapshotStore, game: str, last_turn: int):
    """Save one completion snapshot per turn, each adding a log line."""
    state = make_state(turn=0, history=("setup",))
    store.save(game, state)
    states = [state]
    for turn in range(1, last_turn + 1):
        state = replace(state.append_history([f"turn {turn}"]), turn=turn)
        store.save(game, state)
        states.append(state)
    return states


def test_snapshot_key_filenames_and_order() -> None:
    keys = [SnapshotKey(2), SnapshotKey(2, 3), SnapshotKey(1), SnapshotKey(2, 1), SnapshotKey(10)]
    ordered = sorted(keys, key=lambda key: key.sort_key)
    assert ordered == [SnapshotKey(1), SnapshotKey(2, 1), SnapshotKey(2, 3), SnapshotKey(2), SnapshotKey(10)]
    assert SnapshotKey(7).filename == "turn-007.json"
    assert SnapshotKey(7, 2).filename == "turn-007-round-2.json"
    assert SnapshotKey.from_filename("turn-007-round-2.json") == SnapshotKey(7, 2)
    assert SnapshotKey.from_filename("notes.txt") is None


def test_save_then_load_latest(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    states = _play_turns(store, "game", 3)
    assert store.load_latest("game") == states[-1]
    assert store.completed_turns("game") == [0, 1, 2, 3]
    assert not list((tmp_path / "game").glob("*.tmp"))


def test_list_games_sorted_and_skips_empty_dirs(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    _play_turns(store, "beta", 0)
    _play_turns(store, "Alpha", 0)
    (tmp_path / "empty").mkdir()
    assert store.list_games() == ["Alpha", "beta"]


def test_list_games_without_base_dir(tmp_path: Path) -> None:
    assert SnapshotStore(tmp_path / "missing").list_games() == []


def test_load_latest_unknown_game(tmp_path: Path) -> None:
    with pytest.raises(SnapshotNotFoundError):
        SnapshotStore(tmp_path).load_latest("nobody")


def test_round_snapshots_sort_before_turn_completion(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    state = make_state(turn=4)
    store.save("game", state, round_number=2)
    store.save("game", state, round_number=1)
    assert store.latest_key("game") == SnapshotKey(4, 2)
    store.save("game", state)
    assert store.snapshot_keys("game") == [SnapshotKey(4, 1), SnapshotKey(4, 2), SnapshotKey(4)]
    assert store.completed_turns("game") == [4]


def test_rollback_restores_state_and_removes_later_snapshots(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    states = _play_turns(store, "game", 5)
    store.save("game", states[5].append_history(["prop"]), round_number=1)

    restored = store.rollback("game", 2)

    assert restored == states[2]
    assert store.load_latest("game") == states[2]
    assert store.completed_turns("game") == [0, 1, 2]
    assert sorted(path.name for path in (tmp_path / "game").iterdir()) == [
        "turn-000.json",
        "turn-001.json",
        "turn-002.json",
    ]


def test_rollback_to_missing_turn_changes_nothing(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    _play_turns(store, "game", 2)
    with pytest.raises(SnapshotNotFoundError):
        store.rollback("game", 7)
    assert store.completed_turns("game") == [0, 1, 2]


def test_rollback_with_corrupt_target_changes_nothing(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    _play_turns(store, "game", 3)
    (tmp_path / "game" / "turn-001.json").write_text("{}", encoding="utf-8")
    with pytest.raises(DecodeError):
        store.rollback("game", 1)
    assert store.completed_turns("game") == [0, 1, 2, 3]


def test_history_reports_lines_added_per_snapshot(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    _play_turns(store, "game", 3)
    entries = store.history("game")
    assert [entry.key for entry in entries] == [SnapshotKey(0), SnapshotKey(1), SnapshotKey(2), SnapshotKey(3)]
    assert entries[0].lines == ("setup",)
    assert entries[2].lines == ("turn 2",)


def test_history_after_rollback_is_truncated(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    _play_turns(store, "game", 4)
    store.rollback("game", 1)
    entries = store.history("game")
    assert [entry.key.turn for entry in entries] == [0, 1]
    assert all("turn 3" not in entry.lines for entry in entries)


def test_describe_game(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    _play_turns(store, "game", 2)
    description = store.describe_game("game")
    assert description.turns_completed == 2
    assert str(description) == "Test Scenario, 2 turns completed"


def test_corrupt_snapshot_reports_path_and_field(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    _play_turns(store, "game", 1)
    path = tmp_path / "game" / "turn-001.json"
    path.write_text(path.read_text(encoding="utf-8").replace('"turn": 1', '"turn": "one"'), encoding="utf-8")
    with pytest.raises(DecodeError) as excinfo:
        store.load_latest("game")
    assert excinfo.value.path == path
    assert excinfo.value.kind is DecodeErrorKind.TYPE_MISMATCH
    assert excinfo.value.field == "turn"


def test_save_failure_raises_io_error(tmp_path: Path, monkeypatch) -> None:
    store = SnapshotStore(tmp_path)

    def _fail(*_args, **_kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(snapshot_store.os, "fsync", _fail)
    with pytest.raises(SnapshotIOError) as excinfo:
        store.save("game", make_state())
    assert excinfo.value.path == tmp_path / "game" / "turn-003.json"
    assert not excinfo.value.path.exists()


def test_save_syncs_before_replacing(tmp_path: Path, monkeypatch) -> None:
    calls = []
    real_fsync = snapshot_store.os.fsync
    real_replace = snapshot_store.os.replace

    def _fsync(fd):
        calls.append("fsync")
        real_fsync(fd)

    def _replace(src, dst):
        calls.append("replace")
        real_replace(src, dst)

    monkeypatch.setattr(snapshot_store.os, "fsync", _fsync)
    monkeypatch.setattr(snapshot_store.os, "replace", _replace)
    SnapshotStore(tmp_path).save("game", make_state())
    assert calls == ["fsync", "replace"]


def test_list_games_skips_directories_that_are_not_game_names(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    store.save("kept", make_state())
    for bad in ("what?", " padded"):
        (tmp_path / bad).mkdir()
        (tmp_path / bad / "turn-000.json").write_text("{}", encoding="utf-8")
    assert store.list_games() == ["kept"]


def test_delete_game(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    _play_turns(store, "game", 1)
    store.delete_game("game")
    assert store.list_games() == []
    assert not (tmp_path / "game").exists()


@pytest.mark.parametrize("name", ["", "   ", "..", "a/b", "what?"])
def test_validate_game_name_rejects(name: str) -> None:
    with pytest.raises(ValueError):
        validate_game_name(name)


def test_validate_game_name_strips() -> None:
    assert validate_game_name("  My Game ") == "My Game"
