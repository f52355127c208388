import json
from pathlib import Path

from coltwi.presentation.cli import config


def test_load_config_defaults_when_missing(tmp_path: Path) -> None:
    assert config.load_config(tmp_path / "missing.json") == config.default_config()


def test_load_config_defaults_when_corrupt(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{oops", encoding="utf-8")
    assert config.load_config(path) == config.default_config()


def test_load_config_normalizes_values(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"log_level": "debug", "confirm_abort": "sure"}), encoding="utf-8")
    loaded = config.load_config(path)
    assert loaded["log_level"] == "DEBUG"
    assert loaded["confirm_abort"] is True


def test_save_config_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    config.save_config({"log_level": "INFO", "confirm_abort": False}, path)
    assert config.load_config(path) == {"log_level": "INFO", "confirm_abort": False}


def test_save_dir_override(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("COLTWI_SAVE_DIR", str(tmp_path))
    assert config.get_save_dir() == tmp_path


def test_save_dir_default(monkeypatch) -> None:
    monkeypatch.delenv("COLTWI_SAVE_DIR", raising=False)
    assert config.get_save_dir() == config.get_user_data_dir() / "games"


def test_debug_enabled_only_for_one(monkeypatch) -> None:
    monkeypatch.setenv("COLTWI_DEBUG", "true")
    assert config.debug_enabled() is False
    monkeypatch.setenv("COLTWI_DEBUG", "1")
    assert config.debug_enabled() is True
