"""Base repository implementation for JSON definition data."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Generic, TypeVar

from coltwi.core.types import E, InvalidValue
from coltwi.data import paths
from coltwi.data.errors import DataLoadError, DataValidationError
from coltwi.domain.pieces import Pieces

T = TypeVar("T")

# Keys accepted in a definition file's pieces mapping.
_PIECE_KEYS = {
    "frenchTroops": "french_troops",
    "frenchPolice": "french_police",
    "algerianTroops": "algerian_troops",
    "algerianPolice": "algerian_police",
    "hiddenGuerrillas": "hidden_guerrillas",
    "activeGuerrillas": "active_guerrillas",
    "govBases": "gov_bases",
    "flnBases": "fln_bases",
}


class RepositoryBase(Generic[T]):
    """Common caching and loading behavior for repositories."""

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._definitions: Dict[str, T] | None = None

    def _get_file_path(self) -> Path:
        definitions_dir = paths.get_definitions_path(self._base_path)
        return definitions_dir / self._filename

    def _load_raw(self) -> dict[str, object]:
        file_path = self._get_file_path()
        try:
            text = file_path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise DataLoadError(f"Definition file not found: {file_path}") from exc
        except OSError as exc:
            raise DataLoadError(f"Unable to read definition file: {file_path}") from exc
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DataLoadError(f"Invalid JSON in {file_path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise DataValidationError(f"Expected top-level object in {file_path}")
        return raw

    def _build(self, raw: dict[str, object]) -> Dict[str, T]:
        """Convert a raw dict into typed definitions."""
        raise NotImplementedError

    def _ensure_loaded(self) -> None:
        if self._definitions is None:
            raw = self._load_raw()
            self._definitions = self._build(raw)

    def get(self, def_id: str) -> T:
        """Return a definition by id."""
        self._ensure_loaded()
        assert self._definitions is not None
        try:
            return self._definitions[def_id]
        except KeyError as exc:
            raise KeyError(def_id) from exc

    def all(self) -> list[T]:
        """Return all definitions in file order."""
        self._ensure_loaded()
        assert self._definitions is not None
        return list(self._definitions.values())

    def ids(self) -> list[str]:
        self._ensure_loaded()
        assert self._definitions is not None
        return list(self._definitions.keys())

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DataValidationError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_bool(value: object, context: str) -> bool:
        if not isinstance(value, bool):
            raise DataValidationError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_label(enum_type: type[E], value: object, context: str) -> E:
        try:
            return enum_type.from_label(value)  # type: ignore[arg-type]
        except InvalidValue as exc:
            raise DataValidationError(f"{context}: {exc}") from exc

    def _require_pieces(self, value: object, context: str) -> Pieces:
        mapping = self._require_mapping(value, context)
        unknown = set(mapping) - set(_PIECE_KEYS)
        if unknown:
            raise DataValidationError(f"{context} has unknown piece keys: {sorted(unknown)}.")
        counts: dict[str, int] = {}
        for key, entry in mapping.items():
            count = self._require_int(entry, f"{context}.{key}")
            if count < 0:
                raise DataValidationError(f"{context}.{key} must be non-negative.")
            counts[_PIECE_KEYS[key]] = count
        return Pieces(**counts)
