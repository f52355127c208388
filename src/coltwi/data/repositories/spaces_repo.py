"""Repository for the default (empty) map spaces."""
from __future__ import annotations

from typing import Dict

from coltwi.core.types import SpaceType, Terrain
from coltwi.data.errors import DataValidationError
from coltwi.data.repositories.base import RepositoryBase
from coltwi.domain.space import Space


class SpacesRepository(RepositoryBase[Space]):
    """Loads the board spaces in their empty, neutral starting form."""

    def __init__(self, base_path=None) -> None:
        super().__init__("spaces.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, Space]:
        spaces: Dict[str, Space] = {}
        for name, payload in raw.items():
            if not name.strip():
                raise DataValidationError("space name must be a non-empty string.")
            mapping = self._require_mapping(payload, f"space '{name}'")
            space_type = self._require_label(SpaceType, mapping.get("type"), f"space '{name}' type")
            terrain = self._require_label(Terrain, mapping.get("terrain"), f"space '{name}' terrain")
            zone = self._require_str(mapping.get("zone"), f"space '{name}' zone")
            if (zone == "") != (space_type is SpaceType.COUNTRY):
                raise DataValidationError(f"space '{name}' zone is blank only for countries.")
            population = self._require_int(mapping.get("population"), f"space '{name}' population")
            if population < 0:
                raise DataValidationError(f"space '{name}' population must be >= 0.")
            coastal = self._require_bool(mapping.get("coastal", False), f"space '{name}' coastal")
            spaces[name] = Space(
                name=name,
                space_type=space_type,
                zone=zone,
                terrain=terrain,
                base_pop=population,
                coastal=coastal,
            )
        if not spaces:
            raise DataValidationError("spaces.json defines no spaces.")
        return spaces
