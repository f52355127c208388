"""Repository for event card titles."""
from __future__ import annotations

from typing import Dict

from coltwi.data.errors import DataValidationError
from coltwi.data.repositories.base import RepositoryBase
from coltwi.domain.cards import CARD_NUMBERS
from coltwi.domain.defs import CardDef


class CardsRepository(RepositoryBase[CardDef]):
    """Loads the deck, keyed by the card number as a string."""

    def __init__(self, base_path=None) -> None:
        super().__init__("cards.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, CardDef]:
        cards: Dict[str, CardDef] = {}
        for key, payload in raw.items():
            try:
                number = int(key)
            except ValueError as exc:
                raise DataValidationError(f"card key '{key}' must be a card number.") from exc
            if number not in CARD_NUMBERS:
                raise DataValidationError(f"card number {number} is outside the deck.")
            mapping = self._require_mapping(payload, f"card {number}")
            name = self._require_str(mapping.get("name"), f"card {number} name")
            dual = self._require_bool(mapping.get("dual", False), f"card {number} dual")
            cards[str(number)] = CardDef(number=number, name=name, dual=dual)
        missing = [n for n in CARD_NUMBERS if str(n) not in cards]
        if missing:
            raise DataValidationError(f"cards.json is missing card numbers {missing}.")
        return cards

    def get_card(self, number: int) -> CardDef:
        return self.get(str(number))

    def is_valid_card_number(self, number: int) -> bool:
        self._ensure_loaded()
        assert self._definitions is not None
        return str(number) in self._definitions
