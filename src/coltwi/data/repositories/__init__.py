"""Repository exports."""

from .cards_repo import CardsRepository
from .scenarios_repo import ScenariosRepository
from .spaces_repo import SpacesRepository

__all__ = [
    "CardsRepository",
    "ScenariosRepository",
    "SpacesRepository",
]
