"""Domain models for the game state."""

from .pieces import Pieces
from .sequence import SequenceOfPlay
from .space import Space
from .state import GameParameters, GameState, Resources

__all__ = [
    "GameParameters",
    "GameState",
    "Pieces",
    "Resources",
    "SequenceOfPlay",
    "Space",
]
