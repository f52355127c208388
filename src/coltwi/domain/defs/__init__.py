"""Domain definition exports."""

from .card_def import CardDef
from .scenario_def import ScenarioDef, SpaceOverrideDef

__all__ = [
    "CardDef",
    "ScenarioDef",
    "SpaceOverrideDef",
]
