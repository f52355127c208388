"""Sequence of play for the current card."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from coltwi.core.types import Action, Role

FIRST_ACTIONS: Tuple[Action, ...] = (
    Action.EVENT,
    Action.OP_PLUS_ACTIVITY,
    Action.OP_ONLY,
    Action.LIMITED_OP,
    Action.PASS,
)

# Actions open to the second eligible role, keyed by what the first role did.
SECOND_ACTIONS: Dict[Action, Tuple[Action, ...]] = {
    Action.PASS: FIRST_ACTIONS,
    Action.EVENT: (Action.OP_PLUS_ACTIVITY, Action.PASS),
    Action.OP_PLUS_ACTIVITY: (Action.EVENT, Action.LIMITED_OP, Action.PASS),
    Action.LIMITED_OP: (Action.OP_PLUS_ACTIVITY, Action.OP_ONLY, Action.PASS),
    Action.OP_ONLY: (Action.LIMITED_OP, Action.PASS),
}

_RETAIN_INITIATIVE = frozenset({Action.PASS, Action.EVENT, Action.LIMITED_OP})


@dataclass(frozen=True, slots=True)
class SequenceOfPlay:
    """Eligibility order and the actions committed on the current card."""

    first_eligible: Role = Role.FLN
    second_eligible: Role = Role.GOV
    first_action: Optional[Action] = None
    second_action: Optional[Action] = None

    @property
    def num_acted(self) -> int:
        return int(self.first_action is not None) + int(self.second_action is not None)

    @property
    def next_role(self) -> Role | None:
        if self.num_acted == 0:
            return self.first_eligible
        if self.num_acted == 1:
            return self.second_eligible
        return None

    def available_actions(self) -> List[Action]:
        if self.second_action is not None:
            raise ValueError("Both eligible roles have already acted on this card.")
        if self.first_action is None:
            return list(FIRST_ACTIONS)
        return list(SECOND_ACTIONS[self.first_action])

    def next_action(self, action: Action) -> "SequenceOfPlay":
        if self.num_acted == 0:
            return replace(self, first_action=action)
        if self.num_acted == 1:
            return replace(self, second_action=action)
        raise ValueError("Two actions have already occurred on the current card.")

    def reset(self) -> "SequenceOfPlay":
        """Return the sequence for the next card."""
        if self.first_action is None or self.second_action is None:
            raise ValueError("Cannot reset the sequence of play until two actions have occurred.")
        if self.first_action in _RETAIN_INITIATIVE:
            return SequenceOfPlay(self.first_eligible, self.second_eligible)
        return SequenceOfPlay(self.second_eligible, self.first_eligible)
