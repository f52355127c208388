import pytest

from coltwi.core.types import Action, Control, Role, SupportValue
from coltwi.domain.sequence import SequenceOfPlay
from tests.helpers.builders import make_state


def test_space_population_and_markers() -> None:
    state = make_state()
    barika = state.get_space("Barika")
    assert barika.terror == 1
    assert barika.population == 1
    assert barika.add_marker("Resettled").population == 0
    assert barika.add_marker("+1 Population").population == 2
    assert barika.name_and_zone == "Barika I-1"
    assert barika.wilaya == "I"


def test_space_control() -> None:
    state = make_state()
    assert state.get_space("Algiers").control is Control.GOV
    assert state.get_space("Barika").control is Control.FLN
    assert state.get_space("Morocco").control is Control.UNCONTROLLED


def test_remove_marker_keeps_other_entries() -> None:
    space = make_state().get_space("Barika").add_marker("Terror")
    assert space.terror == 2
    assert space.remove_marker("Terror").terror == 1
    assert space.remove_marker("Terror", 5).terror == 0


def test_space_support_values() -> None:
    algiers = make_state().get_space("Algiers")
    assert algiers.support_value == 3
    assert algiers.with_support(SupportValue.OPPOSE).oppose_value == 3


def test_sequence_defaults_to_fln_first() -> None:
    sequence = SequenceOfPlay()
    assert sequence.next_role is Role.FLN
    assert sequence.num_acted == 0
    assert Action.PASS in sequence.available_actions()


def test_sequence_second_actions_follow_first() -> None:
    sequence = SequenceOfPlay().next_action(Action.EVENT)
    assert sequence.next_role is Role.GOV
    assert sequence.available_actions() == [Action.OP_PLUS_ACTIVITY, Action.PASS]


def test_sequence_third_action_rejected() -> None:
    sequence = SequenceOfPlay().next_action(Action.PASS).next_action(Action.PASS)
    assert sequence.next_role is None
    with pytest.raises(ValueError):
        sequence.next_action(Action.PASS)
    with pytest.raises(ValueError):
        sequence.available_actions()


def test_reset_keeps_order_after_pass_or_event() -> None:
    sequence = SequenceOfPlay().next_action(Action.PASS).next_action(Action.OP_ONLY)
    assert sequence.reset() == SequenceOfPlay(Role.FLN, Role.GOV)


def test_reset_swaps_order_after_full_op() -> None:
    sequence = SequenceOfPlay().next_action(Action.OP_PLUS_ACTIVITY).next_action(Action.EVENT)
    assert sequence.reset() == SequenceOfPlay(Role.GOV, Role.FLN)


def test_reset_requires_two_actions() -> None:
    with pytest.raises(ValueError):
        SequenceOfPlay().next_action(Action.PASS).reset()
