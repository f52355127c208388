import pytest

from coltwi.core.types import PieceType
from coltwi.domain.pieces import Pieces


def test_negative_count_rejected() -> None:
    with pytest.raises(ValueError):
        Pieces(french_troops=-1)


def test_non_integer_count_rejected() -> None:
    with pytest.raises(TypeError):
        Pieces(gov_bases=True)


def test_totals() -> None:
    pieces = Pieces(french_troops=1, algerian_police=2, hidden_guerrillas=3, active_guerrillas=1, fln_bases=1)
    assert pieces.total_cubes == 3
    assert pieces.total_guerrillas == 4
    assert pieces.total_fln == 5
    assert pieces.total == 8


def test_set_returns_new_value_and_leaves_original() -> None:
    original = Pieces(french_police=2)
    updated = original.set(5, PieceType.FRENCH_POLICE)
    assert updated.french_police == 5
    assert original.french_police == 2


def test_add_and_subtract() -> None:
    total = Pieces(french_troops=1) + Pieces(french_troops=2, fln_bases=1)
    assert total == Pieces(french_troops=3, fln_bases=1)
    assert total - Pieces(french_troops=5) == Pieces(fln_bases=1)


def test_hide_guerrillas() -> None:
    pieces = Pieces(hidden_guerrillas=1, active_guerrillas=2)
    assert pieces.hide_guerrillas(2) == Pieces(hidden_guerrillas=3)
    with pytest.raises(ValueError):
        Pieces(hidden_guerrillas=3).hide_guerrillas(1)


def test_string_form() -> None:
    assert str(Pieces()) == "none"
    assert str(Pieces(french_troops=1, fln_bases=2)) == "1 French troop, 2 FLN Bases"
