import pytest

from coltwi.core.types import Action, InvalidValue, PieceType, Role, SpaceType, SupportValue, amount_of


def test_from_label_round_trips_every_member() -> None:
    for enum_type in (Role, Action, SpaceType, SupportValue, PieceType):
        for member in enum_type:
            assert enum_type.from_label(member.label) is member


def test_from_label_ignores_case_and_whitespace() -> None:
    assert Role.from_label("  government ") is Role.GOV
    assert SupportValue.from_label("OPPOSE") is SupportValue.OPPOSE


def test_from_label_rejects_unknown_label() -> None:
    with pytest.raises(InvalidValue) as excinfo:
        Role.from_label("French")
    assert excinfo.value.label == "French"
    assert excinfo.value.type_name == "Role"


def test_from_label_rejects_non_string() -> None:
    with pytest.raises(InvalidValue):
        SpaceType.from_label(3)  # type: ignore[arg-type]


def test_role_opposite() -> None:
    assert Role.GOV.opposite is Role.FLN
    assert Role.FLN.opposite is Role.GOV


def test_piece_type_owner_and_names() -> None:
    assert PieceType.FLN_BASES.owner is Role.FLN
    assert PieceType.ALGERIAN_POLICE.owner is Role.GOV
    assert PieceType.FRENCH_TROOPS.singular == "French troop"
    assert PieceType.FRENCH_TROOPS.plural == "French troops"


def test_amount_of() -> None:
    assert amount_of(1, "turn") == "1 turn"
    assert amount_of(2, "turn") == "2 turns"
    assert amount_of(0, "police", "police") == "0 police"


def test_exact_from_label_requires_canonical_spelling() -> None:
    assert SupportValue.from_label("Oppose", exact=True) is SupportValue.OPPOSE
    for label in ("oppose", " Oppose", "OPPOSE"):
        with pytest.raises(InvalidValue):
            SupportValue.from_label(label, exact=True)
