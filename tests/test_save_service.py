from __future__ import annotations

import json
import logging

import pytest

from coltwi.core.types import Action, InvalidValue, Role
from coltwi.domain.sequence import SequenceOfPlay
from coltwi.services.errors import DecodeError, DecodeErrorKind
from coltwi.services.save_service import SaveService
from tests.helpers.builders import make_state, new_game


def _payload() -> dict:
    return SaveService().serialize(make_state())


def _decode_payload(payload: dict):
    return SaveService().decode(json.dumps(payload))


def test_round_trip_preserves_state() -> None:
    service = SaveService()
    state = make_state(
        sequence=SequenceOfPlay(Role.GOV, Role.FLN, first_action=Action.OP_ONLY),
        coup_d_etat_played_once=True,
    )
    assert service.decode(service.encode(state)) == state


def test_round_trip_full_scenario_setup() -> None:
    service = SaveService()
    state = new_game("full")
    assert service.decode(service.encode(state)) == state


def test_encode_is_deterministic() -> None:
    service = SaveService()
    first = make_state(pivotal_cards_played=frozenset({66, 61, 64}))
    second = make_state(pivotal_cards_played=frozenset({64, 66, 61}))
    assert service.encode(first) == service.encode(second)
    assert json.loads(service.encode(first))["pivotalCardsPlayed"] == [61, 64, 66]


def test_encode_uses_stable_wire_names() -> None:
    payload = json.loads(SaveService().encode(make_state()))
    assert payload["params"]["scenarioName"] == "Test Scenario"
    assert payload["gov_resources"] == 10
    assert payload["spaces"][0]["spaceType"] == "City"
    assert payload["sequence"]["firstEligible"] == "FLN"
    assert payload["outOfPlay"]["frenchTroops"] == 2


def test_missing_top_level_field() -> None:
    payload = _payload()
    del payload["turn"]
    with pytest.raises(DecodeError) as excinfo:
        _decode_payload(payload)
    assert excinfo.value.kind is DecodeErrorKind.MISSING_FIELD
    assert excinfo.value.field == "turn"


def test_missing_nested_field_names_location() -> None:
    payload = _payload()
    del payload["spaces"][1]["pieces"]["flnBases"]
    with pytest.raises(DecodeError) as excinfo:
        _decode_payload(payload)
    assert excinfo.value.kind is DecodeErrorKind.MISSING_FIELD
    assert excinfo.value.field == "flnBases"
    assert excinfo.value.context == "spaces[1].pieces.flnBases"


def test_wrong_type_reports_type_mismatch() -> None:
    payload = _payload()
    payload["spaces"][0]["coastal"] = "yes"
    with pytest.raises(DecodeError) as excinfo:
        _decode_payload(payload)
    assert excinfo.value.kind is DecodeErrorKind.TYPE_MISMATCH
    assert excinfo.value.field == "coastal"
    assert "boolean" in (excinfo.value.expected or "")


def test_boolean_is_not_a_count() -> None:
    payload = _payload()
    payload["commitment"] = True
    with pytest.raises(DecodeError) as excinfo:
        _decode_payload(payload)
    assert excinfo.value.kind is DecodeErrorKind.TYPE_MISMATCH
    assert excinfo.value.field == "commitment"


def test_negative_count_is_type_mismatch() -> None:
    payload = _payload()
    payload["casualties"]["frenchTroops"] = -1
    with pytest.raises(DecodeError) as excinfo:
        _decode_payload(payload)
    assert excinfo.value.kind is DecodeErrorKind.TYPE_MISMATCH
    assert excinfo.value.field == "frenchTroops"


def test_null_optional_field_decodes_to_none() -> None:
    payload = _payload()
    payload["currentCard"] = None
    payload["previousCard"] = None
    state = _decode_payload(payload)
    assert state.current_card is None
    assert state.previous_card is None


def test_missing_optional_field_is_still_missing() -> None:
    payload = _payload()
    del payload["currentCard"]
    with pytest.raises(DecodeError) as excinfo:
        _decode_payload(payload)
    assert excinfo.value.kind is DecodeErrorKind.MISSING_FIELD
    assert excinfo.value.field == "currentCard"


def test_null_required_field_is_type_mismatch() -> None:
    payload = _payload()
    payload["turn"] = None
    with pytest.raises(DecodeError) as excinfo:
        _decode_payload(payload)
    assert excinfo.value.kind is DecodeErrorKind.TYPE_MISMATCH


def test_legacy_momentum_name_is_corrected(caplog) -> None:
    payload = _payload()
    payload["momentum"] = ["Dual: Hardend Attitudes", "Gov: Bananes"]
    with caplog.at_level(logging.INFO, logger="coltwi.services.save_service"):
        state = _decode_payload(payload)
    assert state.momentum == {"Dual: Hardened Attitudes", "Gov: Bananes"}
    assert "Hardend" in caplog.text


def test_legacy_momentum_fixup_is_idempotent() -> None:
    service = SaveService()
    payload = _payload()
    payload["momentum"] = ["Dual: Hardend Attitudes"]
    once = _decode_payload(payload)
    twice = service.decode(service.encode(once))
    assert twice.momentum == {"Dual: Hardened Attitudes"}
    assert "Hardend" not in service.encode(twice)


def test_unknown_momentum_is_invalid_value() -> None:
    payload = _payload()
    payload["momentum"] = ["Gov: Moonshot"]
    with pytest.raises(InvalidValue):
        _decode_payload(payload)


def test_unknown_capability_is_invalid_value() -> None:
    payload = _payload()
    payload["capabilities"] = ["FLN:Teleport"]
    with pytest.raises(InvalidValue):
        _decode_payload(payload)


def test_unknown_enum_label_is_invalid_value() -> None:
    payload = _payload()
    payload["spaces"][0]["support"] = "Ecstatic"
    with pytest.raises(InvalidValue):
        _decode_payload(payload)


def test_extra_keys_are_ignored() -> None:
    payload = _payload()
    payload["futureField"] = {"anything": 1}
    payload["spaces"][0]["note"] = "ignored"
    assert _decode_payload(payload) == make_state()


def test_duplicate_space_names_rejected() -> None:
    payload = _payload()
    payload["spaces"][1]["name"] = "Algiers"
    with pytest.raises(DecodeError) as excinfo:
        _decode_payload(payload)
    assert excinfo.value.field == "spaces"


def test_france_track_out_of_range() -> None:
    payload = _payload()
    payload["franceTrack"] = 6
    with pytest.raises(DecodeError) as excinfo:
        _decode_payload(payload)
    assert excinfo.value.field == "franceTrack"


def test_invalid_json_is_type_mismatch() -> None:
    with pytest.raises(DecodeError) as excinfo:
        SaveService().decode("{truncated")
    assert excinfo.value.kind is DecodeErrorKind.TYPE_MISMATCH


def test_top_level_must_be_object() -> None:
    with pytest.raises(DecodeError):
        SaveService().decode("[1, 2, 3]")


def test_stored_labels_must_be_canonical() -> None:
    payload = _payload()
    payload["spaces"][0]["support"] = " support "
    with pytest.raises(InvalidValue):
        _decode_payload(payload)
    payload["spaces"][0]["support"] = "support"
    with pytest.raises(InvalidValue):
        _decode_payload(payload)


def test_capabilities_and_momentum_are_sets() -> None:
    service = SaveService()
    payload = _payload()
    payload["capabilities"] = ["Gov:Napalm", "FLN:Scorch", "Gov:Napalm"]
    state = _decode_payload(payload)
    assert state.capabilities == frozenset({"Gov:Napalm", "FLN:Scorch"})
    assert json.loads(service.encode(state))["capabilities"] == ["FLN:Scorch", "Gov:Napalm"]


def test_encode_ignores_capability_order() -> None:
    service = SaveService()
    first = make_state(
        capabilities=frozenset({"Gov:Napalm", "FLN:Scorch"}),
        momentum=frozenset({"Gov: Bananes", "Dual: Hardened Attitudes"}),
    )
    second = make_state(
        capabilities=frozenset({"FLN:Scorch", "Gov:Napalm"}),
        momentum=frozenset({"Dual: Hardened Attitudes", "Gov: Bananes"}),
    )
    assert service.encode(first) == service.encode(second)
    assert json.loads(service.encode(first))["momentum"] == ["Dual: Hardened Attitudes", "Gov: Bananes"]
