"""Serialization helpers for saved game snapshots."""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, TypeVar

from coltwi.core.types import Action, InvalidValue, LabelledEnum, Role, SpaceType, SupportValue, Terrain
from coltwi.domain.events import ALL_CAPABILITIES, ALL_MOMENTUM, fix_momentum_name
from coltwi.domain.pieces import Pieces
from coltwi.domain.sequence import SequenceOfPlay
from coltwi.domain.space import Space
from coltwi.domain.state import FRANCE_TRACK_MAX, GameParameters, GameState, Resources
from coltwi.services.errors import DecodeError, DecodeErrorKind

LOGGER = logging.getLogger(__name__)

SavePayload = Dict[str, Any]
E = TypeVar("E", bound=LabelledEnum)
T = TypeVar("T")

# Wire key -> Pieces attribute. The wire names are kept stable across releases.
_PIECES_KEYS = (
    ("frenchTroops", "french_troops"),
    ("frenchPolice", "french_police"),
    ("algerianTroops", "algerian_troops"),
    ("algerianPolice", "algerian_police"),
    ("hiddenGuerrillas", "hidden_guerrillas"),
    ("activeGuerrillas", "active_guerrillas"),
    ("govBases", "gov_bases"),
    ("flnBases", "fln_bases"),
)


class SaveService:
    """Converts a GameState to and from its JSON snapshot document.

    Encoding is deterministic: keys are sorted and set-valued fields are
    written in ascending order, so equal states always produce equal text.
    Decoding validates every level of the document and raises
    :class:`DecodeError` naming the offending field.
    """

    def encode(self, state: GameState) -> str:
        """Return the snapshot text for ``state``."""
        return json.dumps(self.serialize(state), indent=2, sort_keys=True) + "\n"

    def decode(self, text: str) -> GameState:
        """Parse snapshot text back into a GameState."""
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DecodeError(
                DecodeErrorKind.TYPE_MISMATCH, "<document>", expected=f"valid JSON ({exc.msg})"
            ) from exc
        return self.deserialize(payload)

    # -- encode ---------------------------------------------------------------

    def serialize(self, state: GameState) -> SavePayload:
        """Return a JSON-serializable payload for disk persistence."""
        return {
            "params": {
                "scenarioName": state.params.scenario_name,
                "finalPropSupport": state.params.final_prop_support,
                "botDebug": state.params.bot_debug,
            },
            "turn": state.turn,
            "numberOfPropCards": state.number_of_prop_cards,
            "spaces": [self._serialize_space(space) for space in state.spaces],
            "franceTrack": state.france_track,
            "borderZoneTrack": state.border_zone_track,
            "commitment": state.commitment,
            "gov_resources": state.resources.gov,
            "fln_resources": state.resources.fln,
            "outOfPlay": self._serialize_pieces(state.out_of_play),
            "casualties": self._serialize_pieces(state.casualties),
            "sequence": {
                "firstEligible": state.sequence.first_eligible.label,
                "secondEligible": state.sequence.second_eligible.label,
                "firstAction": _label_or_none(state.sequence.first_action),
                "secondAction": _label_or_none(state.sequence.second_action),
            },
            "capabilities": sorted(state.capabilities),
            "momentum": sorted(state.momentum),
            "currentCard": state.current_card,
            "previousCard": state.previous_card,
            "propCardsPlayed": state.prop_cards_played,
            "pivotalCardsPlayed": sorted(state.pivotal_cards_played),
            "coupdEtatPlayedOnce": state.coup_d_etat_played_once,
            "recallDeGaulleCancelled": state.recall_de_gaulle_cancelled,
            "history": list(state.history),
        }

    def _serialize_space(self, space: Space) -> SavePayload:
        return {
            "name": space.name,
            "spaceType": space.space_type.label,
            "zone": space.zone,
            "terrain": space.terrain.label,
            "basePop": space.base_pop,
            "coastal": space.coastal,
            "support": space.support.label,
            "pieces": self._serialize_pieces(space.pieces),
            "markers": list(space.markers),
        }

    @staticmethod
    def _serialize_pieces(pieces: Pieces) -> Dict[str, int]:
        return {key: getattr(pieces, attr) for key, attr in _PIECES_KEYS}

    # -- decode ---------------------------------------------------------------

    def deserialize(self, payload: Any) -> GameState:
        """Rebuild a GameState from a parsed snapshot document."""
        top = self._require_dict(payload, "<document>", "<document>")

        params = self._require_dict(_field(top, "params", ""), "params", "params")
        game_params = GameParameters(
            scenario_name=self._require_str(_field(params, "scenarioName", "params."), "params.scenarioName"),
            final_prop_support=self._require_bool(
                _field(params, "finalPropSupport", "params."), "params.finalPropSupport"
            ),
            bot_debug=self._require_bool(_field(params, "botDebug", "params."), "params.botDebug"),
        )

        spaces_raw = self._require_list(_field(top, "spaces", ""), "spaces")
        spaces = tuple(
            self._coerce_space(entry, f"spaces[{index}]") for index, entry in enumerate(spaces_raw)
        )
        names = [space.name for space in spaces]
        if len(set(names)) != len(names):
            raise DecodeError(
                DecodeErrorKind.TYPE_MISMATCH, "spaces", expected="a list with unique space names"
            )

        france_track = self._require_non_negative_int(_field(top, "franceTrack", ""), "franceTrack")
        if france_track > FRANCE_TRACK_MAX:
            raise DecodeError(
                DecodeErrorKind.TYPE_MISMATCH,
                "franceTrack",
                expected=f"an integer between 0 and {FRANCE_TRACK_MAX}",
            )

        momentum = self._coerce_momentum(_field(top, "momentum", ""))
        capabilities = self._coerce_capabilities(_field(top, "capabilities", ""))

        pivotal = frozenset(
            self._require_non_negative_int(number, f"pivotalCardsPlayed[{index}]")
            for index, number in enumerate(
                self._require_list(_field(top, "pivotalCardsPlayed", ""), "pivotalCardsPlayed")
            )
        )

        return GameState(
            params=game_params,
            turn=self._require_non_negative_int(_field(top, "turn", ""), "turn"),
            spaces=spaces,
            number_of_prop_cards=self._require_non_negative_int(
                _field(top, "numberOfPropCards", ""), "numberOfPropCards"
            ),
            france_track=france_track,
            border_zone_track=self._require_non_negative_int(
                _field(top, "borderZoneTrack", ""), "borderZoneTrack"
            ),
            commitment=self._require_non_negative_int(_field(top, "commitment", ""), "commitment"),
            resources=Resources(
                gov=self._require_non_negative_int(_field(top, "gov_resources", ""), "gov_resources"),
                fln=self._require_non_negative_int(_field(top, "fln_resources", ""), "fln_resources"),
            ),
            out_of_play=self._coerce_pieces(_field(top, "outOfPlay", ""), "outOfPlay"),
            casualties=self._coerce_pieces(_field(top, "casualties", ""), "casualties"),
            sequence=self._coerce_sequence(_field(top, "sequence", "")),
            capabilities=capabilities,
            momentum=momentum,
            current_card=self._coerce_optional(
                _field(top, "currentCard", ""), "currentCard", self._require_non_negative_int
            ),
            previous_card=self._coerce_optional(
                _field(top, "previousCard", ""), "previousCard", self._require_non_negative_int
            ),
            prop_cards_played=self._require_non_negative_int(
                _field(top, "propCardsPlayed", ""), "propCardsPlayed"
            ),
            pivotal_cards_played=pivotal,
            coup_d_etat_played_once=self._require_bool(
                _field(top, "coupdEtatPlayedOnce", ""), "coupdEtatPlayedOnce"
            ),
            recall_de_gaulle_cancelled=self._require_bool(
                _field(top, "recallDeGaulleCancelled", ""), "recallDeGaulleCancelled"
            ),
            history=tuple(
                self._require_str(line, f"history[{index}]")
                for index, line in enumerate(self._require_list(_field(top, "history", ""), "history"))
            ),
        )

    def _coerce_space(self, value: Any, context: str) -> Space:
        data = self._require_dict(value, context, context)
        prefix = f"{context}."
        markers = tuple(
            self._require_str(marker, f"{prefix}markers[{index}]")
            for index, marker in enumerate(
                self._require_list(_field(data, "markers", prefix), f"{prefix}markers")
            )
        )
        return Space(
            name=self._require_str(_field(data, "name", prefix), f"{prefix}name"),
            space_type=self._require_label(SpaceType, _field(data, "spaceType", prefix), f"{prefix}spaceType"),
            zone=self._require_str(_field(data, "zone", prefix), f"{prefix}zone"),
            terrain=self._require_label(Terrain, _field(data, "terrain", prefix), f"{prefix}terrain"),
            base_pop=self._require_non_negative_int(_field(data, "basePop", prefix), f"{prefix}basePop"),
            coastal=self._require_bool(_field(data, "coastal", prefix), f"{prefix}coastal"),
            support=self._require_label(SupportValue, _field(data, "support", prefix), f"{prefix}support"),
            pieces=self._coerce_pieces(_field(data, "pieces", prefix), f"{prefix}pieces"),
            markers=markers,
        )

    def _coerce_capabilities(self, value: Any) -> FrozenSet[str]:
        return frozenset(
            self._require_known_name(self._require_str(raw, f"capabilities[{index}]"), ALL_CAPABILITIES, "capability")
            for index, raw in enumerate(self._require_list(value, "capabilities"))
        )

    def _coerce_momentum(self, value: Any) -> FrozenSet[str]:
        names = []
        for index, raw in enumerate(self._require_list(value, "momentum")):
            name = self._require_str(raw, f"momentum[{index}]")
            fixed = fix_momentum_name(name)
            if fixed != name:
                LOGGER.info("Corrected legacy momentum name %r to %r", name, fixed)
            names.append(self._require_known_name(fixed, ALL_MOMENTUM, "momentum"))
        return frozenset(names)

    def _coerce_pieces(self, value: Any, context: str) -> Pieces:
        data = self._require_dict(value, context, context)
        prefix = f"{context}."
        counts = {
            attr: self._require_non_negative_int(_field(data, key, prefix), f"{prefix}{key}")
            for key, attr in _PIECES_KEYS
        }
        return Pieces(**counts)

    def _coerce_sequence(self, value: Any) -> SequenceOfPlay:
        data = self._require_dict(value, "sequence", "sequence")
        return SequenceOfPlay(
            first_eligible=self._require_label(
                Role, _field(data, "firstEligible", "sequence."), "sequence.firstEligible"
            ),
            second_eligible=self._require_label(
                Role, _field(data, "secondEligible", "sequence."), "sequence.secondEligible"
            ),
            first_action=self._coerce_optional(
                _field(data, "firstAction", "sequence."),
                "sequence.firstAction",
                lambda raw, ctx: self._require_label(Action, raw, ctx),
            ),
            second_action=self._coerce_optional(
                _field(data, "secondAction", "sequence."),
                "sequence.secondAction",
                lambda raw, ctx: self._require_label(Action, raw, ctx),
            ),
        )

    # -- primitive coercions -------------------------------------------------

    @staticmethod
    def _coerce_optional(value: Any, context: str, coerce: Callable[[Any, str], T]) -> Optional[T]:
        if value is None:
            return None
        return coerce(value, context)

    @staticmethod
    def _require_dict(value: Any, field_name: str, context: str) -> Dict[str, Any]:
        if not isinstance(value, Mapping):
            raise DecodeError(
                DecodeErrorKind.TYPE_MISMATCH, _leaf(field_name), expected="an object", context=context
            )
        return dict(value)

    @staticmethod
    def _require_list(value: Any, context: str) -> List[Any]:
        if not isinstance(value, list):
            raise DecodeError(DecodeErrorKind.TYPE_MISMATCH, _leaf(context), expected="a list", context=context)
        return value

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise DecodeError(DecodeErrorKind.TYPE_MISMATCH, _leaf(context), expected="a string", context=context)
        return value

    @staticmethod
    def _require_bool(value: Any, context: str) -> bool:
        if not isinstance(value, bool):
            raise DecodeError(DecodeErrorKind.TYPE_MISMATCH, _leaf(context), expected="a boolean", context=context)
        return value

    @staticmethod
    def _require_int(value: Any, context: str) -> int:
        # bool is an int subclass; true/false in a count field is still a mismatch.
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(
                DecodeErrorKind.TYPE_MISMATCH, _leaf(context), expected="an integer", context=context
            )
        return value

    def _require_non_negative_int(self, value: Any, context: str) -> int:
        number = self._require_int(value, context)
        if number < 0:
            raise DecodeError(
                DecodeErrorKind.TYPE_MISMATCH,
                _leaf(context),
                expected="a non-negative integer",
                context=context,
            )
        return number

    def _require_label(self, enum_type: type[E], value: Any, context: str) -> E:
        return enum_type.from_label(self._require_str(value, context), exact=True)

    @staticmethod
    def _require_known_name(name: str, known: tuple[str, ...], type_name: str) -> str:
        if name not in known:
            raise InvalidValue(name, type_name)
        return name


def _field(data: Mapping[str, Any], key: str, prefix: str) -> Any:
    """Return ``data[key]``; a present key holding null is returned as None."""
    if key not in data:
        raise DecodeError(DecodeErrorKind.MISSING_FIELD, key, context=f"{prefix}{key}")
    return data[key]


def _leaf(context: str) -> str:
    leaf = context.rsplit(".", 1)[-1]
    return leaf.split("[", 1)[0]


def _label_or_none(value: LabelledEnum | None) -> str | None:
    return None if value is None else value.label


__all__ = ["SaveService", "SavePayload"]
