"""Card numbers with special handling in the sequence of play."""
from __future__ import annotations

PIVOTAL_MOROCCO_TUNISIA_INDEPENDENT = 61
PIVOTAL_SUEZ_CRISIS = 62
PIVOTAL_OAS = 63
PIVOTAL_MOBILIZATION = 64
PIVOTAL_RECALL_DE_GAULLE = 65
PIVOTAL_COUP_D_ETAT = 66

GOV_PIVOTAL_CARDS = frozenset({PIVOTAL_MOBILIZATION, PIVOTAL_RECALL_DE_GAULLE, PIVOTAL_COUP_D_ETAT})
FLN_PIVOTAL_CARDS = frozenset({PIVOTAL_MOROCCO_TUNISIA_INDEPENDENT, PIVOTAL_SUEZ_CRISIS, PIVOTAL_OAS})
PIVOTAL_CARDS = GOV_PIVOTAL_CARDS | FLN_PIVOTAL_CARDS
PROPAGANDA_CARDS = frozenset(range(67, 72))
CARD_NUMBERS = range(1, 72)


def is_propaganda_card(number: int) -> bool:
    return number in PROPAGANDA_CARDS


def is_gov_pivotal_card(number: int) -> bool:
    return number in GOV_PIVOTAL_CARDS


def is_fln_pivotal_card(number: int) -> bool:
    return number in FLN_PIVOTAL_CARDS
