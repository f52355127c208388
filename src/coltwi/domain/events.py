"""Capability and momentum event names."""
from __future__ import annotations

from typing import Dict, Tuple

CAP_REVENGE = "FLN:Revenge"
CAP_OVERKILL = "Gov:Overkill"
CAP_SCORCH = "FLN:Scorch"
CAP_NAPALM = "Gov:Napalm"
CAP_TALEB = "FLN:Taleb"
CAP_AMATEUR_BOMBER = "Gov:Amateur Bomber"
CAP_X_WILAYA_COORD = "FLN:X Wilaya Coord"
CAP_DEAD_ZONE = "Gov:Dead Zone"
CAP_FLN_SAS = "FLN:SAS"
CAP_GOV_SAS = "Gov:SAS"
CAP_FLN_COMMANDOS = "FLN:Zonal Commandos"
CAP_GOV_COMMANDOS = "Gov:Commandos de Chasse"
CAP_OAS = "Dual: SAS"
CAP_TORTURE = "Dual: Torture"

ALL_CAPABILITIES: Tuple[str, ...] = (
    CAP_REVENGE,
    CAP_OVERKILL,
    CAP_SCORCH,
    CAP_NAPALM,
    CAP_TALEB,
    CAP_AMATEUR_BOMBER,
    CAP_X_WILAYA_COORD,
    CAP_DEAD_ZONE,
    CAP_FLN_SAS,
    CAP_GOV_SAS,
    CAP_FLN_COMMANDOS,
    CAP_GOV_COMMANDOS,
    CAP_OAS,
    CAP_TORTURE,
)

MO_BALKY_CONSCRIPTS = "FLN: Balky Conscripts"
MO_PEACE_OF_THE_BRAVE = "Gov: Peace Of The Brave"
MO_MOUDJAHIDINE = "FLN: Moudjahidine"
MO_BANANES = "Gov: Bananes"
MO_VENTILOS = "Gov: Ventilos"
MO_THE_CALL_UP = "FLN: The Call Up"
MO_INTIMIDATION = "Gov: Intimidation"
MO_STRATEGIC_MOVEMENT = "FLN: Strategic Movement"
MO_PARANOIA = "Gov: Paranoia"
MO_CHALLE_PLAN_GOV = "Gov: Challe Plan"
MO_CHALLE_PLAN_FLN = "FLN: Challe Plan"
MO_MOGHAZNI = "Gov: Moghazni"
MO_POPULATION_CONTROL = "Gov: Population Control"
MO_HARDENED_ATTITUDES = "Dual: Hardened Attitudes"
MO_PEACE_TALKS = "Dual: Peace Talks"

ALL_MOMENTUM: Tuple[str, ...] = (
    MO_BALKY_CONSCRIPTS,
    MO_PEACE_OF_THE_BRAVE,
    MO_MOUDJAHIDINE,
    MO_BANANES,
    MO_VENTILOS,
    MO_THE_CALL_UP,
    MO_INTIMIDATION,
    MO_STRATEGIC_MOVEMENT,
    MO_PARANOIA,
    MO_CHALLE_PLAN_GOV,
    MO_CHALLE_PLAN_FLN,
    MO_MOGHAZNI,
    MO_POPULATION_CONTROL,
    MO_HARDENED_ATTITUDES,
    MO_PEACE_TALKS,
)

# Misspelled names written by older releases, mapped to their current form.
# Applied only when reading saved games.
LEGACY_MOMENTUM_NAMES: Dict[str, str] = {
    "Dual: Hardend Attitudes": MO_HARDENED_ATTITUDES,
}


def fix_momentum_name(name: str) -> str:
    return LEGACY_MOMENTUM_NAMES.get(name, name)
