# FILE: flag_rotation/constants.py
from __future__ import annotations
import re
from typing import Dict, List, Optional

PHASES = ["Offense", "Defense"]

# --- Positions (7v7 flag) ---
# Listed in resolution order: constrained roles (QB, C) are filled first.
OFFENSE_POSITIONS = [
    {"key": "off_qb", "label": "QB"},
    {"key": "off_c", "label": "C"},
    {"key": "off_rb_left", "label": "RB"},
    {"key": "off_rb_right", "label": "RB"},
    {"key": "off_wr", "label": "WR"},
    {"key": "off_te_left", "label": "TE"},
    {"key": "off_te_right", "label": "TE"},
]

DEFENSE_POSITIONS = [
    {"key": "def_cb_left", "label": "CB"},
    {"key": "def_de_left", "label": "DE"},
    {"key": "def_dt", "label": "DT"},
    {"key": "def_de_right", "label": "DE"},
    {"key": "def_cb_right", "label": "CB"},
    {"key": "def_spy", "label": "Spy"},
    {"key": "def_blitzer", "label": "Blitzer"},
]

OFFENSE_ROLES: List[str] = [p["key"] for p in OFFENSE_POSITIONS]
DEFENSE_ROLES: List[str] = [p["key"] for p in DEFENSE_POSITIONS]
ALL_ROLES: List[str] = OFFENSE_ROLES + DEFENSE_ROLES

ROLE_LABELS: Dict[str, str] = {p["key"]: p["label"] for p in OFFENSE_POSITIONS + DEFENSE_POSITIONS}

# Board layout for display only (None = empty cell)
OFFENSE_LAYOUT = [
    ["off_te_left", "off_c", "off_te_right", "off_wr"],
    ["off_rb_left", "off_qb", "off_rb_right", None],
]

DEFENSE_LAYOUT = [
    ["def_cb_left", "def_de_left", "def_dt", "def_de_right", "def_cb_right"],
    [None, None, "def_spy", None, None],
    [None, None, "def_blitzer", None, None],
]

# Keys written by older saves -> current role ids
LEGACY_ROLE_MAP: Dict[str, str] = {
    "QB": "off_qb",
    "RB1": "off_rb_left",
    "RB2": "off_rb_right",
    "C": "off_c",
    "WR": "off_wr",
    "TE1": "off_te_left",
    "TE2": "off_te_right",
    "DT": "def_dt",
    "DE1": "def_de_left",
    "DE2": "def_de_right",
    "CB1": "def_cb_left",
    "CB2": "def_cb_right",
    "Spy": "def_spy",
    "Blitzer": "def_blitzer",
}

# Old per-player ability flags -> the role each one gated
LEGACY_ABILITY_FLAGS: Dict[str, str] = {
    "canQB": "off_qb",
    "canCenter": "off_c",
}

TRAILING_DIGITS = re.compile(r"\d+$")


def role_family(role: Optional[str]) -> Optional[str]:
    """Position group used for anti-repeat checks (TE left/right -> TE, WR1 -> WR)."""
    if not role:
        return role
    if role in ROLE_LABELS:
        return ROLE_LABELS[role]
    return TRAILING_DIGITS.sub("", role)


def migrate_role_key(role: Optional[str]) -> Optional[str]:
    if not role:
        return role
    return LEGACY_ROLE_MAP.get(role, role)


def roles_for_phase(phase: str) -> List[str]:
    if phase == "Offense":
        return OFFENSE_ROLES[:]
    if phase == "Defense":
        return DEFENSE_ROLES[:]
    raise ValueError(f"Unknown phase: {phase}")


def positions_for(phase: str, settings=None) -> List[str]:
    """Formation of a phase in resolution order (settings override the default order)."""
    if settings is None:
        return roles_for_phase(phase)
    if phase == "Offense":
        return list(settings.offense_order)
    if phase == "Defense":
        return list(settings.defense_order)
    raise ValueError(f"Unknown phase: {phase}")
