# flag_rotation/io.py
from __future__ import annotations
import csv
import io
import logging
import os
from typing import Dict, List, Optional, Tuple
import pandas as pd
import yaml

from .aliases import map_headers
from .constants import DEFENSE_ROLES, OFFENSE_ROLES, PHASES, ROLE_LABELS, roles_for_phase
from .errors import DuplicateNameError
from .fairness import check_evenness
from .models import RotationState
from .roster import add_player, set_role_eligibility, toggle_active, update_settings
from .snapshot import dumps_snapshot, import_snapshot

logger = logging.getLogger(__name__)

ROSTER_COLUMNS = ["name", "active", "can_qb", "can_center"]
TRUE_WORDS = {"1", "y", "yes", "true", "t", "x", "present"}
FALSE_WORDS = {"0", "n", "no", "false", "f", "absent"}


def parse_flag(value, default: bool = True) -> bool:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return default
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in TRUE_WORDS:
        return True
    if s in FALSE_WORDS:
        return False
    return default


def role_heading(role: str) -> str:
    label = ROLE_LABELS.get(role, role)
    if role.endswith("_left"):
        return f"{label} L"
    if role.endswith("_right"):
        return f"{label} R"
    return label


# -----------------------
# Roster CSV
# -----------------------
def load_roster_csv(file_like) -> pd.DataFrame:
    if isinstance(file_like, (bytes, bytearray)):
        file_like = io.BytesIO(file_like)
    df = pd.read_csv(file_like, dtype=str)
    df, _ = map_headers(df)
    if "name" not in df.columns:
        raise ValueError("Missing required columns: ['name']")

    df["name"] = df["name"].fillna("").astype(str).str.strip()
    df = df[df["name"] != ""].copy()
    for c in ["active", "can_qb", "can_center"]:
        if c not in df.columns:
            df[c] = True
        else:
            df[c] = df[c].map(parse_flag)
    return df[ROSTER_COLUMNS].reset_index(drop=True)


def apply_roster_df(state: RotationState, df: pd.DataFrame) -> Tuple[RotationState, List[str], List[str]]:
    """Add every row as a player. Returns (state, added names, skipped duplicate names)."""
    added, skipped = [], []
    for _, r in df.iterrows():
        name = str(r["name"])
        try:
            state, pid = add_player(state, name)
        except DuplicateNameError:
            skipped.append(name)
            continue
        if not bool(r.get("can_qb", True)):
            state = set_role_eligibility(state, pid, "off_qb", False)
        if not bool(r.get("can_center", True)):
            state = set_role_eligibility(state, pid, "off_c", False)
        if not bool(r.get("active", True)):
            state = toggle_active(state, pid)
        added.append(name)
    if skipped:
        logger.warning("Skipped duplicate names from roster import: %s", skipped)
    return state, added, skipped


def generate_template_csv_bytes() -> bytes:
    empty = pd.DataFrame(columns=ROSTER_COLUMNS)
    buf = io.StringIO()
    empty.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")


# -----------------------
# Formations
# -----------------------
def parse_formations_yaml(text: str) -> Dict[str, List[str]]:
    obj = yaml.safe_load(text) or {}
    if not isinstance(obj, dict):
        raise ValueError("Formations file must map Offense/Defense to role lists.")
    out: Dict[str, List[str]] = {}
    for phase, roles in obj.items():
        if phase not in PHASES:
            raise ValueError(f"Unknown phase in formations: {phase}")
        if not isinstance(roles, list):
            raise ValueError(f"Formation {phase} must be a list of roles.")
        known = roles_for_phase(phase)
        unknown = [r for r in roles if r not in known]
        if unknown:
            raise ValueError(f"Formation {phase} has unknown roles: {unknown}")
        missing = [r for r in known if r not in roles]
        if missing:
            raise ValueError(f"Formation {phase} is missing roles: {missing}")
        if len(set(roles)) != len(roles):
            raise ValueError(f"Formation {phase} lists a role twice.")
        out[phase] = [str(r) for r in roles]
    return out


def load_formations_yaml(path: str) -> Dict[str, List[str]]:
    with open(path, "r", encoding="utf-8") as f:
        return parse_formations_yaml(f.read())


def apply_formations(state: RotationState, formations: Dict[str, List[str]]) -> RotationState:
    changes = {}
    if "Offense" in formations:
        changes["offense_order"] = formations["Offense"]
    if "Defense" in formations:
        changes["defense_order"] = formations["Defense"]
    return update_settings(state, **changes)


# -----------------------
# Tallies & reports
# -----------------------
def tally_dataframe(state: RotationState, phase: Optional[str] = None) -> pd.DataFrame:
    if phase is None:
        roles = OFFENSE_ROLES + DEFENSE_ROLES
    else:
        roles = roles_for_phase(phase)
    rows = []
    for p in state.roster:
        row = {
            "player_id": p.id,
            "name": p.name,
            "active": p.active,
            "sits": p.sits,
            "captains": p.captains,
        }
        for r in roles:
            row[role_heading(r)] = p.pos.get(r, 0)
        row["plays"] = sum(p.pos.get(r, 0) for r in roles)
        rows.append(row)
    columns = ["player_id", "name", "active", "sits", "captains"] + [role_heading(r) for r in roles] + ["plays"]
    return pd.DataFrame(rows, columns=columns)


def fairness_summary_df(state: RotationState, phase: str) -> pd.DataFrame:
    """Per role: spread of per-game counts across active players."""
    active = state.active_players()
    rows = []
    for r in roles_for_phase(phase):
        counts = [p.pos.get(r, 0) for p in active]
        rows.append({
            "role": role_heading(r),
            "min": min(counts) if counts else 0,
            "max": max(counts) if counts else 0,
            "even": check_evenness(counts),
        })
    return pd.DataFrame(rows, columns=["role", "min", "max", "even"])


def history_dataframe(state: RotationState) -> pd.DataFrame:
    names = {p.id: p.name for p in state.roster}
    rows = []
    for e in state.history:
        row = {"series": e.series, "phase": e.phase}
        for role in roles_for_phase(e.phase):
            row[role] = names.get(e.mapping.get(role, ""), "")
        row["sitting"] = ", ".join(names.get(pid, pid) for pid in e.sit_ids)
        rows.append(row)
    return pd.DataFrame(rows)


def export_series_csv(state: RotationState) -> bytes:
    """
    For each series, a header row 'Series N (Phase)', then Position,Player rows,
    then a Sitting row and a blank line.
    """
    names = {p.id: p.name for p in state.roster}
    buf = io.StringIO()
    w = csv.writer(buf)
    for e in state.history:
        w.writerow([f"Series {e.series} ({e.phase})"])
        w.writerow(["Position", "Player"])
        mapping = e.mapping
        for role in roles_for_phase(e.phase):
            pid = mapping.get(role)
            w.writerow([role_heading(role), names.get(pid, "(open)") if pid else "(open)"])
        w.writerow(["Sitting", ", ".join(names.get(pid, pid) for pid in e.sit_ids)])
        w.writerow([])
    return buf.getvalue().encode("utf-8")


# -----------------------
# State file
# -----------------------
def save_state_json(path: str, state: RotationState) -> None:
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    tmp = f"{path}.tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        f.write(dumps_snapshot(state))
    os.replace(tmp, path)


def load_state_json(path: str) -> Optional[RotationState]:
    if not os.path.exists(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        return import_snapshot(f.read())
