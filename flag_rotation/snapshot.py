# FILE: flag_rotation/snapshot.py
"""
Plain, JSON-safe snapshots of the rotation state.

Import runs two pure steps before validation:
  upgrade_snapshot   -- versioned schema upgrade (v1 = the old browser save shape)
  normalize_snapshot -- legacy role keys, count backfill, pruning of stale ids
Nothing is adopted unless the whole snapshot validates.
"""
from __future__ import annotations
import json
import logging
from copy import deepcopy
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from .bench import reconcile_queue
from .captains import season_target
from .constants import LEGACY_ABILITY_FLAGS, migrate_role_key, role_family
from .errors import SnapshotValidationError
from .models import SCHEMA_VERSION, RotationState

logger = logging.getLogger(__name__)


def export_snapshot(state: RotationState) -> Dict[str, Any]:
    return state.model_dump(mode="json")


def dumps_snapshot(state: RotationState, indent: Optional[int] = 2) -> str:
    return json.dumps(export_snapshot(state), indent=indent)


# -----------------------
# Schema upgrade
# -----------------------
def _upgrade_player_v1(p: Dict[str, Any]) -> Dict[str, Any]:
    out = {
        "id": p.get("id"),
        "name": p.get("name"),
        "active": p.get("active", True),
        "sits": p.get("sits", 0),
        "captains": p.get("captains", 0),
        "pos": p.get("pos") or {},
    }
    blocked = [role for flag, role in LEGACY_ABILITY_FLAGS.items() if p.get(flag) is False]
    out["blocked_roles"] = blocked
    return out


def _upgrade_entry_v1(e: Dict[str, Any]) -> Dict[str, Any]:
    sit_ids = e.get("sitIds") or []
    return {
        "phase": e.get("phase"),
        "series": e.get("series", 0),
        "sit_ids": sit_ids,
        "play_ids": e.get("playIds") or [],
        "offense": e.get("offense"),
        "defense": e.get("defense"),
        "recent_before": e.get("recentBefore") or {},
        "advance": max(1, len(sit_ids)),
    }


def _upgrade_v1(data: Dict[str, Any]) -> Dict[str, Any]:
    settings = data.get("settings") or {}
    plan = data.get("captainPlan") or {}
    out = {
        "version": 2,
        "roster": [_upgrade_player_v1(p) for p in data.get("roster") or []],
        "queue": data.get("queue") or [],
        "series": data.get("series", 0),
        "history": [_upgrade_entry_v1(e) for e in data.get("history") or [] if e],
        "settings": {
            "team_size": settings.get("teamSize", 7),
            "no_repeat_window": settings.get("noRepeatWindow", 1),
        },
        "recent_role_by_player": data.get("recentRoleByPlayer") or {},
        "captain_plan": {
            "season_target_total": plan.get("seasonTargetTotal", 0),
            "games_remaining": plan.get("gamesRemaining") or None,
            "next_group_index": plan.get("nextGroupIndex", 0),
            "recent_picks": plan.get("recentPicks") or [],
            "pending_picks": plan.get("pendingPicks") or [],
        },
        "game_number": data.get("gameNumber", 1),
        "season_history": [
            {
                "game": s.get("game", i + 1),
                "ended_at": s.get("endedAt", ""),
                "attendance": s.get("attendance") or [],
                "series_played": s.get("seriesPlayed", 0),
            }
            for i, s in enumerate(data.get("seasonHistory") or [])
        ],
    }
    if out["captain_plan"]["games_remaining"] is None:
        del out["captain_plan"]["games_remaining"]
    # captainQueue / captainIndex belonged to the alphabetical captain design; dropped
    return out


UPGRADES = {
    1: _upgrade_v1,
}


def snapshot_version(data: Dict[str, Any]) -> int:
    v = data.get("version")
    if v is None:
        return 1
    if not isinstance(v, int):
        raise SnapshotValidationError(f"Invalid snapshot version: {v!r}")
    return v


def upgrade_snapshot(data: Dict[str, Any]) -> Dict[str, Any]:
    version = snapshot_version(data)
    if version > SCHEMA_VERSION:
        raise SnapshotValidationError(
            f"Snapshot version {version} is newer than supported version {SCHEMA_VERSION}."
        )
    out = deepcopy(data)
    while version < SCHEMA_VERSION:
        step = UPGRADES.get(version)
        if step is None:
            raise SnapshotValidationError(f"No upgrade path from snapshot version {version}.")
        out = step(out)
        version = out["version"]
        logger.info("Upgraded snapshot to version %s", version)
    return out


# -----------------------
# Normalization
# -----------------------
def _migrate_counts(pos: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(pos)
    for key in list(out.keys()):
        current = migrate_role_key(key)
        if current == key:
            continue
        value = out.pop(key)
        value = value if isinstance(value, (int, float)) else 0
        prior = out.get(current, 0)
        out[current] = (prior if isinstance(prior, (int, float)) else 0) + value
    return out


def _migrate_mapping(mapping: Optional[Dict[str, str]], known: set) -> Optional[Dict[str, str]]:
    if mapping is None:
        return None
    return {migrate_role_key(role): pid for role, pid in mapping.items() if pid in known}


def _normalize_recent(recent: Dict[str, Any], known: set) -> Dict[str, Dict[str, Any]]:
    out = {}
    for pid, rec in (recent or {}).items():
        if not rec or pid not in known:
            continue
        out[pid] = {"role": role_family(rec.get("role")), "series": rec.get("series") or 0}
    return out


def _sort_key(p: Dict[str, Any]):
    name = str(p.get("name", ""))
    return (name.strip().lower(), name)


def normalize_snapshot(data: Dict[str, Any]) -> Dict[str, Any]:
    out = deepcopy(data)
    roster: List[Dict[str, Any]] = []
    for p in out.get("roster") or []:
        p = dict(p)
        p["pos"] = _migrate_counts(p.get("pos") or {})
        roster.append(p)
    roster.sort(key=_sort_key)
    out["roster"] = roster

    known = {p.get("id") for p in roster}
    active_ids = [p.get("id") for p in roster if p.get("active", True)]
    out["queue"] = reconcile_queue(out.get("queue") or [], active_ids)
    out["recent_role_by_player"] = _normalize_recent(out.get("recent_role_by_player"), known)

    history = []
    for e in out.get("history") or []:
        e = dict(e)
        e["sit_ids"] = [pid for pid in e.get("sit_ids") or [] if pid in known]
        e["play_ids"] = [pid for pid in e.get("play_ids") or [] if pid in known]
        e["offense"] = _migrate_mapping(e.get("offense"), known)
        e["defense"] = _migrate_mapping(e.get("defense"), known)
        e["recent_before"] = _normalize_recent(e.get("recent_before"), known)
        history.append(e)
    out["history"] = history

    plan = dict(out.get("captain_plan") or {})
    plan["recent_picks"] = [pid for pid in plan.get("recent_picks") or [] if pid in known]
    plan["pending_picks"] = [pid for pid in plan.get("pending_picks") or [] if pid in known]
    if not plan.get("season_target_total"):
        plan["season_target_total"] = season_target(len(roster))
    out["captain_plan"] = plan
    return out


def import_snapshot(data: Union[str, bytes, Dict[str, Any]]) -> RotationState:
    """Validate and adopt a snapshot; raises SnapshotValidationError on any defect."""
    if isinstance(data, (str, bytes, bytearray)):
        try:
            data = json.loads(data)
        except ValueError as e:
            raise SnapshotValidationError(f"Snapshot is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotValidationError("Snapshot must be a JSON object.")

    try:
        upgraded = upgrade_snapshot(data)
        normalized = normalize_snapshot(upgraded)
        return RotationState.model_validate(normalized)
    except SnapshotValidationError:
        raise
    except ValidationError as e:
        raise SnapshotValidationError(f"Invalid snapshot: {e}") from e
    except (TypeError, AttributeError, KeyError, ValueError) as e:
        raise SnapshotValidationError(f"Malformed snapshot: {e}") from e


def loads_snapshot(text: Union[str, bytes]) -> RotationState:
    return import_snapshot(text)
