# FILE: flag_rotation/game.py
from __future__ import annotations
import logging
from typing import Dict, List, Set, Tuple
import numpy as np

from .bench import advance_for, rotate_left, rotate_right, split_queue
from .constants import PHASES, positions_for, role_family
from .eligibility import eligible_pool
from .errors import InsufficientPlayersError, NothingToUndoError
from .fairness import select_for_role
from .models import HistoryEntry, RecentRole, RotationState, Settings

logger = logging.getLogger(__name__)


def assign_roles(
    state: RotationState,
    phase: str,
    play_ids: List[str],
    current_series: int,
    rng: np.random.Generator,
) -> Tuple[Dict[str, str], List[str]]:
    """
    Fill the phase's formation in resolution order.

    Returns (mapping role -> player id, roles where a family repeat was allowed).
    Roles with no eligible player are left out of the mapping.
    """
    by_id = state.by_id()
    assigned: Set[str] = set()
    mapping: Dict[str, str] = {}
    relaxed: List[str] = []

    for role in positions_for(phase, state.settings):
        pool, was_relaxed = eligible_pool(state, role, play_ids, assigned, current_series, by_id)
        pid = select_for_role(pool, role, by_id, rng)
        if pid is None:
            logger.warning("Series %s: no eligible player for %s", current_series, role)
            continue
        mapping[role] = pid
        assigned.add(pid)
        if was_relaxed:
            relaxed.append(role)
    return mapping, relaxed


def run_series(state: RotationState, phase: str, rng: np.random.Generator) -> Tuple[RotationState, HistoryEntry]:
    if phase not in PHASES:
        raise ValueError(f"Unknown phase: {phase}")
    team_size = state.settings.team_size
    active = state.active_ids()
    if len(active) < team_size:
        raise InsufficientPlayersError(team_size, len(active))

    current = state.series + 1
    sit_ids, play_ids = split_queue(state.queue, team_size)
    advance = advance_for(len(state.queue), team_size)

    mapping, relaxed = assign_roles(state, phase, play_ids, current, rng)

    entry = HistoryEntry(
        phase=phase,
        series=current,
        sit_ids=sit_ids,
        play_ids=play_ids,
        offense=mapping if phase == "Offense" else None,
        defense=mapping if phase == "Defense" else None,
        recent_before={pid: rec.model_copy() for pid, rec in state.recent_role_by_player.items()},
        advance=advance,
        repeats_allowed=relaxed,
    )

    new = state.model_copy(deep=True)
    by_id = new.by_id()
    for pid in sit_ids:
        by_id[pid].sits += 1
    for role, pid in mapping.items():
        by_id[pid].pos[role] += 1
        new.recent_role_by_player[pid] = RecentRole(role=role_family(role), series=current)

    new.history = new.history + [entry.model_copy(deep=True)]
    new.queue = rotate_left(new.queue, advance)
    new.series = current
    logger.info(
        "Series %s (%s): %d playing, %d sitting, %d open",
        current, phase, len(play_ids), len(sit_ids), len(open_roles(entry, state.settings)),
    )
    return new, entry


def undo_series(state: RotationState) -> RotationState:
    if not state.history:
        raise NothingToUndoError()

    new = state.model_copy(deep=True)
    last = new.history[-1]
    by_id = new.by_id()
    for pid in last.sit_ids:
        if pid in by_id:
            by_id[pid].sits = max(0, by_id[pid].sits - 1)
    for role, pid in last.mapping.items():
        p = by_id.get(pid)
        if p is not None and role in p.pos:
            p.pos[role] = max(0, p.pos[role] - 1)

    new.recent_role_by_player = {pid: rec.model_copy() for pid, rec in last.recent_before.items()}
    new.queue = rotate_right(new.queue, last.advance)
    new.series = max(0, new.series - 1)
    new.history = new.history[:-1]
    logger.info("Undid series %s (%s)", last.series, last.phase)
    return new


def open_roles(entry: HistoryEntry, settings: Settings) -> List[str]:
    filled = entry.mapping
    return [r for r in positions_for(entry.phase, settings) if r not in filled]
