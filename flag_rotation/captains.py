# FILE: flag_rotation/captains.py
"""
Balanced-group captain allocation.

The active roster is split into `games_remaining` groups whose sizes differ by
at most one (larger groups last). Each pick proposes the next group's worth of
captains, biased toward players with the fewest captaincies so far; accepting
the proposal credits them and moves to the next group.
"""
from __future__ import annotations
import logging
from typing import List, Optional
import numpy as np

from .errors import CaptainSelectionError, UnknownPlayerError
from .models import DEFAULT_CAPTAIN_GAMES, CaptainPlan, RotationState

logger = logging.getLogger(__name__)

CAPTAINS_PER_PLAYER = 2


def captain_groups(player_count: int, games_remaining: Optional[int]) -> List[int]:
    games = max(1, games_remaining or DEFAULT_CAPTAIN_GAMES)
    if player_count <= 0:
        return []
    base = player_count // games
    remainder = player_count % games
    groups = [base] * games
    for i in range(remainder):
        groups[len(groups) - 1 - i] += 1
    return [g for g in groups if g > 0]


def season_target(roster_size: int) -> int:
    return roster_size * CAPTAINS_PER_PLAYER


def captains_needed(state: RotationState) -> int:
    used = sum(p.captains for p in state.roster)
    return max(0, state.captain_plan.season_target_total - used)


def _groups_for(state: RotationState) -> List[int]:
    return captain_groups(len(state.active_players()), state.captain_plan.games_remaining)


def _current_index(plan: CaptainPlan, groups: List[int]) -> int:
    return min(plan.next_group_index, max(len(groups) - 1, 0))


def next_group_size(state: RotationState) -> int:
    groups = _groups_for(state)
    if not groups:
        return 0
    return groups[_current_index(state.captain_plan, groups)]


def clamp_plan(state: RotationState) -> None:
    """In place: keep the group pointer and pending picks valid for the current roster."""
    plan = state.captain_plan
    groups = _groups_for(state)
    plan.next_group_index = _current_index(plan, groups)
    size = groups[plan.next_group_index] if groups else 0
    active = set(state.active_ids())
    plan.pending_picks = [pid for pid in plan.pending_picks if pid in active][:size]


def pick_captains(state: RotationState, rng: np.random.Generator) -> RotationState:
    """Propose the next group of captains as pending picks."""
    new = state.model_copy(deep=True)
    active = new.active_players()
    size = next_group_size(new)
    if not active or size <= 0:
        return new

    shuffled = [active[i] for i in rng.permutation(len(active))]
    # stable: shuffle order breaks ties between equal captain counts
    shuffled.sort(key=lambda p: p.captains)
    new.captain_plan.pending_picks = [p.id for p in shuffled[:size]]
    logger.debug("Proposed captains: %s", [p.name for p in shuffled[:size]])
    return new


def toggle_pending_captain(state: RotationState, player_id: str) -> RotationState:
    new = state.model_copy(deep=True)
    by_id = new.by_id()
    if player_id not in by_id:
        raise UnknownPlayerError(player_id)
    if not by_id[player_id].active:
        return new

    plan = new.captain_plan
    if player_id in plan.pending_picks:
        plan.pending_picks = [pid for pid in plan.pending_picks if pid != player_id]
        return new
    if len(plan.pending_picks) >= next_group_size(new):
        return new
    plan.pending_picks = plan.pending_picks + [player_id]
    return new


def clear_pending_captains(state: RotationState) -> RotationState:
    new = state.model_copy(deep=True)
    new.captain_plan.pending_picks = []
    return new


def accept_captains(state: RotationState) -> RotationState:
    groups = _groups_for(state)
    size = next_group_size(state)
    if size <= 0:
        raise CaptainSelectionError("No captain group to fill: no active players.")

    active = set(state.active_ids())
    pending = []
    for pid in state.captain_plan.pending_picks:
        if pid in active and pid not in pending:
            pending.append(pid)
    if len(pending) != size:
        raise CaptainSelectionError(f"Pick exactly {size} captains (have {len(pending)}).")

    new = state.model_copy(deep=True)
    for p in new.roster:
        if p.id in pending:
            p.captains += 1
    plan = new.captain_plan
    current = _current_index(plan, groups)
    plan.recent_picks = pending
    plan.pending_picks = []
    plan.next_group_index = min(current + 1, max(len(groups) - 1, 0))
    logger.info("Captains accepted for game %s: %d player(s)", new.game_number, len(pending))
    return new


def set_games_remaining(state: RotationState, games: int) -> RotationState:
    if games < 1:
        raise ValueError("games_remaining must be at least 1")
    new = state.model_copy(deep=True)
    new.captain_plan.games_remaining = int(games)
    clamp_plan(new)
    return new
