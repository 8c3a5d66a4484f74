# FILE: flag_rotation/fairness.py
from __future__ import annotations
from typing import Dict, List, Optional
import numpy as np

from .models import Player, RotationState


def fairest_subset(pool: List[str], role: str, roster_by_id: Dict[str, Player]) -> List[str]:
    """Players who have never had `role` this game, else those at the minimum count."""
    if not pool:
        return []
    counts = {pid: roster_by_id[pid].pos.get(role, 0) for pid in pool}
    zero = [pid for pid in pool if counts[pid] == 0]
    if zero:
        return zero
    mn = min(counts.values())
    return [pid for pid in pool if counts[pid] == mn]


def select_for_role(
    pool: List[str],
    role: str,
    roster_by_id: Dict[str, Player],
    rng: np.random.Generator,
) -> Optional[str]:
    """
    Uniform draw from the fairest subset. Ties are never broken by name or
    queue order.
    """
    subset = fairest_subset(pool, role, roster_by_id)
    if not subset:
        return None
    return subset[int(rng.integers(len(subset)))]


def check_evenness(counts: List[int]) -> bool:
    return not counts or (max(counts) - min(counts) <= 1)


def role_spread(state: RotationState, role: str, active_only: bool = True) -> int:
    """max - min per-game count for a role across the (active) roster."""
    players = state.active_players() if active_only else state.roster
    vals = [p.pos.get(role, 0) for p in players]
    if not vals:
        return 0
    return max(vals) - min(vals)
