# FILE: flag_rotation/eligibility.py
from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .constants import role_family
from .models import Player, RecentRole, RotationState

logger = logging.getLogger(__name__)


def can_fill(player: Player, role: str) -> bool:
    if role in player.blocked_roles:
        return False
    if player.allowed_roles is not None and role not in player.allowed_roles:
        return False
    return True


def ability_pool(
    role: str,
    candidate_ids: Iterable[str],
    already_assigned: Set[str],
    roster_by_id: Dict[str, Player],
) -> List[str]:
    out = []
    for pid in candidate_ids:
        if pid in already_assigned:
            continue
        p = roster_by_id.get(pid)
        if p is None or not can_fill(p, role):
            continue
        out.append(pid)
    return out


def played_family_recently(rec: Optional[RecentRole], family: str, current_series: int, window: int) -> bool:
    if rec is None or window <= 0:
        return False
    return rec.role == family and rec.series >= current_series - window


def eligible_pool(
    state: RotationState,
    role: str,
    candidate_ids: Iterable[str],
    already_assigned: Set[str],
    current_series: int,
    roster_by_id: Optional[Dict[str, Player]] = None,
) -> Tuple[List[str], bool]:
    """
    Candidates that may take `role` this series, in candidate order.

    Returns (ids, relaxed). `relaxed` is True when the same-family block would
    have emptied the pool and was dropped for this pick only.
    """
    by_id = roster_by_id if roster_by_id is not None else state.by_id()
    pool = ability_pool(role, candidate_ids, already_assigned, by_id)
    if not pool:
        return [], False

    window = state.settings.no_repeat_window
    if window <= 0:
        return pool, False

    family = role_family(role)
    recent = state.recent_role_by_player
    fresh = [
        pid for pid in pool
        if not played_family_recently(recent.get(pid), family, current_series, window)
    ]
    if fresh:
        return fresh, False

    logger.debug("No fresh candidate for %s in series %s; allowing a %s repeat", role, current_series, family)
    return pool, True
