# FILE: flag_rotation/roster.py
from __future__ import annotations
import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from .bench import reconcile_queue
from .captains import clamp_plan, season_target
from .constants import ALL_ROLES
from .errors import DuplicateNameError, UnknownPlayerError, UnknownRoleError
from .models import GameSummary, Player, RotationState, Settings, empty_role_counts

logger = logging.getLogger(__name__)


def new_player_id() -> str:
    return uuid.uuid4().hex


def name_key(name: str) -> str:
    return name.strip().lower()


def _sort_roster(players: List[Player]) -> List[Player]:
    return sorted(players, key=lambda p: (name_key(p.name), p.name))


def _get(state: RotationState, player_id: str) -> Player:
    for p in state.roster:
        if p.id == player_id:
            return p
    raise UnknownPlayerError(player_id)


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Player name is required.")
    return cleaned


def _check_unique(state: RotationState, name: str, ignore_id: Optional[str] = None) -> None:
    key = name_key(name)
    for p in state.roster:
        if p.id != ignore_id and name_key(p.name) == key:
            raise DuplicateNameError(name)


def sync_roster(state: RotationState) -> None:
    """In place: re-sort, reconcile the bench queue and captain plan after a roster change."""
    state.roster = _sort_roster(state.roster)
    state.queue = reconcile_queue(state.queue, state.active_ids())
    clamp_plan(state)


def build_roster(names: Iterable[str]) -> RotationState:
    state = RotationState()
    for n in names:
        state, _ = add_player(state, n)
    return state


def add_player(state: RotationState, name: str, player_id: Optional[str] = None) -> Tuple[RotationState, str]:
    cleaned = _clean_name(name)
    _check_unique(state, cleaned)

    new = state.model_copy(deep=True)
    p = Player(id=player_id or new_player_id(), name=cleaned)
    new.roster.append(p)
    new.captain_plan.season_target_total = season_target(len(new.roster))
    sync_roster(new)
    logger.info("Added player %s", cleaned)
    return new, p.id


def remove_player(state: RotationState, player_id: str) -> RotationState:
    _get(state, player_id)
    new = state.model_copy(deep=True)
    new.roster = [p for p in new.roster if p.id != player_id]
    new.queue = [pid for pid in new.queue if pid != player_id]
    new.recent_role_by_player.pop(player_id, None)
    plan = new.captain_plan
    plan.recent_picks = [pid for pid in plan.recent_picks if pid != player_id]
    plan.pending_picks = [pid for pid in plan.pending_picks if pid != player_id]
    plan.season_target_total = season_target(len(new.roster))
    sync_roster(new)
    logger.info("Removed player %s", player_id)
    return new


def rename_player(state: RotationState, player_id: str, name: str) -> RotationState:
    _get(state, player_id)
    cleaned = _clean_name(name)
    _check_unique(state, cleaned, ignore_id=player_id)
    new = state.model_copy(deep=True)
    _get(new, player_id).name = cleaned
    sync_roster(new)
    return new


def toggle_active(state: RotationState, player_id: str) -> RotationState:
    _get(state, player_id)
    new = state.model_copy(deep=True)
    p = _get(new, player_id)
    p.active = not p.active
    sync_roster(new)
    logger.info("%s is now %s", p.name, "present" if p.active else "absent")
    return new


def set_role_eligibility(state: RotationState, player_id: str, role: str, allowed: bool) -> RotationState:
    if role not in ALL_ROLES:
        raise UnknownRoleError(role)
    _get(state, player_id)
    new = state.model_copy(deep=True)
    p = _get(new, player_id)
    blocked = set(p.blocked_roles)
    if allowed:
        blocked.discard(role)
    else:
        blocked.add(role)
    p.blocked_roles = sorted(blocked)
    return new


def set_allowed_roles(state: RotationState, player_id: str, roles: Optional[Iterable[str]]) -> RotationState:
    """Restrict a player to a subset of roles; None lifts the restriction."""
    allowed = None
    if roles is not None:
        allowed = sorted(set(roles))
        for r in allowed:
            if r not in ALL_ROLES:
                raise UnknownRoleError(r)
    _get(state, player_id)
    new = state.model_copy(deep=True)
    _get(new, player_id).allowed_roles = allowed
    return new


def update_settings(state: RotationState, **changes) -> RotationState:
    merged = {**state.settings.model_dump(), **changes}
    settings = Settings.model_validate(merged)
    new = state.model_copy(deep=True)
    new.settings = settings
    return new


def _zero_counts(state: RotationState) -> None:
    for p in state.roster:
        p.sits = 0
        p.pos = empty_role_counts()


def reset_positions_only(state: RotationState) -> RotationState:
    """Zero per-game role and bench counts; captains and membership are untouched."""
    new = state.model_copy(deep=True)
    _zero_counts(new)
    new.series = 0
    new.history = []
    new.recent_role_by_player = {}
    logger.info("Per-game counts reset")
    return new


def start_new_game(state: RotationState, ended_at: Optional[str] = None) -> RotationState:
    summary = GameSummary(
        game=state.game_number,
        ended_at=ended_at or datetime.now(timezone.utc).isoformat(),
        attendance=[p.name for p in state.active_players()],
        series_played=len(state.history),
    )
    new = state.model_copy(deep=True)
    _zero_counts(new)
    new.queue = new.active_ids()
    new.series = 0
    new.history = []
    new.recent_role_by_player = {}
    new.game_number = state.game_number + 1
    new.season_history = new.season_history + [summary]
    new.captain_plan.recent_picks = []
    new.captain_plan.pending_picks = []
    logger.info("Game %s archived (%d series); starting game %s", summary.game, summary.series_played, new.game_number)
    return new
