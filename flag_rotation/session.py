# FILE: flag_rotation/session.py
from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
import numpy as np

from . import captains, game, roster
from .bench import sit_count, split_queue
from .config import DEFAULT_ROSTER
from .models import HistoryEntry, Player, RotationState
from .snapshot import export_snapshot, import_snapshot

logger = logging.getLogger(__name__)


class RotationSession:
    """
    Single owner of the rotation state and its random source.

    Every operation runs a pure transition on the current state and only
    replaces it when the transition succeeds; errors leave it untouched.
    """

    def __init__(
        self,
        state: Optional[RotationState] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.state = state if state is not None else roster.build_roster(DEFAULT_ROSTER)

    # ----- read helpers -----
    def active_players(self) -> List[Player]:
        return self.state.active_players()

    def sit_count(self) -> int:
        return sit_count(len(self.state.active_ids()), self.state.settings.team_size)

    def preview(self) -> Tuple[List[str], List[str]]:
        """(sitting, playing) ids for the next series."""
        return split_queue(self.state.queue, self.state.settings.team_size)

    def last_entry(self) -> Optional[HistoryEntry]:
        return self.state.history[-1] if self.state.history else None

    def player(self, player_id: str) -> Optional[Player]:
        return self.state.by_id().get(player_id)

    # ----- roster -----
    def add_player(self, name: str) -> str:
        self.state, pid = roster.add_player(self.state, name)
        return pid

    def remove_player(self, player_id: str) -> None:
        self.state = roster.remove_player(self.state, player_id)

    def rename_player(self, player_id: str, name: str) -> None:
        self.state = roster.rename_player(self.state, player_id, name)

    def toggle_active(self, player_id: str) -> None:
        self.state = roster.toggle_active(self.state, player_id)

    def set_role_eligibility(self, player_id: str, role: str, allowed: bool) -> None:
        self.state = roster.set_role_eligibility(self.state, player_id, role, allowed)

    def set_allowed_roles(self, player_id: str, roles: Optional[Iterable[str]]) -> None:
        self.state = roster.set_allowed_roles(self.state, player_id, roles)

    def update_settings(self, **changes) -> None:
        self.state = roster.update_settings(self.state, **changes)

    def reset_positions_only(self) -> None:
        self.state = roster.reset_positions_only(self.state)

    def start_new_game(self, ended_at: Optional[str] = None) -> None:
        self.state = roster.start_new_game(self.state, ended_at=ended_at)

    # ----- series -----
    def run_series(self, phase: str) -> HistoryEntry:
        self.state, entry = game.run_series(self.state, phase, self.rng)
        return entry

    def undo(self) -> None:
        self.state = game.undo_series(self.state)

    # ----- captains -----
    def captain_groups(self) -> List[int]:
        return captains.captain_groups(len(self.state.active_ids()), self.state.captain_plan.games_remaining)

    def pick_captains(self) -> List[str]:
        self.state = captains.pick_captains(self.state, self.rng)
        return list(self.state.captain_plan.pending_picks)

    def toggle_pending_captain(self, player_id: str) -> None:
        self.state = captains.toggle_pending_captain(self.state, player_id)

    def clear_pending_captains(self) -> None:
        self.state = captains.clear_pending_captains(self.state)

    def accept_captains(self) -> None:
        self.state = captains.accept_captains(self.state)

    def set_games_remaining(self, games: int) -> None:
        self.state = captains.set_games_remaining(self.state, games)

    def captains_needed(self) -> int:
        return captains.captains_needed(self.state)

    # ----- snapshots -----
    def export_snapshot(self) -> Dict[str, Any]:
        return export_snapshot(self.state)

    def import_snapshot(self, data: Union[str, bytes, Dict[str, Any]]) -> None:
        self.state = import_snapshot(data)
        logger.info("Imported snapshot: %d players, game %s", len(self.state.roster), self.state.game_number)
