"""
Small, UI-agnostic helpers shared by app.py and pages/.
"""
from __future__ import annotations
import logging
import os
from typing import Dict, List, MutableMapping, Optional, Tuple

from .config import ASSETS_DIR
from .constants import DEFENSE_LAYOUT, OFFENSE_LAYOUT, ROLE_LABELS
from .io import apply_formations, load_formations_yaml, load_state_json, save_state_json
from .errors import SnapshotValidationError
from .models import Player, RotationState
from .session import RotationSession

logger = logging.getLogger(__name__)

SESSION_KEY = "rotation"
LOAD_ERROR_KEY = "rotation_load_error"


def display_name(p: Player) -> str:
    flags = []
    if "off_qb" in p.blocked_roles:
        flags.append("no QB")
    if "off_c" in p.blocked_roles:
        flags.append("no C")
    return f"{p.name} ({', '.join(flags)})" if flags else p.name


def names_for(state: RotationState, ids: List[str]) -> List[str]:
    by_id = state.by_id()
    return [by_id[pid].name for pid in ids if pid in by_id]


def board_rows(
    phase: str, mapping: Optional[Dict[str, str]], state: RotationState
) -> List[List[Optional[Tuple[str, Optional[str]]]]]:
    """Formation board as rows of (label, player name or None); None cells are spacers."""
    layout = OFFENSE_LAYOUT if phase == "Offense" else DEFENSE_LAYOUT
    by_id = state.by_id()
    rows = []
    for row in layout:
        cells = []
        for role in row:
            if role is None:
                cells.append(None)
                continue
            pid = (mapping or {}).get(role)
            cells.append((ROLE_LABELS[role], by_id[pid].name if pid in by_id else None))
        rows.append(cells)
    return rows


def session_from(store: MutableMapping, path: str, assets_dir: str = ASSETS_DIR) -> RotationSession:
    """Fetch the session kept in `store`, loading the saved state on first use."""
    if SESSION_KEY not in store:
        try:
            state = load_state_json(path)
        except (SnapshotValidationError, OSError) as e:
            logger.warning("Could not restore %s, starting fresh: %s", path, e)
            store[LOAD_ERROR_KEY] = str(e)
            state = None
        session = RotationSession(state=state)
        formations_path = os.path.join(assets_dir, "formations.yaml")
        if state is None and os.path.exists(formations_path):
            session.state = apply_formations(session.state, load_formations_yaml(formations_path))
        store[SESSION_KEY] = session
        logger.info("Session ready (%s)", "restored" if state is not None else "new")
    return store[SESSION_KEY]


def autosave(session: RotationSession, path: str) -> None:
    save_state_json(path, session.state)
