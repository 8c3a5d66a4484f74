"""
Internal helpers for tests (not imported by app).
"""
from __future__ import annotations
from typing import List, Optional
import numpy as np

from .models import RotationState
from .roster import build_roster, update_settings

NAMES_10 = ["Ava", "Ben", "Cal", "Dee", "Eli", "Fay", "Gus", "Hal", "Ivy", "Jo"]


def quick_state(names: Optional[List[str]] = None, team_size: int = 7, window: int = 1) -> RotationState:
    state = build_roster(names if names is not None else NAMES_10)
    return update_settings(state, team_size=team_size, no_repeat_window=window)


def seeded(seed: int = 7) -> np.random.Generator:
    return np.random.default_rng(seed)


def id_for(state: RotationState, name: str) -> str:
    for p in state.roster:
        if p.name == name:
            return p.id
    raise KeyError(name)
