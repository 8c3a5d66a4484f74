# FILE: flag_rotation/__init__.py
"""
flag_rotation package: roster model, bench queue, eligibility, fairness
selection, series transitions with undo, captain allocation, snapshots and IO.
"""
from .errors import (
    CaptainSelectionError,
    DuplicateNameError,
    InsufficientPlayersError,
    NothingToUndoError,
    RotationError,
    SnapshotValidationError,
    UnknownPlayerError,
    UnknownRoleError,
)
from .models import HistoryEntry, Player, RotationState, Settings
from .session import RotationSession

__all__ = [
    "models",
    "bench",
    "eligibility",
    "fairness",
    "game",
    "roster",
    "captains",
    "snapshot",
    "io",
    "RotationSession",
    "RotationState",
    "Player",
    "Settings",
    "HistoryEntry",
    "RotationError",
    "DuplicateNameError",
    "UnknownPlayerError",
    "UnknownRoleError",
    "InsufficientPlayersError",
    "NothingToUndoError",
    "CaptainSelectionError",
    "SnapshotValidationError",
]
