# FILE: flag_rotation/errors.py
"""
Recoverable errors raised by state transitions. A raised error always means
the state was left untouched.
"""
from __future__ import annotations


class RotationError(Exception):
    pass


class DuplicateNameError(RotationError, ValueError):
    def __init__(self, name: str):
        super().__init__(f"A player named '{name}' is already on the roster.")
        self.name = name


class UnknownPlayerError(RotationError, KeyError):
    def __init__(self, player_id: str):
        super().__init__(player_id)
        self.player_id = player_id

    def __str__(self) -> str:
        return f"Unknown player id: {self.player_id}"


class UnknownRoleError(RotationError, ValueError):
    def __init__(self, role: str):
        super().__init__(f"Unknown role: {role}")
        self.role = role


class InsufficientPlayersError(RotationError):
    def __init__(self, required: int, available: int):
        super().__init__(f"Need at least {required} active players. Currently {available}.")
        self.required = required
        self.available = available


class NothingToUndoError(RotationError):
    def __init__(self):
        super().__init__("Nothing to undo.")


class CaptainSelectionError(RotationError):
    pass


class SnapshotValidationError(RotationError, ValueError):
    pass
