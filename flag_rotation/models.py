# flag_rotation/models.py
from __future__ import annotations
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import ALL_ROLES, DEFENSE_ROLES, OFFENSE_ROLES

SCHEMA_VERSION = 2
DEFAULT_CAPTAIN_GAMES = 3

Phase = Literal["Offense", "Defense"]


def empty_role_counts() -> Dict[str, int]:
    return {r: 0 for r in ALL_ROLES}


def _known_roles(roles: List[str], universe: List[str], label: str) -> List[str]:
    unknown = [r for r in roles if r not in universe]
    if unknown:
        raise ValueError(f"{label} contains unknown roles: {unknown}")
    return sorted(set(roles))


class Player(BaseModel):
    id: str
    name: str
    active: bool = True
    sits: int = Field(0, ge=0)            # series on the bench this game
    captains: int = Field(0, ge=0)        # season-to-date
    pos: Dict[str, int] = Field(default_factory=empty_role_counts)  # role -> plays this game
    blocked_roles: List[str] = Field(default_factory=list)  # roles this player may not fill
    allowed_roles: Optional[List[str]] = None               # None = unrestricted

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("pos")
    @classmethod
    def _backfill_pos(cls, v):
        out = {}
        for role in ALL_ROLES:
            n = int(v.get(role, 0))
            if n < 0:
                raise ValueError(f"negative count for {role}")
            out[role] = n
        return out

    @field_validator("blocked_roles")
    @classmethod
    def _blocked_known(cls, v):
        return _known_roles(v, ALL_ROLES, "blocked_roles")

    @field_validator("allowed_roles")
    @classmethod
    def _allowed_known(cls, v):
        if v is None:
            return v
        return _known_roles(v, ALL_ROLES, "allowed_roles")


class Settings(BaseModel):
    team_size: int = Field(7, ge=1)
    no_repeat_window: int = Field(1, ge=0)  # 0 disables the same-family block
    offense_order: List[str] = Field(default_factory=lambda: OFFENSE_ROLES[:])
    defense_order: List[str] = Field(default_factory=lambda: DEFENSE_ROLES[:])

    @field_validator("offense_order")
    @classmethod
    def _offense_order(cls, v):
        return _check_order(v, OFFENSE_ROLES, "offense_order")

    @field_validator("defense_order")
    @classmethod
    def _defense_order(cls, v):
        return _check_order(v, DEFENSE_ROLES, "defense_order")


def _check_order(order: List[str], universe: List[str], label: str) -> List[str]:
    if not order:
        raise ValueError(f"{label} must list at least one role")
    if len(set(order)) != len(order):
        raise ValueError(f"{label} lists a role twice")
    _known_roles(order, universe, label)
    missing = [r for r in universe if r not in order]
    if missing:
        raise ValueError(f"{label} must list every role; missing: {missing}")
    return list(order)


class RecentRole(BaseModel):
    role: str      # role family, not the role id
    series: int = 0


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Phase
    series: int
    sit_ids: List[str] = Field(default_factory=list)
    play_ids: List[str] = Field(default_factory=list)
    offense: Optional[Dict[str, str]] = None   # role -> player id; unfilled roles absent
    defense: Optional[Dict[str, str]] = None
    recent_before: Dict[str, RecentRole] = Field(default_factory=dict)
    advance: int = Field(1, ge=1)              # bench rotation applied after this series
    repeats_allowed: List[str] = Field(default_factory=list)  # roles where the anti-repeat rule was relaxed

    @property
    def mapping(self) -> Dict[str, str]:
        m = self.offense if self.phase == "Offense" else self.defense
        return dict(m or {})


class CaptainPlan(BaseModel):
    season_target_total: int = Field(0, ge=0)
    games_remaining: int = Field(DEFAULT_CAPTAIN_GAMES, ge=1)
    next_group_index: int = Field(0, ge=0)
    recent_picks: List[str] = Field(default_factory=list)
    pending_picks: List[str] = Field(default_factory=list)


class GameSummary(BaseModel):
    game: int
    ended_at: str
    attendance: List[str] = Field(default_factory=list)
    series_played: int = 0


class RotationState(BaseModel):
    version: int = SCHEMA_VERSION
    roster: List[Player] = Field(default_factory=list)   # sorted by name
    queue: List[str] = Field(default_factory=list)       # bench rotation of active ids
    series: int = Field(0, ge=0)
    history: List[HistoryEntry] = Field(default_factory=list)
    settings: Settings = Field(default_factory=Settings)
    recent_role_by_player: Dict[str, RecentRole] = Field(default_factory=dict)
    captain_plan: CaptainPlan = Field(default_factory=CaptainPlan)
    game_number: int = Field(1, ge=1)
    season_history: List[GameSummary] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_players(self):
        ids = [p.id for p in self.roster]
        if len(set(ids)) != len(ids):
            raise ValueError("roster contains duplicate player ids")
        names = [p.name.lower() for p in self.roster]
        if len(set(names)) != len(names):
            raise ValueError("roster contains duplicate player names")
        return self

    def by_id(self) -> Dict[str, Player]:
        return {p.id: p for p in self.roster}

    def active_players(self) -> List[Player]:
        return [p for p in self.roster if p.active]

    def active_ids(self) -> List[str]:
        return [p.id for p in self.roster if p.active]
