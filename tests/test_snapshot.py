# FILE: tests/test_snapshot.py
import json
import pytest

from flag_rotation.captains import accept_captains, pick_captains
from flag_rotation.engine_test_helpers import quick_state, seeded
from flag_rotation.errors import SnapshotValidationError
from flag_rotation.game import run_series
from flag_rotation.models import DEFAULT_CAPTAIN_GAMES, SCHEMA_VERSION
from flag_rotation.roster import set_role_eligibility, start_new_game
from flag_rotation.session import RotationSession
from flag_rotation.snapshot import dumps_snapshot, export_snapshot, import_snapshot, upgrade_snapshot

def _busy_state():
    s = quick_state()
    rng = seeded(21)
    s = set_role_eligibility(s, s.roster[0].id, "off_qb", False)
    s = accept_captains(pick_captains(s, rng))
    for phase in ["Offense", "Defense", "Offense"]:
        s, _ = run_series(s, phase, rng)
    s = start_new_game(s, ended_at="2026-10-01T18:00:00+00:00")
    for phase in ["Defense", "Offense"]:
        s, _ = run_series(s, phase, rng)
    return s

def test_export_import_round_trip():
    s = _busy_state()
    data = export_snapshot(s)
    assert data["version"] == SCHEMA_VERSION
    assert import_snapshot(data) == s

def test_json_text_round_trip():
    s = _busy_state()
    text = dumps_snapshot(s)
    again = import_snapshot(text)
    assert again == s
    assert dumps_snapshot(again) == text

LEGACY = {
    "roster": [
        {"id": "a", "name": "Ava", "active": True, "sits": 1, "captains": 2,
         "pos": {"QB": 2, "off_qb": 1, "RB1": 1}, "canQB": False, "canCenter": True},
        {"id": "b", "name": "Ben", "active": True, "sits": 0, "captains": 1, "pos": {}},
        {"id": "c", "name": "Cal", "active": False, "pos": {"TE2": 3}},
    ],
    "queue": ["b", "zzz", "c", "a"],
    "series": 1,
    "history": [{
        "phase": "Offense", "series": 1, "sitIds": [], "playIds": ["a", "b", "zzz"],
        "offense": {"QB": "b", "RB1": "a", "WR": "zzz"}, "defense": None, "recentBefore": {},
    }],
    "settings": {"teamSize": 2, "noRepeatWindow": 1, "assignment": "randBalanced"},
    "recentRoleByPlayer": {
        "a": {"role": "off_rb_left", "series": 1},
        "b": {"role": "QB", "series": 1},
        "zzz": {"role": "WR", "series": 1},
    },
    "captainPlan": {"seasonTargetTotal": 6, "recentPicks": ["a", "zzz"], "pendingPicks": [],
                    "gamesRemaining": 2, "nextGroupIndex": 1},
    "captainQueue": ["a"],
    "captainIndex": 0,
    "lastQB": "b",
    "gameNumber": 3,
    "seasonHistory": [{"game": 1, "endedAt": "2025-09-01T00:00:00Z", "attendance": ["Ava"], "seriesPlayed": 8}],
    "ui": {"showAttendance": False},
}

def test_legacy_snapshot_is_upgraded_and_normalized():
    s = import_snapshot(LEGACY)
    by = s.by_id()
    assert by["a"].pos["off_qb"] == 3
    assert by["a"].pos["off_rb_left"] == 1
    assert "QB" not in by["a"].pos
    assert by["a"].blocked_roles == ["off_qb"]
    assert by["b"].blocked_roles == []
    assert by["c"].pos["off_te_right"] == 3
    assert sum(by["b"].pos.values()) == 0

    assert s.queue == ["b", "a"]
    assert {pid: r.role for pid, r in s.recent_role_by_player.items()} == {"a": "RB", "b": "QB"}
    entry = s.history[0]
    assert entry.offense == {"off_qb": "b", "off_rb_left": "a"}
    assert entry.play_ids == ["a", "b"]
    assert entry.advance == 1
    assert s.settings.team_size == 2
    assert s.captain_plan.recent_picks == ["a"]
    assert s.captain_plan.games_remaining == 2
    assert s.game_number == 3
    assert s.season_history[0].series_played == 8

def test_upgrade_does_not_touch_input():
    before = json.dumps(LEGACY, sort_keys=True)
    upgrade_snapshot(LEGACY)
    assert json.dumps(LEGACY, sort_keys=True) == before

@pytest.mark.parametrize("bad", [
    "not json {",
    "[1, 2, 3]",
    {"version": SCHEMA_VERSION + 1},
    {"version": 2, "roster": [{"name": "No Id"}]},
    {"version": 2, "roster": [{"id": "a", "name": "Ava"}, {"id": "b", "name": "AVA"}]},
    {"version": 2, "roster": [{"id": "a", "name": "Ava", "pos": {"off_qb": -1}}]},
    {"version": 2, "roster": ["just a name"]},
    {"version": 2, "settings": {"team_size": 0}},
])
def test_malformed_snapshots_rejected(bad):
    with pytest.raises(SnapshotValidationError):
        import_snapshot(bad)

def test_failed_import_leaves_session_untouched():
    session = RotationSession(seed=1)
    session.run_series("Offense")
    before = session.export_snapshot()
    with pytest.raises(SnapshotValidationError):
        session.import_snapshot({"version": 2, "roster": [{"id": "x"}]})
    assert session.export_snapshot() == before

def test_legacy_zero_games_remaining_falls_back_to_default():
    legacy = json.loads(json.dumps(LEGACY))
    legacy["captainPlan"]["gamesRemaining"] = 0
    s = import_snapshot(legacy)
    assert s.captain_plan.games_remaining == DEFAULT_CAPTAIN_GAMES
