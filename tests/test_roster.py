# FILE: tests/test_roster.py
import pytest
from pydantic import ValidationError

from flag_rotation.constants import ALL_ROLES, OFFENSE_ROLES
from flag_rotation.engine_test_helpers import id_for, quick_state, seeded
from flag_rotation.errors import DuplicateNameError, UnknownPlayerError, UnknownRoleError
from flag_rotation.game import run_series
from flag_rotation.models import RecentRole
from flag_rotation.roster import (
    add_player, build_roster, remove_player, rename_player, reset_positions_only,
    set_role_eligibility, start_new_game, toggle_active, update_settings,
)

def test_add_player_sorted_and_zeroed():
    s = build_roster(["cal", "Ava", "ben"])
    assert [p.name for p in s.roster] == ["Ava", "ben", "cal"]
    s, pid = add_player(s, "  Bea ")
    p = s.by_id()[pid]
    assert p.name == "Bea"
    assert p.active and p.sits == 0 and p.captains == 0
    assert set(p.pos) == set(ALL_ROLES) and not any(p.pos.values())
    assert [x.name for x in s.roster] == ["Ava", "Bea", "ben", "cal"]
    # newly active ids join the end of the bench queue
    assert s.queue[-1] == pid
    assert s.captain_plan.season_target_total == 8

def test_duplicate_name_rejected_case_insensitive():
    s = build_roster(["Ava"])
    with pytest.raises(DuplicateNameError):
        add_player(s, "ava")
    assert len(s.roster) == 1
    with pytest.raises(ValueError):
        add_player(s, "   ")

def test_rename_checks_duplicates():
    s = build_roster(["Ava", "Ben"])
    with pytest.raises(DuplicateNameError):
        rename_player(s, id_for(s, "Ben"), "AVA")
    s = rename_player(s, id_for(s, "Ben"), "Aaron")
    assert [p.name for p in s.roster] == ["Aaron", "Ava"]

def test_remove_player_purges_references():
    s = quick_state(["Ava", "Ben", "Cal"], team_size=2)
    ava = id_for(s, "Ava")
    s.recent_role_by_player[ava] = RecentRole(role="QB", series=1)
    s.captain_plan.pending_picks = [ava]
    s.captain_plan.recent_picks = [ava, id_for(s, "Ben")]
    s = remove_player(s, ava)
    assert ava not in s.queue
    assert ava not in s.recent_role_by_player
    assert s.captain_plan.pending_picks == []
    assert s.captain_plan.recent_picks == [id_for(s, "Ben")]
    with pytest.raises(UnknownPlayerError):
        remove_player(s, ava)

def test_toggle_active_reconciles_queue():
    s = quick_state(["Ava", "Ben", "Cal"], team_size=2)
    ben = id_for(s, "Ben")
    s.captain_plan.pending_picks = [ben]
    s = toggle_active(s, ben)
    assert ben not in s.queue
    assert s.captain_plan.pending_picks == []
    s = toggle_active(s, ben)
    assert s.queue[-1] == ben

def test_role_eligibility_round_trip():
    s = build_roster(["Ava"])
    ava = id_for(s, "Ava")
    s = set_role_eligibility(s, ava, "off_c", False)
    assert s.by_id()[ava].blocked_roles == ["off_c"]
    s = set_role_eligibility(s, ava, "off_c", True)
    assert s.by_id()[ava].blocked_roles == []
    with pytest.raises(UnknownRoleError):
        set_role_eligibility(s, ava, "kicker", False)

def test_reset_positions_only_keeps_captains():
    s = quick_state()
    s, _ = run_series(s, "Offense", seeded())
    s.roster[0].captains = 2
    s = reset_positions_only(s)
    assert all(p.sits == 0 and sum(p.pos.values()) == 0 for p in s.roster)
    assert s.roster[0].captains == 2
    assert s.history == [] and s.series == 0 and s.recent_role_by_player == {}
    assert len(s.roster) == 10

def test_start_new_game_archives_and_resets():
    s = quick_state()
    s = toggle_active(s, id_for(s, "Jo"))
    rng = seeded()
    for phase in ["Offense", "Defense"]:
        s, _ = run_series(s, phase, rng)
    s.roster[0].captains = 1
    s = start_new_game(s, ended_at="2026-10-18T10:00:00+00:00")

    assert s.game_number == 2
    summary = s.season_history[-1]
    assert summary.game == 1
    assert summary.series_played == 2
    assert summary.ended_at == "2026-10-18T10:00:00+00:00"
    assert "Jo" not in summary.attendance and len(summary.attendance) == 9
    assert all(p.sits == 0 and sum(p.pos.values()) == 0 for p in s.roster)
    assert s.roster[0].captains == 1
    assert s.history == [] and s.recent_role_by_player == {} and s.series == 0
    assert s.queue == s.active_ids()

def test_update_settings_validates():
    s = quick_state()
    s = update_settings(s, team_size=5)
    assert s.settings.team_size == 5
    with pytest.raises(ValidationError):
        update_settings(s, team_size=0)
    with pytest.raises(ValidationError):
        update_settings(s, offense_order=["off_qb", "off_qb"])
    with pytest.raises(ValidationError):
        update_settings(s, defense_order=["off_qb"])
    with pytest.raises(ValidationError):
        update_settings(s, offense_order=["off_qb", "off_c"])
    s = update_settings(s, offense_order=["off_c"] + [r for r in OFFENSE_ROLES if r != "off_c"])
    assert s.settings.offense_order[0] == "off_c"
    assert sorted(s.settings.offense_order) == sorted(OFFENSE_ROLES)
