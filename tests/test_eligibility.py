# FILE: tests/test_eligibility.py
from flag_rotation.eligibility import can_fill, eligible_pool
from flag_rotation.engine_test_helpers import id_for, quick_state
from flag_rotation.models import RecentRole
from flag_rotation.roster import set_allowed_roles, set_role_eligibility

def _ids(state, names):
    return [id_for(state, n) for n in names]

def test_assigned_and_blocked_players_removed():
    s = quick_state(["Ava", "Ben", "Cal"], team_size=3)
    s = set_role_eligibility(s, id_for(s, "Ben"), "off_qb", False)
    cands = _ids(s, ["Ava", "Ben", "Cal"])
    pool, relaxed = eligible_pool(s, "off_qb", cands, {id_for(s, "Ava")}, 1)
    assert pool == [id_for(s, "Cal")]
    assert relaxed is False

def test_allowed_roles_restriction():
    s = quick_state(["Ava", "Ben"], team_size=2)
    s = set_allowed_roles(s, id_for(s, "Ava"), ["off_c", "def_dt"])
    ava = s.by_id()[id_for(s, "Ava")]
    assert can_fill(ava, "off_c")
    assert not can_fill(ava, "off_qb")
    s = set_allowed_roles(s, id_for(s, "Ava"), None)
    assert can_fill(s.by_id()[id_for(s, "Ava")], "off_qb")

def test_same_family_blocked_within_window():
    s = quick_state(["Ava", "Ben", "Cal"], team_size=3)
    ava, ben, cal = _ids(s, ["Ava", "Ben", "Cal"])
    s.recent_role_by_player = {
        ava: RecentRole(role="TE", series=3),   # same family, last series
        ben: RecentRole(role="QB", series=3),   # other family
        cal: RecentRole(role="TE", series=1),   # same family, outside window
    }
    pool, relaxed = eligible_pool(s, "off_te_right", [ava, ben, cal], set(), 4)
    assert pool == [ben, cal]
    assert relaxed is False

def test_wider_window_blocks_older_repeats():
    s = quick_state(["Ava", "Ben", "Cal"], team_size=3, window=2)
    ava, ben, cal = _ids(s, ["Ava", "Ben", "Cal"])
    s.recent_role_by_player = {
        ava: RecentRole(role="QB", series=3),   # two series ago
        ben: RecentRole(role="QB", series=2),   # three series ago
        cal: RecentRole(role="QB", series=4),
    }
    pool, relaxed = eligible_pool(s, "off_qb", [ava, ben, cal], set(), 5)
    assert pool == [ben]
    assert relaxed is False

def test_repeat_allowed_only_when_strict_pool_empty():
    s = quick_state(["Ava", "Ben"], team_size=2)
    ava, ben = _ids(s, ["Ava", "Ben"])
    s.recent_role_by_player = {ava: RecentRole(role="RB", series=5), ben: RecentRole(role="RB", series=5)}
    pool, relaxed = eligible_pool(s, "off_rb_left", [ava, ben], set(), 6)
    assert pool == [ava, ben]
    assert relaxed is True

def test_window_zero_disables_repeat_block():
    s = quick_state(["Ava", "Ben"], team_size=2, window=0)
    ava, ben = _ids(s, ["Ava", "Ben"])
    s.recent_role_by_player = {ava: RecentRole(role="QB", series=1)}
    pool, relaxed = eligible_pool(s, "off_qb", [ava, ben], set(), 2)
    assert pool == [ava, ben]
    assert relaxed is False

def test_no_able_candidate_is_hard_empty():
    s = quick_state(["Ava", "Ben"], team_size=2)
    for n in ["Ava", "Ben"]:
        s = set_role_eligibility(s, id_for(s, n), "off_c", False)
    pool, relaxed = eligible_pool(s, "off_c", _ids(s, ["Ava", "Ben"]), set(), 1)
    assert pool == []
    assert relaxed is False
