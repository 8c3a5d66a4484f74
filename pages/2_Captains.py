# FILE: pages/2_Captains.py
import streamlit as st

from flag_rotation import RotationError
from flag_rotation.captains import next_group_size
from flag_rotation.config import state_path, ui_css
from flag_rotation.ui_helpers import autosave, names_for, session_from

st.markdown(ui_css(), unsafe_allow_html=True)
st.title("2. Captains: Balanced Groups")

session = session_from(st.session_state, state_path())
plan = session.state.captain_plan


def _apply(action, *args):
    try:
        action(*args)
    except RotationError as e:
        st.error(str(e))
        return
    autosave(session, state_path())
    st.rerun()


# ---------- Season plan ----------
games = st.number_input("Games remaining this season", min_value=1, value=plan.games_remaining, step=1)
if games != plan.games_remaining:
    _apply(session.set_games_remaining, int(games))

groups = session.captain_groups()
size = next_group_size(session.state)
m1, m2, m3 = st.columns(3)
m1.metric("Captains still needed", session.captains_needed())
m2.metric("Group plan", " / ".join(str(g) for g in groups) or "-")
m3.metric("This game", size)

if plan.recent_picks:
    st.write("Last accepted: " + ", ".join(names_for(session.state, plan.recent_picks)))

# ---------- Picks ----------
b1, b2, b3 = st.columns(3)
if b1.button("Pick captains", type="primary", use_container_width=True):
    _apply(session.pick_captains)
if b2.button(f"Accept ({len(plan.pending_picks)}/{size})", use_container_width=True,
             disabled=len(plan.pending_picks) != size):
    _apply(session.accept_captains)
if b3.button("Clear picks", use_container_width=True, disabled=not plan.pending_picks):
    _apply(session.clear_pending_captains)

st.caption("Tap a player to add or drop them from this game's captains.")
players = session.active_players()
cols = st.columns(3)
for i, p in enumerate(sorted(players, key=lambda x: (x.captains, x.name.lower()))):
    picked = p.id in plan.pending_picks
    label = f"{'★ ' if picked else ''}{p.name} · {p.captains}"
    if cols[i % 3].button(label, key=f"cap_{p.id}", use_container_width=True,
                          type="primary" if picked else "secondary"):
        _apply(session.toggle_pending_captain, p.id)
