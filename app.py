# app.py
from datetime import datetime, timezone
from typing import List

import streamlit as st

from flag_rotation import RotationError
from flag_rotation.config import configure_logging, ensure_assets_exist, state_path, ui_css
from flag_rotation.constants import PHASES, ROLE_LABELS
from flag_rotation.game import open_roles
from flag_rotation.io import tally_dataframe
from flag_rotation.ui_helpers import LOAD_ERROR_KEY, autosave, board_rows, names_for, session_from


# ---------- Page & Theme ----------
st.set_page_config(page_title="Flag Football Rotation", layout="wide")
st.markdown(ui_css(), unsafe_allow_html=True)

configure_logging()
ensure_assets_exist()

session = session_from(st.session_state, state_path())
ss = st.session_state
ss.setdefault("board_phase", "Offense")
if ss.get(LOAD_ERROR_KEY):
    st.warning(f"Saved state could not be loaded, started a fresh game: {ss.pop(LOAD_ERROR_KEY)}")


def _run(action, *args, **kwargs):
    """Run a session action, surfacing engine errors instead of crashing the page."""
    try:
        result = action(*args, **kwargs)
    except RotationError as e:
        st.error(str(e))
        return None
    autosave(session, state_path())
    return result


def _chips(names: List[str], kind: str = "") -> str:
    if not names:
        return "<span class='chip'>-</span>"
    return " ".join(f"<span class='chip {kind}'>{n}</span>" for n in names)


# ---------- Sidebar ----------
with st.sidebar:
    st.header("Game")
    st.write(f"Game **{session.state.game_number}** · Series **{session.state.series}**")
    team_size = st.number_input(
        "Players on field", min_value=1, max_value=22, value=session.state.settings.team_size, step=1
    )
    block_repeats = st.toggle(
        "Avoid same role back-to-back", value=session.state.settings.no_repeat_window > 0
    )
    if team_size != session.state.settings.team_size or block_repeats != (session.state.settings.no_repeat_window > 0):
        _run(session.update_settings, team_size=int(team_size), no_repeat_window=1 if block_repeats else 0)
        st.rerun()

    st.divider()
    if st.button("Reset positions (keep captains)", use_container_width=True):
        _run(session.reset_positions_only)
        st.rerun()
    if st.button("Start new game", type="primary", use_container_width=True):
        _run(session.start_new_game, ended_at=datetime.now(timezone.utc).isoformat(timespec="seconds"))
        st.rerun()


# ---------- Controls ----------
st.title("Flag Football Rotation")

active = session.active_players()
st.caption(f"{len(active)} active · {session.sit_count()} sit each series")

c1, c2, c3 = st.columns(3)
with c1:
    if st.button("Run Offense", type="primary", use_container_width=True):
        if _run(session.run_series, "Offense") is not None:
            ss.board_phase = "Offense"
with c2:
    if st.button("Run Defense", type="primary", use_container_width=True):
        if _run(session.run_series, "Defense") is not None:
            ss.board_phase = "Defense"
with c3:
    if st.button("Undo last series", use_container_width=True, disabled=not session.state.history):
        _run(session.undo)
        last = session.last_entry()
        if last is not None:
            ss.board_phase = last.phase


# ---------- Formation board ----------
entry = session.last_entry()
phase = entry.phase if entry is not None else ss.board_phase
mapping = entry.mapping if entry is not None else None

st.subheader(f"Series {entry.series}: {phase}" if entry is not None else "No series yet")
for row in board_rows(phase, mapping, session.state):
    cols = st.columns(len(row))
    for col, cell in zip(cols, row):
        if cell is None:
            continue
        label, who = cell
        cls = "slot" if who else "slot open"
        col.markdown(
            f"<div class='{cls}'><div class='label'>{label}</div><div class='who'>{who or 'OPEN'}</div></div>",
            unsafe_allow_html=True,
        )

if entry is not None:
    missing = open_roles(entry, session.state.settings)
    if missing:
        st.warning("Open: " + ", ".join(ROLE_LABELS[r] for r in missing))
    if entry.repeats_allowed:
        st.info("Repeated to fill: " + ", ".join(ROLE_LABELS[r] for r in entry.repeats_allowed))
    st.markdown("**Sat out:** " + _chips(names_for(session.state, entry.sit_ids), "sit"), unsafe_allow_html=True)


# ---------- Next series preview ----------
st.subheader("Next series")
sitting, playing = session.preview()
st.markdown("**Sitting:** " + _chips(names_for(session.state, sitting), "sit"), unsafe_allow_html=True)
st.markdown("**Playing:** " + _chips(names_for(session.state, playing)), unsafe_allow_html=True)


# ---------- Tallies ----------
with st.expander("Playing time", expanded=False):
    tab_phase = st.radio("Phase", ["All"] + list(PHASES), horizontal=True)
    df = tally_dataframe(session.state, None if tab_phase == "All" else tab_phase)
    st.dataframe(df.drop(columns=["player_id"]), hide_index=True, use_container_width=True)
