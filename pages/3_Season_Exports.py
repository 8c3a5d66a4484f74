# FILE: pages/3_Season_Exports.py
import pandas as pd
import streamlit as st

from flag_rotation import SnapshotValidationError
from flag_rotation.config import DEFAULT_FORMATIONS_YAML, state_path, ui_css
from flag_rotation.constants import PHASES
from flag_rotation.io import (
    apply_formations,
    export_series_csv,
    fairness_summary_df,
    history_dataframe,
    parse_formations_yaml,
)
from flag_rotation.snapshot import dumps_snapshot
from flag_rotation.ui_helpers import autosave, session_from

st.markdown(ui_css(), unsafe_allow_html=True)
st.title("3. Season, Reports & Exports")

session = session_from(st.session_state, state_path())
state = session.state

# ---------- Fairness ----------
st.subheader("Fairness this game")
for col, phase in zip(st.columns(len(PHASES)), PHASES):
    col.markdown(f"**{phase}**")
    col.dataframe(fairness_summary_df(state, phase), hide_index=True, use_container_width=True)

st.subheader("Series history")
hist = history_dataframe(state)
if hist.empty:
    st.write("No series played yet.")
else:
    st.dataframe(hist, hide_index=True, use_container_width=True)

st.subheader("Season")
if state.season_history:
    season = pd.DataFrame([
        {"game": g.game, "ended": g.ended_at, "series": g.series_played, "players": len(g.attendance)}
        for g in state.season_history
    ])
    st.dataframe(season, hide_index=True, use_container_width=True)
else:
    st.write("No finished games yet.")

# ---------- Downloads ----------
st.subheader("Export")
d1, d2 = st.columns(2)
d1.download_button(
    "Download state (JSON)",
    data=dumps_snapshot(state).encode("utf-8"),
    file_name=f"rotation_game{state.game_number}.json",
    mime="application/json",
)
d2.download_button(
    "Download series (CSV)",
    data=export_series_csv(state),
    file_name=f"series_game{state.game_number}.csv",
    mime="text/csv",
    disabled=not state.history,
)

# ---------- Import ----------
st.subheader("Import")
uploaded = st.file_uploader("Restore state from JSON", type=["json"])
if uploaded is not None and st.button("Import state"):
    try:
        session.import_snapshot(uploaded.getvalue())
    except SnapshotValidationError as e:
        st.error(str(e))
    else:
        autosave(session, state_path())
        st.success(f"Imported {len(session.state.roster)} players.")

# ---------- Formations ----------
with st.expander("Formation resolution order"):
    current = "Offense:\n" + "".join(f"  - {r}\n" for r in state.settings.offense_order)
    current += "\nDefense:\n" + "".join(f"  - {r}\n" for r in state.settings.defense_order)
    text = st.text_area("formations.yaml", value=current, height=320)
    f1, f2 = st.columns(2)
    if f1.button("Apply order"):
        try:
            session.state = apply_formations(state, parse_formations_yaml(text))
        except ValueError as e:
            st.error(f"Invalid formations: {e}")
        else:
            autosave(session, state_path())
            st.success("Formation order updated.")
    if f2.button("Restore defaults"):
        session.state = apply_formations(state, parse_formations_yaml(DEFAULT_FORMATIONS_YAML))
        autosave(session, state_path())
        st.rerun()
