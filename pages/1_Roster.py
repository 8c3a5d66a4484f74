# FILE: pages/1_Roster.py
import streamlit as st

from flag_rotation import RotationError
from flag_rotation.config import state_path, ui_css
from flag_rotation.io import apply_roster_df, generate_template_csv_bytes, load_roster_csv
from flag_rotation.ui_helpers import autosave, display_name, session_from

st.markdown(ui_css(), unsafe_allow_html=True)
st.title("1. Roster: Attendance & Eligibility")

session = session_from(st.session_state, state_path())


def _apply(action, *args):
    try:
        action(*args)
    except RotationError as e:
        st.error(str(e))
        return False
    autosave(session, state_path())
    return True


# ---------- Add ----------
with st.form("add_player", clear_on_submit=True):
    new_name = st.text_input("Player name")
    if st.form_submit_button("Add player") and new_name.strip():
        if _apply(session.add_player, new_name):
            st.success(f"Added {new_name.strip()}.")

# ---------- Players ----------
st.caption(
    f"{len(session.active_players())} of {len(session.state.roster)} active · "
    f"{session.sit_count()} sit each series"
)
head = st.columns([3, 1, 1, 1, 1])
for col, label in zip(head, ["Player", "Here", "QB ok", "C ok", ""]):
    col.markdown(f"**{label}**")

for p in session.state.roster:
    name_col, here_col, qb_col, c_col, del_col = st.columns([3, 1, 1, 1, 1])
    renamed = name_col.text_input(
        "Name", value=p.name, key=f"name_{p.id}", label_visibility="collapsed", help=display_name(p)
    )
    if renamed.strip() and renamed.strip() != p.name:
        if _apply(session.rename_player, p.id, renamed):
            st.rerun()

    here = here_col.checkbox("Here", value=p.active, key=f"active_{p.id}", label_visibility="collapsed")
    if here != p.active:
        _apply(session.toggle_active, p.id)
        st.rerun()

    qb_ok = qb_col.checkbox("QB", value="off_qb" not in p.blocked_roles, key=f"qb_{p.id}", label_visibility="collapsed")
    if qb_ok != ("off_qb" not in p.blocked_roles):
        _apply(session.set_role_eligibility, p.id, "off_qb", qb_ok)
        st.rerun()

    c_ok = c_col.checkbox("C", value="off_c" not in p.blocked_roles, key=f"c_{p.id}", label_visibility="collapsed")
    if c_ok != ("off_c" not in p.blocked_roles):
        _apply(session.set_role_eligibility, p.id, "off_c", c_ok)
        st.rerun()

    if del_col.button("Remove", key=f"del_{p.id}"):
        _apply(session.remove_player, p.id)
        st.rerun()

# ---------- CSV import ----------
st.subheader("Import from CSV")
st.download_button(
    "Download template CSV",
    data=generate_template_csv_bytes(),
    file_name="roster_template.csv",
    mime="text/csv",
)
uploaded_file = st.file_uploader("Upload roster CSV", type=["csv"])
if uploaded_file is not None and st.button("Add players from CSV"):
    try:
        df = load_roster_csv(uploaded_file)
    except ValueError as e:
        st.error(f"Could not read roster: {e}")
    else:
        session.state, added, skipped = apply_roster_df(session.state, df)
        autosave(session, state_path())
        st.success(f"Added {len(added)} player(s).")
        if skipped:
            st.info("Skipped existing names: " + ", ".join(skipped))
