# flag_rotation/config.py
from __future__ import annotations
import logging
import os
import textwrap
from typing import Optional

# ===== App defaults =====
DEFAULT_ROSTER = [
    "Atticus",
    "Barrett",
    "CJ",
    "Elijah",
    "Gunnar",
    "Jeremiah",
    "Logan L",
    "Logan M",
    "Niko",
    "Sully",
]

DEFAULT_SETTINGS = {
    "team_size": 7,
    "no_repeat_window": 1,   # block the same role family in consecutive series
}

ASSETS_DIR = "assets"
DEFAULT_STATE_PATH = os.path.join("state", "rotation_state.json")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def state_path() -> str:
    return os.environ.get("FLAG_ROTATION_STATE", DEFAULT_STATE_PATH)


def configure_logging(level: Optional[str] = None) -> None:
    lvl = (level or os.environ.get("FLAG_ROTATION_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, lvl, logging.INFO), format=LOG_FORMAT)


def ensure_assets_exist(base: str = ASSETS_DIR):
    os.makedirs(base, exist_ok=True)
    formations = os.path.join(base, "formations.yaml")
    if not os.path.exists(formations):
        with open(formations, "w", encoding="utf-8") as f:
            f.write(DEFAULT_FORMATIONS_YAML)
    sample = os.path.join(base, "sample_roster.csv")
    if not os.path.exists(sample):
        with open(sample, "w", encoding="utf-8") as f:
            f.write(DEFAULT_SAMPLE_ROSTER_CSV)


# ===== Formation resolution order (tight roles first) =====
DEFAULT_FORMATIONS_YAML = textwrap.dedent("""\
Offense:
  - off_qb
  - off_c
  - off_rb_left
  - off_rb_right
  - off_wr
  - off_te_left
  - off_te_right

Defense:
  - def_cb_left
  - def_de_left
  - def_dt
  - def_de_right
  - def_cb_right
  - def_spy
  - def_blitzer
""")

DEFAULT_SAMPLE_ROSTER_CSV = textwrap.dedent("""\
name,active,can_qb,can_center
Atticus,yes,yes,yes
Barrett,yes,yes,no
CJ,yes,no,yes
Elijah,yes,yes,yes
Gunnar,yes,no,yes
Jeremiah,yes,yes,yes
Logan L,yes,yes,no
Logan M,yes,yes,yes
Niko,no,yes,yes
Sully,yes,no,no
""")


def ui_css() -> str:
    return """
<style>
:root{
  --surface: rgba(18, 22, 31, 0.78);
  --line:#2a3142;
  --text:#eaf1fb;
  --sub:#B7C2D3;
  --accent:#3b8df5;
  --radius:16px;
}
.block-container { padding-top: 1rem; max-width: 1100px; }
.slot{
  background: var(--surface);
  border:1px solid var(--line);
  border-radius:12px;
  padding:10px 8px;
  text-align:center;
  min-height:72px;
}
.slot .label{ color: var(--sub); font-size:12px; font-weight:600; text-transform:uppercase; }
.slot .who{ color: var(--text); font-size:15px; margin-top:6px; }
.slot.open .who{ color: var(--sub); font-style: italic; }
.chip{
  display:inline-block; padding:4px 10px; margin:2px;
  border:1px solid var(--line); border-radius:999px; background: var(--surface);
}
.chip.sit{ border-color: var(--accent); }
</style>
"""
