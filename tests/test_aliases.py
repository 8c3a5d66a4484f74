# FILE: tests/test_aliases.py
import pandas as pd
from flag_rotation.aliases import map_headers

def test_map_headers_basic():
    df = pd.DataFrame(columns=["Player", "Present", "canQB", "C OK", "Jersey"])
    mapped_df, mapping = map_headers(df)
    assert mapping["Player"] == "name"
    assert mapping["Present"] == "active"
    assert mapping["canQB"] == "can_qb"
    assert mapping["C OK"] == "can_center"
    assert mapping["Jersey"] is None
    assert list(mapped_df.columns) == ["name", "active", "can_qb", "can_center", "Jersey"]
