# FILE: flag_rotation/aliases.py
ALIASES = {
    "name": ["Name", "Player", "Full Name", "Player Name"],
    "active": ["Active", "Present", "IsPresent", "Available", "Here"],
    "can_qb": ["can_qb", "canQB", "QB", "Can QB", "QB OK"],
    "can_center": ["can_center", "canCenter", "Center", "Can Center", "C OK"],
}


def map_headers(df):
    """
    Map input DataFrame columns to canonical roster names using aliases.
    Returns (renamed_df, mapping_report).
    """
    mapping = {}
    rename_cols = {}
    for col in df.columns:
        key = str(col).strip().lower()
        matched = None
        for canon, aliases in ALIASES.items():
            if key == canon or key in [a.lower() for a in aliases]:
                matched = canon
                break
        mapping[col] = matched
        if matched:
            rename_cols[col] = matched
    df = df.rename(columns=rename_cols)
    return df, mapping
