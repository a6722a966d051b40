import pandas as pd
from .schemas import SCHEMAS

NULL_VALUES = ("", "NULL", "N/A", "None")


def to_string(val):
    if pd.isna(val) or str(val).strip() in NULL_VALUES:
        return None
    return str(val).strip()


def to_text(val):
    """Cell as written, stripped. Only a missing cell is None."""
    if pd.isna(val):
        return None
    return str(val).strip()


TYPE_FUNCS = {
    "string": to_string,
    "text": to_text,
}


def select_positional(df, columns):
    """Pick columns by position and name them, e.g. {"review_id": 1}."""
    picked = df.iloc[:, list(columns.values())].copy()
    picked.columns = list(columns.keys())
    return picked


def process_table(df, table_name):
    """Apply schema transformations to dataframe."""
    schema = SCHEMAS[table_name]

    cols_to_keep = [c for c in schema.keys() if c in df.columns]
    df = df[cols_to_keep].copy()

    for col, type_name in schema.items():
        if col in df.columns:
            func = TYPE_FUNCS[type_name]
            df[col] = pd.Series([func(v) for v in df[col]], index=df.index, dtype=object)

    return df
