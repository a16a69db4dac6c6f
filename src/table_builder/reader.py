"""
Generic reader: load any table from SOURCES config into a DataFrame.

Single entry point for the three county sources. Handles format (csv/xlsx),
filters (the WHERE clause of the source query), key standardization,
renames and drop_columns.
"""

from pathlib import Path

import pandas as pd

from src.configs.sources import KEY_COLUMNS, SOURCES


def _resolve_path(path_str: str, base_path: Path | None) -> Path:
    p = Path(path_str)
    if not p.is_absolute() and base_path is not None:
        return base_path / p
    return p


def _read_file(path: Path, spec: dict) -> pd.DataFrame:
    fmt = spec.get("format", "csv").lower()
    if fmt == "xlsx":
        read_kw: dict = {"engine": "openpyxl"}
        if "sheet" in spec:
            read_kw["sheet_name"] = spec["sheet"]
        if "skiprows" in spec:
            read_kw["skiprows"] = spec["skiprows"]
        return pd.read_excel(path, **read_kw)
    if fmt == "csv":
        return pd.read_csv(path)
    raise ValueError(f"Unsupported format: {fmt}")


def _apply_filters(df: pd.DataFrame, filters: dict) -> pd.DataFrame:
    for col, val in filters.items():
        if col not in df.columns:
            raise ValueError(f"Filter column '{col}' not found. Available: {list(df.columns)}")
        if isinstance(val, list):
            df = df[df[col].isin(val)]
        else:
            df = df[df[col] == val]
    return df.reset_index(drop=True)


def _standardize_keys(df: pd.DataFrame, keys: dict, table_name: str) -> pd.DataFrame:
    """Rename raw key columns to canonical State/County and strip key values."""
    missing = [raw for raw in keys.values() if raw not in df.columns]
    if missing:
        raise ValueError(f"Table '{table_name}' is missing key columns: {missing}")
    df = df.rename(columns={raw: key for key, raw in keys.items() if raw != key})
    for key in KEY_COLUMNS:
        if key in df.columns:
            df[key] = df[key].astype(str).str.strip()
    return df


def _apply_drop_columns(df: pd.DataFrame, drop_columns: list[str]) -> pd.DataFrame:
    keep_keys = [c for c in drop_columns if c in KEY_COLUMNS]
    if keep_keys:
        raise ValueError(f"Key columns cannot be dropped: {keep_keys}")
    return df.drop(columns=drop_columns, errors="ignore")


def read(table_name: str, base_path: Path | None = None) -> pd.DataFrame:
    """Load a single table from SOURCES into a DataFrame.

    Args:
        table_name: Key in SOURCES (e.g. 'county_characteristics', 'party_registration').
        base_path: Project root for resolving relative paths.

    Returns:
        DataFrame with canonical State/County keys, filtered to the configured snapshot.
    """
    if table_name not in SOURCES:
        raise KeyError(f"Unknown table '{table_name}'. Available: {list(SOURCES)}")
    spec = SOURCES[table_name]

    path = _resolve_path(spec["path"], base_path)
    if not path.exists():
        raise FileNotFoundError(f"Data not found: {path}")
    df = _read_file(path, spec)

    # Filters (before drop; snapshot columns are dropped afterwards)
    if "filters" in spec:
        df = _apply_filters(df, spec["filters"])

    df = _standardize_keys(df, spec.get("keys", {}), table_name)

    if "rename" in spec:
        df = df.rename(columns=spec["rename"])

    if "drop_columns" in spec:
        df = _apply_drop_columns(df, spec["drop_columns"])

    return df


def read_many(table_names: list[str], base_path: Path | None = None) -> dict[str, pd.DataFrame]:
    """Load multiple tables. Returns dict mapping table name to DataFrame."""
    return {name: read(name, base_path) for name in table_names}


def list_tables() -> list[str]:
    """Return all available table names from SOURCES."""
    return list(SOURCES)
