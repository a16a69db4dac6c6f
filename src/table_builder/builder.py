"""
Composable builders for the county election table.

Pipeline:
- county characteristics (anchor) left-joined with the registration snapshot
- then left-joined with the 2016 presidential results, both on (State, County)
- derived proportion / indicator columns appended in DERIVED_COLUMNS order

Builders take already-loaded DataFrames; `build_from_sources` is the only
function that reads from disk.
"""

import logging
from pathlib import Path

import pandas as pd

from src.configs.derived import DERIVED_COLUMNS
from src.configs.sources import KEY_COLUMNS, SOURCES
from src.table_builder.derive import derive_columns
from src.table_builder.reader import read

logger = logging.getLogger(__name__)


def _check_keys(df: pd.DataFrame, name: str) -> None:
    missing = [k for k in KEY_COLUMNS if k not in df.columns]
    if missing:
        raise ValueError(f"Table '{name}' is missing key columns: {missing}")


def _check_unique_keys(df: pd.DataFrame, name: str) -> None:
    dup = df.duplicated(subset=KEY_COLUMNS, keep=False)
    if dup.any():
        sample = df.loc[dup, KEY_COLUMNS].drop_duplicates().head(5).values.tolist()
        raise ValueError(
            f"Table '{name}' has {int(dup.sum())} rows with duplicate (State, County) keys, e.g. {sample}"
        )


def prepare_right_table(
    df: pd.DataFrame,
    existing_columns,
    drop_columns: list[str] | None = None,
    suffix: str = "Reg",
) -> pd.DataFrame:
    """Drop identifying columns and suffix overlapping ones before a join.

    Args:
        df: Right-hand table to be joined.
        existing_columns: Column names already present on the other side(s).
        drop_columns: Redundant identifying/snapshot columns to remove.
        suffix: Tag appended to non-key columns that collide with existing_columns.

    Returns:
        New DataFrame; keys (State, County) are never dropped or renamed.
    """
    drop = [c for c in (drop_columns or []) if c not in KEY_COLUMNS]
    out = df.drop(columns=drop, errors="ignore")
    existing = set(existing_columns)
    overlap = [c for c in out.columns if c not in KEY_COLUMNS and c in existing]
    if overlap:
        rename = {c: f"{c}{suffix}" for c in overlap}
        clash = [new for new in rename.values() if new in existing or new in out.columns]
        if clash:
            raise ValueError(f"Suffix '{suffix}' does not disambiguate columns: {clash}")
        logger.info(f"Renaming overlapping columns: {rename}")
        out = out.rename(columns=rename)
    return out


def join_county_tables(
    characteristics: pd.DataFrame,
    registration: pd.DataFrame,
    results: pd.DataFrame,
    registration_drop: list[str] | None = None,
    registration_suffix: str | None = None,
    results_suffix: str | None = None,
) -> pd.DataFrame:
    """Left-join registration then results onto the county characteristics.

    Output has exactly one row per characteristics row, in the same order.
    Counties missing from a right table get missing values for its columns.
    """
    if registration_drop is None:
        registration_drop = SOURCES["party_registration"].get("drop_columns", [])
    if registration_suffix is None:
        registration_suffix = SOURCES["party_registration"].get("overlap_suffix", "Reg")
    if results_suffix is None:
        results_suffix = SOURCES["election_results"].get("overlap_suffix", "Results")

    for name, df in (
        ("county_characteristics", characteristics),
        ("party_registration", registration),
        ("election_results", results),
    ):
        _check_keys(df, name)
    _check_unique_keys(registration, "party_registration")
    _check_unique_keys(results, "election_results")

    reg = prepare_right_table(
        registration,
        existing_columns=list(characteristics.columns) + list(results.columns),
        drop_columns=registration_drop,
        suffix=registration_suffix,
    )
    out = characteristics.merge(reg, on=KEY_COLUMNS, how="left")
    logger.info(f"After merging 'party_registration': {len(out)} rows, {len(out.columns)} columns")

    res = prepare_right_table(results, existing_columns=out.columns, suffix=results_suffix)
    out = out.merge(res, on=KEY_COLUMNS, how="left")
    logger.info(f"After merging 'election_results': {len(out)} rows, {len(out.columns)} columns")

    if len(out) != len(characteristics):
        raise ValueError(
            f"Left join changed row count: {len(characteristics)} -> {len(out)}"
        )
    return out


def build_county_election_table(
    characteristics: pd.DataFrame,
    registration: pd.DataFrame,
    results: pd.DataFrame,
    steps: list[dict] | None = None,
) -> pd.DataFrame:
    """Join the three county tables and append derived columns.

    Args:
        characteristics: County characteristics (anchor, one row per county).
        registration: Party registration snapshot (already filtered to one year/month).
        results: Presidential election results.
        steps: Derived-column plan. Default: DERIVED_COLUMNS.

    Returns:
        DataFrame at county grain; input tables are left unchanged.
    """
    merged = join_county_tables(characteristics, registration, results)
    out = derive_columns(merged, DERIVED_COLUMNS if steps is None else steps)
    logger.info(f"Final county election table: {len(out)} rows, {len(out.columns)} columns")
    return out


def build_from_sources(base_path: Path | None = None) -> pd.DataFrame:
    """Read the three SOURCES tables and build the county election table."""
    characteristics = read("county_characteristics", base_path)
    registration = read("party_registration", base_path)
    results = read("election_results", base_path)
    return build_county_election_table(characteristics, registration, results)
