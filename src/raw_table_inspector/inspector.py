import logging

import numpy as np
import pandas as pd

from src.configs.derived import ALL_AGE_COLUMNS
from src.configs.sources import KEY_COLUMNS

logger = logging.getLogger(__name__)


def inspect_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    """Return a small DataFrame listing each column and its dtype."""
    return (
        df.dtypes.astype(str)
        .reset_index()
        .rename(columns={"index": "column", 0: "dtype"})
    )


def missing_counts(df: pd.DataFrame) -> pd.DataFrame:
    """Missing value count and percentage per column."""
    n = len(df)
    missing = df.isna().sum()
    out = missing.reset_index().rename(columns={"index": "column", 0: "missing"})
    out["missing_pct"] = (100.0 * out["missing"] / n) if n else 0.0
    return out


def describe_table(df: pd.DataFrame) -> pd.DataFrame:
    """Descriptive statistics for numeric columns, one row per column."""
    numeric = df.select_dtypes(include=["number"])
    if numeric.empty:
        return pd.DataFrame()
    return numeric.describe().T.reset_index().rename(columns={"index": "column"})


def dataframe_to_markdown(df: pd.DataFrame) -> str:
    """Format a DataFrame as a markdown table without requiring tabulate."""
    rows = [list(df.columns)]
    for _, r in df.iterrows():
        rows.append([f"{x:.4g}" if isinstance(x, float) else str(x) for x in r])
    ncols = len(rows[0])
    widths = [max(len(str(rows[i][j])) for i in range(len(rows))) for j in range(ncols)]
    lines = []
    for i, row in enumerate(rows):
        line = "| " + " | ".join(str(x).ljust(widths[j]) for j, x in enumerate(row)) + " |"
        lines.append(line)
        if i == 0:
            sep = "| " + " | ".join(":" + "-" * max(2, w) for w in widths) + " |"
            lines.append(sep)
    return "\n".join(lines)


def check_population_consistency(
    df: pd.DataFrame,
    tolerance: float = 0.01,
    total_col: str = "TotalPopulation",
) -> pd.DataFrame:
    """
    Compare the sum of all age buckets against the total population.
    Returns rows whose relative difference exceeds `tolerance` and logs a warning.
    Rows with a missing or zero total are skipped.
    """
    cols = [c for c in ALL_AGE_COLUMNS if c in df.columns]
    if total_col not in df.columns or len(cols) != len(ALL_AGE_COLUMNS):
        logger.warning(f"Population check skipped: missing {total_col} or age bucket columns")
        return df.iloc[0:0][[c for c in KEY_COLUMNS if c in df.columns]]

    total = pd.to_numeric(df[total_col], errors="coerce")
    age_sum = df[cols].apply(pd.to_numeric, errors="coerce").sum(axis=1, skipna=False)
    rel_diff = (age_sum - total).abs() / total.where(total != 0, np.nan)
    bad = rel_diff > tolerance

    out = df.loc[bad, KEY_COLUMNS].copy()
    out["age_bucket_sum"] = age_sum[bad]
    out[total_col] = total[bad]
    out["relative_diff"] = rel_diff[bad]
    if len(out):
        logger.warning(
            f"{len(out)} counties have age buckets differing from {total_col} by more than {tolerance:.1%}"
        )
    return out.reset_index(drop=True)


def check_unmatched_keys(left: pd.DataFrame, right: pd.DataFrame, name: str) -> pd.DataFrame:
    """(State, County) pairs in `left` with no match in `right`."""
    right_keys = right[KEY_COLUMNS].drop_duplicates()
    merged = left[KEY_COLUMNS].merge(right_keys, on=KEY_COLUMNS, how="left", indicator=True)
    out = merged.loc[merged["_merge"] == "left_only", KEY_COLUMNS].reset_index(drop=True)
    if len(out):
        logger.info(f"{len(out)} of {len(left)} counties have no match in '{name}'")
    return out
