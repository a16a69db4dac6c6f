"""
Derived-column engine: run an ordered list of named steps over a table.

Each step writes one column and reads raw or previously derived columns
(see src/configs/derived.py for the step format). Missing or zero
denominators yield missing values instead of errors.
"""

import numpy as np
import pandas as pd

OPS = ("sum", "ratio", "complement", "threshold")


def _as_list(cols) -> list[str]:
    return [cols] if isinstance(cols, str) else list(cols)


def _numeric(series: pd.Series) -> pd.Series:
    return pd.to_numeric(series, errors="coerce").astype("float64")


def safe_ratio(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """Divide element-wise; missing where the denominator is zero or missing."""
    num = _numeric(numerator)
    den = _numeric(denominator)
    den = den.where(den != 0, np.nan)
    return num / den


def _row_sum(df: pd.DataFrame, cols: list[str]) -> pd.Series:
    # any missing component makes the total missing
    return df[cols].apply(_numeric).sum(axis=1, skipna=False)


def step_reads(step: dict) -> list[str]:
    """Columns a step reads, in declaration order."""
    op = step.get("op")
    if op == "sum":
        return _as_list(step["columns"])
    if op == "ratio":
        reads = _as_list(step["numerator"]) + [step["denominator"]]
        for c in step.get("missing_if_zero", []):
            if c not in reads:
                reads.append(c)
        return reads
    if op in ("complement", "threshold"):
        return [step["column"]]
    raise ValueError(f"Unknown op '{op}' in step '{step.get('name')}'. Expected one of {OPS}")


def validate_steps(steps: list[dict], columns) -> None:
    """Check that every step reads only columns available at its position.

    Args:
        steps: Ordered step dicts.
        columns: Columns present before the first step runs.

    Raises:
        ValueError: On an unknown op, a read of a column not yet available,
            or a step that would overwrite an existing column.
    """
    available = set(columns)
    problems = []
    for i, step in enumerate(steps):
        name = step.get("name")
        if not name:
            raise ValueError(f"Step {i} has no name")
        missing = [c for c in step_reads(step) if c not in available]
        if missing:
            problems.append(f"step {i} '{name}' reads unavailable columns {missing}")
        if name in available:
            problems.append(f"step {i} '{name}' overwrites existing column")
        available.add(name)
    if problems:
        raise ValueError("Invalid derived-column plan: " + "; ".join(problems))


def apply_step(df: pd.DataFrame, step: dict) -> pd.Series:
    """Compute the column for a single step (does not modify df)."""
    op = step["op"]
    if op == "sum":
        out = _row_sum(df, _as_list(step["columns"]))
    elif op == "ratio":
        num_cols = _as_list(step["numerator"])
        numerator = df[num_cols[0]] if len(num_cols) == 1 else _row_sum(df, num_cols)
        out = safe_ratio(numerator, df[step["denominator"]])
        for c in step.get("missing_if_zero", []):
            guard = _numeric(df[c])
            out = out.where(guard.notna() & (guard != 0), np.nan)
    elif op == "complement":
        out = 1 - _numeric(df[step["column"]])
    elif op == "threshold":
        values = _numeric(df[step["column"]])
        out = (values > step["value"]).astype("boolean")
        out[values.isna()] = pd.NA
    else:
        raise ValueError(f"Unknown op '{op}' in step '{step.get('name')}'. Expected one of {OPS}")
    return out.rename(step["name"])


def derive_columns(df: pd.DataFrame, steps: list[dict]) -> pd.DataFrame:
    """Append every step's column in order. Returns a new DataFrame."""
    validate_steps(steps, df.columns)
    out = df.copy()
    for step in steps:
        out[step["name"]] = apply_step(out, step)
    return out
