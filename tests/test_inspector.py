"""Tests for src.raw_table_inspector.inspector."""

import logging
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.configs.derived import ALL_AGE_COLUMNS
from src.raw_table_inspector.inspector import (
    inspect_dtypes,
    missing_counts,
    dataframe_to_markdown,
    describe_table,
    check_population_consistency,
    check_unmatched_keys,
)


def _ages(total: int, per_bucket: int) -> dict:
    row = {c: per_bucket for c in ALL_AGE_COLUMNS}
    row["TotalPopulation"] = total
    return row


# --- inspect_dtypes ---


def test_inspect_dtypes():
    df = pd.DataFrame({"a": [1], "b": ["x"]})
    out = inspect_dtypes(df)
    assert list(out.columns) == ["column", "dtype"]
    assert out["column"].tolist() == ["a", "b"]
    assert out["dtype"].iloc[0] == "int64"


# --- missing_counts ---


def test_missing_counts():
    df = pd.DataFrame({"a": [1, np.nan, 3, np.nan], "b": [1, 2, 3, 4]})
    out = missing_counts(df).set_index("column")
    assert out.loc["a", "missing"] == 2
    assert out.loc["a", "missing_pct"] == 50.0
    assert out.loc["b", "missing"] == 0


# --- describe_table ---


def test_describe_table_numeric_only():
    df = pd.DataFrame({"State": ["A", "B"], "propKids": [0.2, 0.4]})
    out = describe_table(df)
    assert out["column"].tolist() == ["propKids"]
    assert out.loc[0, "mean"] == pytest.approx(0.3)
    assert out.loc[0, "count"] == 2


def test_describe_table_no_numeric_columns():
    out = describe_table(pd.DataFrame({"State": ["A"]}))
    assert out.empty


# --- dataframe_to_markdown ---


def test_dataframe_to_markdown():
    df = pd.DataFrame({"column": ["propKids", "x"], "mean": [0.123456, 2.0]})
    out = dataframe_to_markdown(df).splitlines()
    assert len(out) == 4
    assert out[0] == "| column   | mean   |"
    assert out[1] == "| :-------- | :------ |"
    assert out[2] == "| propKids | 0.1235 |"
    assert out[3] == "| x        | 2      |"


# --- check_population_consistency ---


def test_population_consistency_flags_mismatch(caplog):
    rows = [
        {"State": "Alabama", "County": "Autauga", **_ages(1800, 100)},
        {"State": "Alabama", "County": "Baldwin", **_ages(2000, 100)},
        {"State": "Texas", "County": "Loving", **_ages(0, 0)},
    ]
    df = pd.DataFrame(rows)
    with caplog.at_level(logging.WARNING):
        out = check_population_consistency(df)
    assert out["County"].tolist() == ["Baldwin"]
    assert out.loc[0, "age_bucket_sum"] == 1800
    assert out.loc[0, "relative_diff"] == 0.1
    assert "1 counties have age buckets differing" in caplog.text


def test_population_consistency_within_tolerance():
    df = pd.DataFrame([{"State": "A", "County": "B", **_ages(1805, 100)}])
    out = check_population_consistency(df, tolerance=0.01)
    assert out.empty


def test_population_consistency_skips_without_columns(caplog):
    df = pd.DataFrame({"State": ["A"], "County": ["B"], "TotalPopulation": [10]})
    with caplog.at_level(logging.WARNING):
        out = check_population_consistency(df)
    assert out.empty
    assert "Population check skipped" in caplog.text


# --- check_unmatched_keys ---


def test_check_unmatched_keys():
    left = pd.DataFrame({"State": ["A", "A", "T"], "County": ["x", "y", "z"]})
    right = pd.DataFrame({"State": ["A", "A"], "County": ["x", "y"], "v": [1, 2]})
    out = check_unmatched_keys(left, right, "party_registration")
    assert out.values.tolist() == [["T", "z"]]
