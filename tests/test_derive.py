"""Tests for src.table_builder.derive."""

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.configs.derived import DERIVED_COLUMNS, MINOR_CANDIDATE_COLUMNS
from src.table_builder.derive import (
    safe_ratio,
    step_reads,
    validate_steps,
    apply_step,
    derive_columns,
)


# --- safe_ratio ---


def test_safe_ratio_exact_division():
    out = safe_ratio(pd.Series([1, 3, 200]), pd.Series([4, 3, 1000]))
    assert out.tolist() == [0.25, 1.0, 0.2]


def test_safe_ratio_zero_denominator_is_missing():
    out = safe_ratio(pd.Series([5, 0]), pd.Series([0, 0]))
    assert out.isna().all()
    assert not np.isinf(out).any()


def test_safe_ratio_missing_denominator_is_missing():
    out = safe_ratio(pd.Series([5, 6]), pd.Series([np.nan, 2]))
    assert np.isnan(out.iloc[0])
    assert out.iloc[1] == 3.0


def test_safe_ratio_missing_numerator_is_missing():
    out = safe_ratio(pd.Series([np.nan]), pd.Series([2]))
    assert out.isna().all()


# --- step_reads ---


def test_step_reads_ratio_with_list_numerator():
    step = {"name": "p", "op": "ratio", "numerator": ["a", "b"], "denominator": "d"}
    assert step_reads(step) == ["a", "b", "d"]


def test_step_reads_missing_if_zero_not_duplicated():
    step = {"name": "p", "op": "ratio", "numerator": "a", "denominator": "d", "missing_if_zero": ["a", "g"]}
    assert step_reads(step) == ["a", "d", "g"]


def test_step_reads_unknown_op_raises():
    with pytest.raises(ValueError, match="Unknown op"):
        step_reads({"name": "x", "op": "log"})


# --- validate_steps ---


def test_validate_steps_accepts_earlier_derived_column():
    steps = [
        {"name": "total", "op": "sum", "columns": ["a", "b"]},
        {"name": "propA", "op": "ratio", "numerator": "a", "denominator": "total"},
    ]
    validate_steps(steps, ["a", "b"])


def test_validate_steps_rejects_forward_reference():
    steps = [
        {"name": "propA", "op": "ratio", "numerator": "a", "denominator": "total"},
        {"name": "total", "op": "sum", "columns": ["a", "b"]},
    ]
    with pytest.raises(ValueError, match="'propA' reads unavailable columns \\['total'\\]"):
        validate_steps(steps, ["a", "b"])


def test_validate_steps_rejects_overwrite():
    steps = [{"name": "a", "op": "complement", "column": "a"}]
    with pytest.raises(ValueError, match="overwrites existing column"):
        validate_steps(steps, ["a"])


def test_validate_steps_rejects_unnamed_step():
    with pytest.raises(ValueError, match="has no name"):
        validate_steps([{"op": "sum", "columns": ["a"]}], ["a"])


def test_default_plan_minor_candidates_divide_by_total_votes():
    steps = {s["name"]: s for s in DERIVED_COLUMNS}
    for name, votes in MINOR_CANDIDATE_COLUMNS.items():
        assert steps[name]["numerator"] == votes
        assert steps[name]["denominator"] == "totalvotes"


def test_default_plan_names_are_unique():
    names = [s["name"] for s in DERIVED_COLUMNS]
    assert len(names) == len(set(names))


# --- apply_step ---


def test_apply_step_sum_propagates_missing():
    df = pd.DataFrame({"a": [1, 2], "b": [3, np.nan]})
    out = apply_step(df, {"name": "s", "op": "sum", "columns": ["a", "b"]})
    assert out.name == "s"
    assert out.iloc[0] == 4
    assert np.isnan(out.iloc[1])


def test_apply_step_ratio_sums_numerator_columns():
    df = pd.DataFrame({"a": [50], "b": [150], "d": [1000]})
    out = apply_step(df, {"name": "p", "op": "ratio", "numerator": ["a", "b"], "denominator": "d"})
    assert out.iloc[0] == 0.2


def test_apply_step_ratio_missing_if_zero():
    df = pd.DataFrame({"votes": [0, 40], "adults": [100, 80]})
    step = {"name": "t", "op": "ratio", "numerator": "votes", "denominator": "adults", "missing_if_zero": ["votes"]}
    out = apply_step(df, step)
    assert np.isnan(out.iloc[0])
    assert out.iloc[1] == 0.5


def test_apply_step_complement():
    df = pd.DataFrame({"p": [0.2, np.nan]})
    out = apply_step(df, {"name": "q", "op": "complement", "column": "p"})
    assert out.iloc[0] == pytest.approx(0.8)
    assert np.isnan(out.iloc[1])


def test_apply_step_threshold_is_strict():
    df = pd.DataFrame({"rPct": [0.55, 0.49, 0.5, np.nan]})
    out = apply_step(df, {"name": "votedTrump", "op": "threshold", "column": "rPct", "value": 0.5})
    assert out.dtype == "boolean"
    assert out.iloc[0] == True  # noqa: E712
    assert out.iloc[1] == False  # noqa: E712
    assert out.iloc[2] == False  # noqa: E712
    assert out.iloc[3] is pd.NA


# --- derive_columns ---


def test_derive_columns_does_not_mutate_input():
    df = pd.DataFrame({"a": [1], "b": [2]})
    before = df.copy()
    out = derive_columns(df, [{"name": "s", "op": "sum", "columns": ["a", "b"]}])
    pd.testing.assert_frame_equal(df, before)
    assert list(out.columns) == ["a", "b", "s"]


def test_derive_columns_validates_before_running():
    df = pd.DataFrame({"a": [1]})
    with pytest.raises(ValueError, match="Invalid derived-column plan"):
        derive_columns(df, [{"name": "p", "op": "ratio", "numerator": "a", "denominator": "missing"}])
