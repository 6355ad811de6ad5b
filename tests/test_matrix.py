"""
Tests for long-format to matrix conversion.
"""

import pytest
import numpy as np
import pandas as pd

from runscore import ScoringConfig, build_value_matrix
from runscore.validation import InvalidInputError, ShapeError


def _long_runs(values_by_run, run_column="run_number"):
    rows = []
    for run_id, values in values_by_run.items():
        for t, v in enumerate(values):
            rows.append({run_column: run_id, "year": 2000 + t, "value": v})
    return pd.DataFrame(rows)


class TestBuildValueMatrix:
    """Test reshaping of run output."""

    def test_shape_and_columns(self):
        """K runs of length L give an L x K matrix, column j = j-th run."""
        rng = np.random.default_rng(0)
        runs = {run_id: rng.normal(size=5) for run_id in [1, 2, 3, 4]}
        m = build_value_matrix(_long_runs(runs))

        assert m.shape == (5, 4)
        for j, run_id in enumerate(sorted(runs)):
            np.testing.assert_array_equal(m[:, j], runs[run_id])

    def test_columns_follow_ascending_run_id(self):
        """Columns are ordered by run identifier, not by appearance."""
        df = _long_runs({10: [10.0, 11.0], 2: [2.0, 3.0], 5: [5.0, 6.0]})
        m = build_value_matrix(df)
        np.testing.assert_array_equal(m, [[2.0, 5.0, 10.0], [3.0, 6.0, 11.0]])

    def test_row_order_is_preserved(self):
        """Rows are taken in input order, without sorting by time."""
        df = _long_runs({1: [1.0, 2.0, 3.0], 2: [4.0, 5.0, 6.0]})
        df = df.iloc[::-1]
        m = build_value_matrix(df)
        np.testing.assert_array_equal(m[:, 0], [3.0, 2.0, 1.0])

    def test_other_column(self):
        df = _long_runs({1: [1.0, 2.0], 2: [3.0, 4.0]})
        m = build_value_matrix(df, column="year")
        np.testing.assert_array_equal(m, [[2000, 2000], [2001, 2001]])

    def test_custom_run_column(self):
        df = _long_runs({1: [1.0], 2: [2.0]}, run_column="member")
        m = build_value_matrix(df, config=ScoringConfig(run_column="member"))
        np.testing.assert_array_equal(m, [[1.0, 2.0]])

    def test_unequal_lengths_raise(self):
        df = _long_runs({1: [1.0, 2.0, 3.0], 2: [1.0, 2.0]})
        with pytest.raises(ShapeError, match="unequal numbers of rows"):
            build_value_matrix(df)

    def test_missing_column_raises(self):
        df = _long_runs({1: [1.0], 2: [2.0]}).drop(columns="value")
        with pytest.raises(InvalidInputError, match="missing required columns"):
            build_value_matrix(df)

    def test_missing_run_id(self):
        df = _long_runs({1: [1.0, 2.0], 2: [3.0, 4.0], 3: [5.0, 6.0]})
        df["run_number"] = df["run_number"].astype(float)
        df.loc[df["run_number"] == 3, "run_number"] = np.nan
        with pytest.raises(InvalidInputError, match="2 missing value"):
            build_value_matrix(df)

    @pytest.mark.parametrize("bad_id", [0, -2, 1.5, "a"])
    def test_invalid_run_ids(self, bad_id):
        """Run identifiers must be integers >= 1."""
        df = _long_runs({1: [1.0, 2.0], bad_id: [3.0, 4.0]})
        with pytest.raises(InvalidInputError, match="integers >= 1"):
            build_value_matrix(df)

    def test_integral_float_run_ids(self):
        df = _long_runs({1.0: [1.0], 2.0: [2.0]})
        np.testing.assert_array_equal(build_value_matrix(df), [[1.0, 2.0]])

    def test_missing_values_kept(self):
        df = _long_runs({1: [1.0, np.nan], 2: [2.0, 3.0]})
        m = build_value_matrix(df)
        assert np.isnan(m[1, 0])
        assert m[1, 1] == 3.0
