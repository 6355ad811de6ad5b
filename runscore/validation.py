"""
Validation Module - Error taxonomy and precondition checks.

Every check raises at the point of detection. Nothing in the package catches
these errors, so callers see exactly which precondition failed.
"""

from typing import List

import numpy as np
import pandas as pd

from .config import MIN_MATRIX_COLUMNS


class ScoringError(Exception):
    """Base class for run scoring failures."""
    pass


class InvalidInputError(ScoringError, ValueError):
    """Malformed shape or arguments (too few columns, bad thresholds...)."""
    pass


class AllMissingError(ScoringError):
    """A required matrix column holds no values at all."""
    pass


class EmptySubsetError(ScoringError):
    """The criterion variable/years match no rows of the ensemble output."""
    pass


class ShapeError(ScoringError):
    """Runs or observations have misaligned time axes."""
    pass


class AlignmentError(ShapeError):
    """A run's time axis does not follow the criterion years."""
    pass


class DegenerateWeightsError(ScoringError):
    """Weights cannot be normalised because their total is zero."""
    pass


def validate_columns(df: pd.DataFrame, required_columns: List[str], context: str = "output") -> None:
    """
    Validate that DataFrame carries every required column.

    Args:
        df: DataFrame to validate
        required_columns: Column names that must be present
        context: Description for error messages

    Raises:
        InvalidInputError: If a column is missing
    """
    missing_cols = [col for col in required_columns if col not in df.columns]
    if missing_cols:
        raise InvalidInputError(
            f"{context} missing required columns: {missing_cols}. "
            f"Available columns: {list(df.columns)}"
        )


def as_score_matrix(m, context: str = "matrix") -> np.ndarray:
    """
    Coerce an aligned matrix to a 2-D float array and check its column count.

    Column 0 is the observed series, the remaining columns are model runs.

    Raises:
        InvalidInputError: If the matrix is not 2-D numeric or has fewer than
            three columns (observed + two runs)
    """
    try:
        arr = np.asarray(m, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{context} must be numeric: {e}") from e

    if arr.ndim != 2:
        raise InvalidInputError(f"{context} must be 2-dimensional, got {arr.ndim} dimension(s)")
    if arr.shape[1] < MIN_MATRIX_COLUMNS:
        raise InvalidInputError(
            f"{context} has {arr.shape[1]} column(s); need the observed column "
            f"plus at least {MIN_MATRIX_COLUMNS - 1} model runs"
        )
    if arr.shape[0] == 0:
        raise InvalidInputError(f"{context} has no rows")
    return arr


def validate_not_all_missing(arr: np.ndarray) -> None:
    """
    Raise AllMissingError if the observed column or any run column is all NaN.
    """
    if np.all(np.isnan(arr[:, 0])):
        raise AllMissingError("Observed column (column 0) contains only missing values")

    empty_runs = np.where(np.all(np.isnan(arr[:, 1:]), axis=0))[0]
    if empty_runs.size:
        raise AllMissingError(
            f"Model run column(s) {(empty_runs + 1).tolist()} contain only missing values"
        )


def validate_run_alignment(subset: pd.DataFrame, years, run_column: str, time_column: str) -> None:
    """
    Validate that every run lists exactly the criterion years, in order.

    Rows are not re-sorted here; a run whose time axis is out of order or
    incomplete is an error.

    Raises:
        AlignmentError: If any run's time sequence differs from years
    """
    expected = list(years)
    for run_id, run_df in subset.groupby(run_column, sort=True):
        actual = run_df[time_column].tolist()
        if actual != expected:
            raise AlignmentError(
                f"Run {run_id} time axis {actual[:5]}{'...' if len(actual) > 5 else ''} "
                f"does not match criterion years {expected[:5]}{'...' if len(expected) > 5 else ''}"
            )


def validate_run_ids(df: pd.DataFrame, run_column: str) -> None:
    """
    Validate that run identifiers are integers >= 1, with no missing entries.

    Raises:
        InvalidInputError: Naming the offending identifiers
    """
    run_ids = df[run_column]
    if run_ids.isna().any():
        raise InvalidInputError(
            f"Run identifier column '{run_column}' has {int(run_ids.isna().sum())} missing value(s)"
        )

    numeric = pd.to_numeric(run_ids, errors="coerce")
    bad = run_ids[numeric.isna() | (numeric < 1) | (numeric % 1 != 0)]
    if not bad.empty:
        raise InvalidInputError(
            f"Run identifiers in '{run_column}' must be integers >= 1, got {sorted(bad.astype(str).unique())[:10]}"
        )
