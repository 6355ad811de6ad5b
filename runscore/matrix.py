"""
Matrix construction - reshape long-format run output into a run-per-column array.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from .config import DEFAULT_CONFIG, ScoringConfig
from .validation import InvalidInputError, ShapeError, validate_columns, validate_run_ids

logger = logging.getLogger(__name__)


def build_value_matrix(
    df: pd.DataFrame,
    column: Optional[str] = None,
    config: Optional[ScoringConfig] = None,
) -> np.ndarray:
    """
    Convert long-format run output to a matrix with one column per run.

    Rows keep the order in which they appear for each run, so the caller is
    expected to have filtered and sorted ``df`` by time already. Columns are
    ordered by ascending run identifier and the identifiers themselves are
    dropped: column ``i`` holds the run with the i-th smallest identifier.

    Args:
        df: Long-format output with at least a run identifier column and ``column``
        column: Field to extract. Defaults to the config value column
        config: Column names; defaults to ``DEFAULT_CONFIG``

    Returns:
        np.ndarray: Array of shape (rows per run, number of runs)

    Raises:
        InvalidInputError: If a required column is missing or run identifiers
            are not integers >= 1
        ShapeError: If runs do not all have the same number of rows
    """
    config = DEFAULT_CONFIG if config is None else config
    column = config.value_column if column is None else column
    validate_columns(df, [config.run_column, column], context="Run output")

    if df.empty:
        raise InvalidInputError("Run output has no rows to build a matrix from")
    validate_run_ids(df, config.run_column)

    run_ids = sorted(df[config.run_column].unique())
    grouped = df.groupby(config.run_column, sort=True)[column]

    columns = [grouped.get_group(run_id).to_numpy(dtype=float) for run_id in run_ids]

    lengths = {len(c) for c in columns}
    if len(lengths) > 1:
        counts = dict(zip(run_ids, (len(c) for c in columns)))
        raise ShapeError(f"Runs have unequal numbers of rows (misaligned time axes): {counts}")

    matrix = np.column_stack(columns)
    logger.debug(f"Built value matrix of shape {matrix.shape} from {len(run_ids)} runs")
    return matrix
