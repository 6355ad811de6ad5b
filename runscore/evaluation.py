"""
Evaluation Module - Score an ensemble of runs against a criterion.

This module wires the pieces together:
- score_runs(): subset ensemble output to a criterion, build the aligned
  matrix, apply a scorer and return a (weight, run_number) table
- normalize_weights(): rescale a result table so weights sum to 1
- multi_criteria_weighting(): combine result tables from several criteria
"""

import logging
from typing import Callable, Dict, Optional

import numpy as np
import pandas as pd

from .config import (
    DEFAULT_CONFIG,
    MC_WEIGHT_COLUMN,
    RUN_NUMBER_COLUMN,
    WEIGHT_COLUMN,
    ScoringConfig,
)
from .criterion import Criterion
from .matrix import build_value_matrix
from . import validation

logger = logging.getLogger(__name__)


def subset_output(output: pd.DataFrame, criterion: Criterion,
                  config: Optional[ScoringConfig] = None) -> pd.DataFrame:
    """
    Keep the rows of ``output`` matching the criterion variable and years.

    Row order is preserved.

    Raises:
        EmptySubsetError: If no row matches
    """
    config = DEFAULT_CONFIG if config is None else config
    mask = (
        (output[config.variable_column] == criterion.variable)
        & (output[config.time_column].isin(criterion.years))
    )
    subset = output[mask]
    if subset.empty:
        available = sorted(output[config.variable_column].astype(str).unique())[:10]
        raise validation.EmptySubsetError(
            f"No rows for variable '{criterion.variable}' in years "
            f"{criterion.years[0]}-{criterion.years[-1]}. Variables in output: {available}"
        )
    return subset


def score_runs(
    output: pd.DataFrame,
    criterion: Criterion,
    score_function: Callable[..., np.ndarray],
    config: Optional[ScoringConfig] = None,
    check_alignment: bool = True,
    **scorer_args,
) -> pd.DataFrame:
    """
    Weight each run of an ensemble by how well it matches a criterion.

    The returned ``run_number`` is the 1-based position of the run among the
    matrix columns (ascending order of the original run identifiers). It only
    equals the simulator's own run identifier when those run 1..K without gaps.

    Args:
        output: Long-format ensemble output (run identifier, time, variable, value)
        criterion: Observed reference to score against
        score_function: Callable taking the aligned matrix as first argument,
            e.g. score_ramp, score_bayesian or a Scorer instance
        config: Column names of ``output``; defaults to ``DEFAULT_CONFIG``
        check_alignment: Require every run's time axis to equal the criterion
            years, in order. Set False to trust the row order as given.
        **scorer_args: Passed to ``score_function``

    Returns:
        pd.DataFrame: Columns ``weight`` and ``run_number``, one row per run

    Raises:
        TypeError: If output, criterion or score_function have the wrong type
        EmptySubsetError: If the criterion matches no rows
        ShapeError: If run lengths or observation length do not line up
        AlignmentError: If check_alignment is set and a run's years differ
    """
    if not isinstance(output, pd.DataFrame):
        raise TypeError(f"output must be a pandas DataFrame, got {type(output).__name__}")
    if not isinstance(criterion, Criterion):
        raise TypeError(f"criterion must be a Criterion, got {type(criterion).__name__}")
    if not callable(score_function):
        raise TypeError(f"score_function must be callable, got {type(score_function).__name__}")

    config = DEFAULT_CONFIG if config is None else config
    validation.validate_columns(output, config.required_columns, context="Ensemble output")

    subset = subset_output(output, criterion, config)
    logger.debug(
        f"Subset for '{criterion.variable}': {len(subset)} rows, "
        f"{subset[config.run_column].nunique()} runs"
    )

    validation.validate_run_ids(subset, config.run_column)

    if check_alignment:
        validation.validate_run_alignment(
            subset, criterion.years, config.run_column, config.time_column
        )

    model_matrix = build_value_matrix(subset, config=config)
    obs = np.asarray(criterion.obs_values, dtype=float)
    if model_matrix.shape[0] != obs.size:
        raise validation.ShapeError(
            f"Runs have {model_matrix.shape[0]} rows for '{criterion.variable}' "
            f"but the criterion has {obs.size} observed values"
        )
    matrix = np.column_stack([obs, model_matrix])

    scores = np.asarray(score_function(matrix, **scorer_args), dtype=float).ravel()
    n_runs = model_matrix.shape[1]
    if scores.size != n_runs:
        raise validation.InvalidInputError(
            f"score_function returned {scores.size} scores for {n_runs} runs"
        )

    logger.info(f"Scored {n_runs} runs against '{criterion.variable}'")
    return pd.DataFrame({
        WEIGHT_COLUMN: scores,
        RUN_NUMBER_COLUMN: np.arange(1, n_runs + 1),
    })


def normalize_weights(result: pd.DataFrame) -> pd.DataFrame:
    """
    Return a copy of a result table with ``weight`` rescaled to sum to 1.

    Missing weights count as zero.

    Raises:
        DegenerateWeightsError: If the weights sum to zero
    """
    validation.validate_columns(result, [WEIGHT_COLUMN, RUN_NUMBER_COLUMN], context="Scored runs")
    weights = result[WEIGHT_COLUMN].fillna(0.0).astype(float)
    total = weights.sum()
    if total == 0:
        raise validation.DegenerateWeightsError("Run weights sum to zero; cannot normalise")
    out = result.copy()
    out[WEIGHT_COLUMN] = weights / total
    return out


def multi_criteria_weighting(
    scored: Dict[str, pd.DataFrame],
    criterion_weights: Optional[Dict[str, float]] = None,
) -> pd.DataFrame:
    """
    Combine per-criterion run weights into a single weight per run.

    Each criterion's weights are normalised to sum to 1, multiplied by the
    criterion's importance and summed per run. The combined weights are then
    renormalised.

    Args:
        scored: Criterion name -> result table from score_runs()
        criterion_weights: Criterion name -> importance. Equal importance when
            omitted; otherwise normalised to sum to 1

    Returns:
        pd.DataFrame: Columns ``run_number`` and ``mc_weight``

    Raises:
        InvalidInputError: Empty input, mismatched runs or bad criterion weights
        DegenerateWeightsError: If a criterion or the combination sums to zero
    """
    if not scored:
        raise validation.InvalidInputError("No scored criteria to combine")

    names = list(scored)
    if criterion_weights is None:
        criterion_weights = {name: 1.0 for name in names}

    unknown = set(criterion_weights) - set(names)
    missing = set(names) - set(criterion_weights)
    if unknown or missing:
        raise validation.InvalidInputError(
            f"criterion_weights must cover exactly the scored criteria {names}; "
            f"missing {sorted(missing)}, unknown {sorted(unknown)}"
        )
    importance = pd.Series(criterion_weights, dtype=float).reindex(names)
    if (importance < 0).any() or importance.isna().any():
        raise validation.InvalidInputError(f"Criterion weights must be non-negative numbers: {criterion_weights}")
    if importance.sum() == 0:
        raise validation.InvalidInputError("Criterion weights sum to zero")
    importance = importance / importance.sum()

    reference_runs = None
    columns = {}
    for name in names:
        table = normalize_weights(scored[name]).sort_values(RUN_NUMBER_COLUMN)
        runs = table[RUN_NUMBER_COLUMN].to_numpy()
        if reference_runs is None:
            reference_runs = runs
        elif not np.array_equal(runs, reference_runs):
            raise validation.InvalidInputError(
                f"Criterion '{name}' scored {len(runs)} runs that differ from "
                f"criterion '{names[0]}' ({len(reference_runs)} runs)"
            )
        columns[name] = table[WEIGHT_COLUMN].to_numpy()

    weights_df = pd.DataFrame(columns, index=reference_runs)
    combined = (weights_df * importance).sum(axis=1)
    total = combined.sum()
    if total == 0:
        raise validation.DegenerateWeightsError("Combined run weights sum to zero")

    logger.info(f"Combined {len(names)} criteria over {len(reference_runs)} runs")
    return pd.DataFrame({
        RUN_NUMBER_COLUMN: reference_runs,
        MC_WEIGHT_COLUMN: (combined / total).to_numpy(),
    })
