"""
Scorers - turn an aligned matrix into one weight per model run.

An aligned matrix has the observed series in column 0 and one model run per
remaining column, rows being the criterion years. Two scorers are provided:

- score_ramp(): piecewise-linear score in [0, 1] from absolute deviations
- score_bayesian(): RMSE-based likelihood normalised to posterior probabilities

Both have class counterparts (RampScorer, BayesianScorer) implementing the
Scorer interface, which is also how user-defined scorers plug in.
"""

import logging
from abc import ABC, abstractmethod

import numpy as np

from .config import AVAILABLE_SCORERS, DEFAULT_DECAY_EXPONENT
from .validation import (
    DegenerateWeightsError,
    InvalidInputError,
    as_score_matrix,
    validate_not_all_missing,
)

logger = logging.getLogger(__name__)


def score_ramp(m, w1: float, w2: float, drop_na: bool = False) -> np.ndarray:
    """
    Score model runs with a ramp on the absolute observed-vs-model deviation.

    Row scores are 1 where the deviation is at most ``w1``, 0 where it is at
    least ``w2`` and fall linearly in between. When ``w1 == w2`` a deviation
    equal to both counts as a perfect match. A run's score is the mean of its
    row scores, missing rows excluded.

    Args:
        m: Aligned matrix (observed column first, then two or more runs)
        w1: Deviation below which a row scores 1, must be >= 0
        w2: Deviation above which a row scores 0, must be >= w1
        drop_na: Remove rows where the observed or the run value is missing
            before scoring that run. This changes how many rows the run's
            mean is taken over.

    Returns:
        np.ndarray: One score per model run, in column order

    Raises:
        InvalidInputError: Bad thresholds or fewer than three columns
        AllMissingError: Observed column or a run column is entirely missing
    """
    if not w1 >= 0:
        raise InvalidInputError(f"w1 must be non-negative, got {w1}")
    if not w2 >= w1:
        raise InvalidInputError(f"w2 ({w2}) must be greater than or equal to w1 ({w1})")

    arr = as_score_matrix(m)
    validate_not_all_missing(arr)

    obs = arr[:, 0]
    scores = np.empty(arr.shape[1] - 1)
    for j in range(1, arr.shape[1]):
        model = arr[:, j]
        if drop_na:
            keep = ~(np.isnan(obs) | np.isnan(model))
            d = np.abs(obs[keep] - model[keep])
        else:
            d = np.abs(obs - model)

        row_scores = np.full(d.shape, np.nan)
        row_scores[d >= w2] = 0.0
        # after the w2 branch so that d == w1 == w2 scores 1
        row_scores[d <= w1] = 1.0
        between = (d > w1) & (d < w2)
        row_scores[between] = 1.0 - (d[between] - w1) / (w2 - w1)

        valid = ~np.isnan(row_scores)
        scores[j - 1] = row_scores[valid].mean() if valid.any() else np.nan

    return scores


def run_rmse(m) -> np.ndarray:
    """RMSE of each model run against the observed column. Missing values give NaN."""
    arr = as_score_matrix(m)
    diffs = arr[:, [0]] - arr[:, 1:]
    with np.errstate(over="ignore"):
        return np.sqrt(np.mean(diffs ** 2, axis=0))


def score_bayesian(m, e: float = DEFAULT_DECAY_EXPONENT) -> np.ndarray:
    """
    Score model runs by posterior probability under a normal error model.

    Each run's RMSE against the observed series is turned into a likelihood
    ``exp(-0.5 * rmse ** e)``, multiplied by a uniform prior ``1/K`` and
    normalised so that the K weights sum to 1. Larger ``e`` penalises
    deviations (above 1) more steeply. Weights shrink on average as K grows.

    Missing values are not skipped: a run with any missing row gets a missing
    RMSE, which counts as zero likelihood.

    Args:
        m: Aligned matrix (observed column first, then two or more runs)
        e: Decay exponent, must be > 0

    Returns:
        np.ndarray: Posterior probabilities, in column order

    Raises:
        InvalidInputError: Non-positive exponent or fewer than three columns
        DegenerateWeightsError: Every likelihood is zero
    """
    if not e > 0:
        raise InvalidInputError(f"Decay exponent e must be positive, got {e}")

    rmse = run_rmse(m)

    with np.errstate(over="ignore"):
        likelihood = np.exp(-0.5 * rmse ** e)

    missing = np.isnan(likelihood)
    if missing.any():
        logger.warning(
            f"Run(s) {(np.where(missing)[0] + 1).tolist()} have missing values; "
            "their likelihood is set to zero"
        )
        likelihood = np.where(missing, 0.0, likelihood)

    prior = np.full(likelihood.shape, 1.0 / likelihood.size)
    posterior = likelihood * prior

    total = posterior.sum()
    if total == 0:
        raise DegenerateWeightsError(
            f"All {likelihood.size} runs have zero likelihood with e={e}; cannot normalise"
        )
    return posterior / total


class Scorer(ABC):
    """
    Interface for scoring an aligned matrix.

    Subclasses implement ``score``; instances can be passed anywhere a scoring
    function is expected since calling them delegates to ``score``.
    """

    name = "custom"

    @abstractmethod
    def score(self, m, **params) -> np.ndarray:
        ...

    def __call__(self, m, **params) -> np.ndarray:
        return self.score(m, **params)


class RampScorer(Scorer):
    """Ramp scorer with fixed thresholds; see score_ramp()."""

    name = "ramp"

    def __init__(self, w1: float, w2: float, drop_na: bool = False):
        if not (w1 >= 0 and w2 >= w1):
            raise InvalidInputError(f"Ramp thresholds need 0 <= w1 <= w2, got w1={w1}, w2={w2}")
        self.w1 = w1
        self.w2 = w2
        self.drop_na = drop_na

    def score(self, m, **params) -> np.ndarray:
        return score_ramp(
            m,
            w1=params.get("w1", self.w1),
            w2=params.get("w2", self.w2),
            drop_na=params.get("drop_na", self.drop_na),
        )

    def __repr__(self):
        return f"RampScorer(w1={self.w1}, w2={self.w2}, drop_na={self.drop_na})"


class BayesianScorer(Scorer):
    """Posterior-probability scorer; see score_bayesian()."""

    name = "bayesian"

    def __init__(self, e: float = DEFAULT_DECAY_EXPONENT):
        if not e > 0:
            raise InvalidInputError(f"Decay exponent e must be positive, got {e}")
        self.e = e

    def score(self, m, **params) -> np.ndarray:
        return score_bayesian(m, e=params.get("e", self.e))

    def __repr__(self):
        return f"BayesianScorer(e={self.e})"


_SCORER_CLASSES = {
    RampScorer.name: RampScorer,
    BayesianScorer.name: BayesianScorer,
}


def get_scorer(name: str, **params) -> Scorer:
    """
    Look up a built-in scorer by name and configure it.

    Example:
        scorer = get_scorer("ramp", w1=0.1, w2=0.5)
    """
    key = name.lower().strip()
    if key not in _SCORER_CLASSES:
        raise InvalidInputError(f"Unknown scorer '{name}'. Available: {AVAILABLE_SCORERS}")
    try:
        return _SCORER_CLASSES[key](**params)
    except TypeError as e:
        raise InvalidInputError(f"Bad parameters for scorer '{name}': {e}") from e
