"""
runscore - Weight ensemble model runs against observations.

This package provides modular components for run scoring:

- runscore.criterion: Criterion, new_criterion()
  Which variable, years and observed values to compare against
- runscore.matrix: build_value_matrix()
  Long-format run output -> one column per run
- runscore.scorers: score_ramp(), score_bayesian(), Scorer, get_scorer()
  Aligned matrix -> one weight per run
- runscore.evaluation: score_runs(), multi_criteria_weighting()
  Ensemble output + criterion + scorer -> (weight, run_number) table
- runscore.validation: ScoringError and its subclasses

Usage:
    import runscore

    crit = runscore.new_criterion("gmst", years, obs)
    weights = runscore.score_runs(output, crit, runscore.score_bayesian, e=2)
"""

__version__ = "0.1.0"

from . import config
from . import criterion
from . import evaluation
from . import matrix
from . import scorers
from . import validation

from .config import ScoringConfig
from .criterion import Criterion, new_criterion
from .evaluation import multi_criteria_weighting, normalize_weights, score_runs
from .matrix import build_value_matrix
from .scorers import BayesianScorer, RampScorer, Scorer, get_scorer, score_bayesian, score_ramp
from .validation import (
    AlignmentError,
    AllMissingError,
    DegenerateWeightsError,
    EmptySubsetError,
    InvalidInputError,
    ScoringError,
    ShapeError,
)

__all__ = [
    "ScoringConfig",
    "Criterion",
    "new_criterion",
    "build_value_matrix",
    "score_ramp",
    "score_bayesian",
    "Scorer",
    "RampScorer",
    "BayesianScorer",
    "get_scorer",
    "score_runs",
    "normalize_weights",
    "multi_criteria_weighting",
    "ScoringError",
    "InvalidInputError",
    "AllMissingError",
    "EmptySubsetError",
    "ShapeError",
    "AlignmentError",
    "DegenerateWeightsError",
]
