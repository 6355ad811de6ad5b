"""
Criterion - the observed reference a set of runs is scored against.
"""

from dataclasses import dataclass
from numbers import Real
from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from .config import DEFAULT_TIME_COLUMN, DEFAULT_VALUE_COLUMN
from .validation import InvalidInputError, validate_columns


def _is_number(x) -> bool:
    return isinstance(x, (Real, np.number)) and not isinstance(x, (bool, np.bool_))


@dataclass(frozen=True)
class Criterion:
    """
    Which variable, which years and which observed values a run is compared to.

    Attributes:
        variable: Name of the measured quantity, as it appears in the
            ``variable`` column of the ensemble output
        years: Time points to compare, strictly ascending
        obs_values: Observed values, one per year, in the same order
    """
    variable: str
    years: Tuple
    obs_values: Tuple[float, ...]

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "years", tuple(self.years))
        object.__setattr__(self, "obs_values", tuple(self.obs_values))

        if not isinstance(self.variable, str) or not self.variable.strip():
            raise InvalidInputError(f"Criterion variable must be a non-empty string, got {self.variable!r}")
        if not all(_is_number(y) for y in self.years):
            raise InvalidInputError(f"Criterion years for '{self.variable}' must be numeric")
        if not all(_is_number(v) for v in self.obs_values):
            raise InvalidInputError(f"Criterion observed values for '{self.variable}' must be numeric")

        object.__setattr__(self, "obs_values", tuple(float(v) for v in self.obs_values))

        if len(self.years) == 0:
            raise InvalidInputError(f"Criterion for '{self.variable}' has no years")
        if len(self.obs_values) != len(self.years):
            raise InvalidInputError(
                f"Criterion for '{self.variable}' has {len(self.years)} years "
                f"but {len(self.obs_values)} observed values"
            )
        if any(b <= a for a, b in zip(self.years, self.years[1:])):
            raise InvalidInputError(
                f"Criterion years for '{self.variable}' must be strictly ascending"
            )

    @property
    def n_years(self) -> int:
        return len(self.years)

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        variable: str,
        year_column: str = DEFAULT_TIME_COLUMN,
        value_column: str = DEFAULT_VALUE_COLUMN,
    ) -> "Criterion":
        """
        Build a criterion from an observation table, one row per year.

        Rows are sorted by year; duplicated years are rejected.
        """
        validate_columns(df, [year_column, value_column], context="Observation table")
        obs = df[[year_column, value_column]].sort_values(year_column)
        if obs[year_column].duplicated().any():
            dupes = obs.loc[obs[year_column].duplicated(), year_column].unique().tolist()
            raise InvalidInputError(f"Observation table has duplicated years: {dupes}")
        return new_criterion(variable, obs[year_column].tolist(), obs[value_column].tolist())

    def __str__(self) -> str:
        return (
            f"Criterion for screening runs: {self.variable}\n"
            f"Years: {self.years[0]} to {self.years[-1]} ({self.n_years} points)"
        )


def new_criterion(variable: str, years: Sequence, obs_values: Sequence[float]) -> Criterion:
    """
    Create a new scoring criterion.

    Args:
        variable: Variable name to screen on
        years: Years of the observation record
        obs_values: Observed values matching ``years``

    Returns:
        Criterion: Validated criterion

    Raises:
        InvalidInputError: If years or values are not numeric, or lengths differ
    """
    return Criterion(variable=variable, years=tuple(years), obs_values=tuple(obs_values))
