"""
Configuration defaults for run scoring.
"""

from dataclasses import dataclass

# Long-format column names as written by the simulator
DEFAULT_RUN_COLUMN = "run_number"
DEFAULT_TIME_COLUMN = "year"
DEFAULT_VARIABLE_COLUMN = "variable"
DEFAULT_VALUE_COLUMN = "value"

# Result table columns
WEIGHT_COLUMN = "weight"
RUN_NUMBER_COLUMN = "run_number"
MC_WEIGHT_COLUMN = "mc_weight"

DEFAULT_DECAY_EXPONENT = 2.0
WEIGHT_SUM_TOLERANCE = 1e-9

# observed + at least two runs
MIN_MATRIX_COLUMNS = 3

AVAILABLE_SCORERS = ["ramp", "bayesian"]


@dataclass(frozen=True)
class ScoringConfig:
    """Column names used to read long-format ensemble output."""
    run_column: str = DEFAULT_RUN_COLUMN
    time_column: str = DEFAULT_TIME_COLUMN
    variable_column: str = DEFAULT_VARIABLE_COLUMN
    value_column: str = DEFAULT_VALUE_COLUMN

    @property
    def required_columns(self) -> list:
        return [self.run_column, self.time_column, self.variable_column, self.value_column]


DEFAULT_CONFIG = ScoringConfig()
