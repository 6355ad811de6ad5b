"""
Pytest fixtures for runscore tests.
"""

import pytest
import numpy as np
import pandas as pd
from pathlib import Path
import sys

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))
from runscore import new_criterion


@pytest.fixture(scope="session")
def years():
    return list(range(2000, 2006))


@pytest.fixture(scope="session")
def obs_values(years):
    """Observed series: a linear trend."""
    return [0.1 * i for i in range(len(years))]


@pytest.fixture(scope="session")
def criterion(years, obs_values):
    return new_criterion("gmst", years, obs_values)


@pytest.fixture
def ensemble_output(years, obs_values):
    """
    Long-format output for three runs with non-contiguous identifiers.

    Run 3 reproduces the observations, run 7 is offset by 0.5, run 12 by 2.0.
    A second variable and years outside the criterion are mixed in.
    """
    offsets = {3: 0.0, 7: 0.5, 12: 2.0}
    rows = []
    for run_id, offset in offsets.items():
        for year in [1999] + years + [2006]:
            base = obs_values[year - years[0]] if year in years else 0.0
            rows.append({"scenario": "ssp245", "year": year, "variable": "gmst",
                         "value": base + offset, "units": "degC", "run_number": run_id})
            rows.append({"scenario": "ssp245", "year": year, "variable": "co2",
                         "value": 370.0 + offset, "units": "ppmv", "run_number": run_id})
    return pd.DataFrame(rows)


@pytest.fixture
def scenario_a_matrix():
    return np.array([[1, 2, 3], [2, 4, 6], [3, 6, 9]], dtype=float)
