import pytest

from log_samples import PARAMS, calculation_lines, level, to_entries


@pytest.fixture
def sample_entries():
    return to_entries(
        ["HydroFlow ready"]
        + calculation_lines()
        + ["User changed width"]
        + calculation_lines(params=PARAMS.replace("b = 12.5", "b = 8"), levels=[level(50, "0.5", "9.75")])
    )
