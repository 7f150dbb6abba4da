"""
Shared fixtures: every test starts from the default tolerances and LP oracle.
"""

import pytest

from convexsets import ScipyLinprogOracle, reset_tolerance, set_default_lp_oracle


@pytest.fixture(autouse=True)
def default_numerics():
    reset_tolerance()
    previous = set_default_lp_oracle(ScipyLinprogOracle())
    yield
    set_default_lp_oracle(previous)
    reset_tolerance()
