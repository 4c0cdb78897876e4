"""Module used to configure pytest behaviour."""

import pytest
import quench as qn


"""
### PyTest Fixtures ###

These are imported implicitly in all test_*.py modules when pytest is called in the terminal.
"""


@pytest.fixture
def search_space() -> qn.SearchSpace:
    return qn.SearchSpace(min_bound=-5.0, max_bound=5.0)


@pytest.fixture
def small_schedule() -> qn.ScheduleConfig:
    """Schedule with short stages, so that cooling events happen every fourth step."""
    return qn.ScheduleConfig(
        initial_temp=10.0,
        final_temp=1.0,
        cooling_rate=0.5,
        iterations_per_temp=3,
        initial_step_size=1.0,
    )


@pytest.fixture
def annealer(search_space: qn.SearchSpace) -> qn.Annealer:
    """Seeded, unconfigured annealer on the default objective."""
    return qn.Annealer(search_space, objective=qn.InverseQuadratic(), seed=1234)


@pytest.fixture
def configured_annealer(annealer: qn.Annealer, small_schedule: qn.ScheduleConfig) -> qn.Annealer:
    annealer.configure(small_schedule)
    return annealer
