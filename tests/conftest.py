"""
Shared fixtures.
"""

import numpy as np
import pytest

from optiloop import IterState

from tests.toys import CountdownSolver


@pytest.fixture
def countdown():
    return CountdownSolver(start=100.0, step=1.0)


@pytest.fixture
def sphere_start():
    return IterState(param=np.array([1.0, -2.0, 0.5]))
