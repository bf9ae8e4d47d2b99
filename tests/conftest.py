"""
Pytest fixtures shared across test modules.
"""
import matplotlib
import numpy as np
import pytest

from rtin import build_index

matplotlib.use("Agg")


@pytest.fixture
def index3():
    """Triangle index for a 3x3 grid."""
    return build_index(3)


@pytest.fixture
def index5():
    """Triangle index for a 5x5 grid."""
    return build_index(5)


@pytest.fixture
def bump_terrain3():
    """3x3 heightfield with a bump on the top edge and a small one in the centre.

    Rows (y = 0..2): [0, 4, 0], [0, 1, 0], [0, 0, 0]
    """
    return np.array([
        0.0, 4.0, 0.0,
        0.0, 1.0, 0.0,
        0.0, 0.0, 0.0,
    ])


@pytest.fixture
def random_terrain33():
    """Smooth random 33x33 heightfield, flattened."""
    rng = np.random.default_rng(1234)
    return np.cumsum(np.cumsum(rng.normal(size=(33, 33)), axis=0), axis=1).reshape(-1)
