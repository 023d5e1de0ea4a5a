import matplotlib

matplotlib.use("Agg")

import pytest

from emgrid.model.geometry_primitives import Box
from emgrid.model.grid import Grid


@pytest.fixture
def grid_1d():
    """[0, 10] with unit steps."""
    return Grid.from_step(Box([0.0], [10.0]), [1.0])


@pytest.fixture
def grid_2d():
    """[0, 4] x [0, 4] with unit steps."""
    return Grid.from_step(Box([0.0, 0.0], [4.0, 4.0]), [1.0, 1.0])


@pytest.fixture
def grid_3d():
    """[0, 10]^3 with unit steps."""
    return Grid.from_step(Box([0.0, 0.0, 0.0], [10.0, 10.0, 10.0]), 1.0)


@pytest.fixture
def irregular_grid():
    """Non-uniform 2D grid with a non-zero offset and origin."""
    return Grid.from_steps(
        [[1.0, 2.0, 0.5, 3.0], [0.1, 0.1, 0.4]],
        offset=[5, -2],
        origin=[1.0, -3.0],
    )
