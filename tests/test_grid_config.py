"""
Unit tests for grid configuration parsing and building.
"""
import numpy as np
import pytest

from emgrid.model.errors import InvalidGridError
from emgrid.model.grid_config import (
    BoundaryPadding,
    BoxGridConfig,
    GridConfig,
    GridDefinition,
    GridType,
    NativeGridConfig,
    PaddingType,
)


@pytest.fixture
def padded_config():
    return BoxGridConfig(
        box_min=[0.0, 0.0, 0.0],
        box_max=[10.0, 10.0, 10.0],
        directions=[1.0, 1.0, 1.0],
        padding=BoundaryPadding(
            padding_type=PaddingType.BY_NUMBER_OF_CELLS,
            lower_padding=[2.0, 0.0, 0.0],
            upper_padding=[0.0, 0.0, 3.0],
            lower_mesh_size=[1.0, 0.0, 0.0],
            upper_mesh_size=[0.0, 0.0, 1.0],
        ),
    )


def test_padding_by_number_of_cells_resolves_to_length():
    padding = BoundaryPadding(
        padding_type=PaddingType.BY_NUMBER_OF_CELLS,
        lower_padding=[2.0, 4.0, 0.0],
        lower_mesh_size=[0.5, 2.0, 0.0],
    )

    (lower, upper), (lower_size, upper_size) = padding.resolved()

    assert lower.tolist() == [1.0, 8.0, 0.0]
    assert upper.tolist() == [0.0, 0.0, 0.0]
    assert lower_size.tolist() == [0.5, 2.0, 0.0]


def test_box_config_build_with_padding(padded_config):
    grid = padded_config.build()

    assert grid.get_num_cells().tolist() == [12, 10, 13]
    assert grid.get_pos(0)[0] == pytest.approx(-2.0)
    assert grid.get_pos(2)[-1] == pytest.approx(13.0)
    assert grid.get_offset().tolist() == [0, 0, 0]


def test_box_config_by_number_of_cells():
    config = GridConfig.from_dict({
        "gridType": "gridCondition",
        "type": "by_number_of_cells",
        "layerBox": {"min": [0.0, 0.0, 0.0], "max": [1.0, 2.0, 3.0]},
        "directions": [2, 4, 6],
    })

    assert isinstance(config, BoxGridConfig)
    assert config.definition == GridDefinition.BY_NUMBER_OF_CELLS
    assert config.padding is None

    grid = config.build()
    assert grid.get_num_cells().tolist() == [2, 4, 6]
    assert np.allclose(grid.get_step(2), 0.5)


def test_box_config_dict_round_trip(padded_config):
    data = padded_config.to_dict()

    assert data["gridType"] == GridType.GRID_CONDITION
    assert data["boundaryPaddingType"] == "by_number_of_cells"
    assert GridConfig.from_dict(data) == padded_config


def test_native_config():
    config = GridConfig.from_dict({
        "gridType": "nativeGiD",
        "xCoordinates": [0.0, 1.0, 2.0],
        "yCoordinates": [0.0, 0.5],
        "zCoordinates": [3.0],
        "tolerance": 0.05,
    })

    assert isinstance(config, NativeGridConfig)
    grid = config.build()
    assert grid.tolerance == 0.05
    assert grid.get_num_cells().tolist() == [2, 1, 1]
    assert np.allclose(grid.get_pos(2), [3.0, 3.0])


def test_native_config_keeps_offset():
    config = NativeGridConfig(coordinates=[[0.0, 1.0], [0.0, 1.0]], offset=[3, 4])

    assert GridConfig.from_dict(config.to_dict()) == config
    assert config.build().get_offset().tolist() == [3, 4]


def test_unknown_grid_type():
    with pytest.raises(InvalidGridError):
        GridConfig.from_dict({"gridType": "spherical"})
