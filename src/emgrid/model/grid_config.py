"""
Grid Configuration Data Model
=============================
Declarative description of a grid and its boundary padding.

Why is this file needed?
------------------------
1. Persistence: Problem descriptions store the grid as plain dictionaries;
   these classes convert them to and from typed objects.
2. Construction: ``build()`` turns a configuration into a Grid using only the
   public Grid constructors and ``Grid.enlarge``.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, List, Optional

import numpy as np

from emgrid.config import DEFAULT_TOLERANCE
from emgrid.model.errors import InvalidGridError
from emgrid.model.geometry_primitives import Box
from emgrid.model.grid import Grid

logger = logging.getLogger(__name__)


class GridType(StrEnum):
    GRID_CONDITION = "gridCondition"
    NATIVE = "nativeGiD"


class GridDefinition(StrEnum):
    BY_NUMBER_OF_CELLS = "by_number_of_cells"
    BY_CELL_SIZE = "by_cell_size"


class PaddingType(StrEnum):
    BY_LENGTH = "by_length"
    BY_NUMBER_OF_CELLS = "by_number_of_cells"


AXIS_KEYS = ("xCoordinates", "yCoordinates", "zCoordinates")


@dataclass
class BoundaryPadding:
    """
    Padding distances and outermost cell sizes for both bounds of every axis.

    With ``PaddingType.BY_NUMBER_OF_CELLS`` the padding values count cells of
    the given mesh size instead of giving a length.
    """
    padding_type: PaddingType = PaddingType.BY_LENGTH
    lower_padding: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    upper_padding: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    lower_mesh_size: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    upper_mesh_size: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])

    def resolved(self) -> tuple[tuple[np.ndarray, np.ndarray], tuple[np.ndarray, np.ndarray]]:
        """
        Padding lengths and sizes ready for ``Grid.enlarge``.

        Returns:
            ((lower_padding, upper_padding), (lower_size, upper_size)).
        """
        lower = np.asarray(self.lower_padding, dtype=np.float64)
        upper = np.asarray(self.upper_padding, dtype=np.float64)
        lower_size = np.asarray(self.lower_mesh_size, dtype=np.float64)
        upper_size = np.asarray(self.upper_mesh_size, dtype=np.float64)
        if self.padding_type == PaddingType.BY_NUMBER_OF_CELLS:
            lower = lower * lower_size
            upper = upper * upper_size
        return (lower, upper), (lower_size, upper_size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "boundaryPaddingType": self.padding_type.value,
            "lowerPadding": list(self.lower_padding),
            "upperPadding": list(self.upper_padding),
            "lowerPaddingMeshSize": list(self.lower_mesh_size),
            "upperPaddingMeshSize": list(self.upper_mesh_size),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> BoundaryPadding:
        return BoundaryPadding(
            padding_type=PaddingType(data.get("boundaryPaddingType", PaddingType.BY_LENGTH)),
            lower_padding=list(data.get("lowerPadding", [0.0, 0.0, 0.0])),
            upper_padding=list(data.get("upperPadding", [0.0, 0.0, 0.0])),
            lower_mesh_size=list(data.get("lowerPaddingMeshSize", [0.0, 0.0, 0.0])),
            upper_mesh_size=list(data.get("upperPaddingMeshSize", [0.0, 0.0, 0.0])),
        )


@dataclass
class GridConfig(ABC):
    tolerance: float = DEFAULT_TOLERANCE

    @property
    @abstractmethod
    def type(self) -> GridType:
        pass

    @abstractmethod
    def build(self) -> Grid:
        """Create the grid described by this configuration."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        return {"gridType": self.type.value, "tolerance": self.tolerance}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> GridConfig:
        t = data.get("gridType")
        if t == GridType.GRID_CONDITION: return BoxGridConfig.from_dict(data)
        if t == GridType.NATIVE: return NativeGridConfig.from_dict(data)
        raise InvalidGridError(f"Unrecognized grid type: {t}")


@dataclass
class BoxGridConfig(GridConfig):
    """Grid over a bounding box, by cell size or by number of cells, plus padding."""
    box_min: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    box_max: List[float] = field(default_factory=lambda: [1.0, 1.0, 1.0])
    definition: GridDefinition = GridDefinition.BY_CELL_SIZE
    directions: List[float] = field(default_factory=lambda: [0.1, 0.1, 0.1])
    padding: Optional[BoundaryPadding] = None

    @property
    def type(self) -> GridType: return GridType.GRID_CONDITION

    def build(self) -> Grid:
        box = Box(np.asarray(self.box_min, dtype=np.float64), np.asarray(self.box_max, dtype=np.float64))
        if self.definition == GridDefinition.BY_NUMBER_OF_CELLS:
            grid = Grid.from_num_cells(box, np.asarray(self.directions, dtype=np.int64), tolerance=self.tolerance)
        else:
            grid = Grid.from_step(box, np.asarray(self.directions, dtype=np.float64), tolerance=self.tolerance)

        if self.padding is not None:
            padding, sizes = self.padding.resolved()
            grid.enlarge(padding, sizes)

        logger.info(f"Built {self.definition.value} grid with {grid.get_num_cells().tolist()} cells.")
        return grid

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["layerBox"] = {"min": list(self.box_min), "max": list(self.box_max)}
        d["type"] = self.definition.value
        d["directions"] = list(self.directions)
        if self.padding is not None:
            d.update(self.padding.to_dict())
        return d

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> BoxGridConfig:
        box = data.get("layerBox", {})
        has_padding = "boundaryPaddingType" in data
        return BoxGridConfig(
            tolerance=data.get("tolerance", DEFAULT_TOLERANCE),
            box_min=list(box.get("min", [0.0, 0.0, 0.0])),
            box_max=list(box.get("max", [1.0, 1.0, 1.0])),
            definition=GridDefinition(data.get("type", GridDefinition.BY_CELL_SIZE)),
            directions=list(data.get("directions", [0.1, 0.1, 0.1])),
            padding=BoundaryPadding.from_dict(data) if has_padding else None,
        )


@dataclass
class NativeGridConfig(GridConfig):
    """Grid given directly by its vertex coordinates on each axis."""
    coordinates: List[List[float]] = field(default_factory=list)
    offset: Optional[List[int]] = None

    @property
    def type(self) -> GridType: return GridType.NATIVE

    def build(self) -> Grid:
        return Grid(self.coordinates, offset=self.offset, tolerance=self.tolerance)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        for key, coords in zip(AXIS_KEYS, self.coordinates):
            d[key] = list(coords)
        if self.offset is not None:
            d["offset"] = list(self.offset)
        return d

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> NativeGridConfig:
        coordinates = [list(data[key]) for key in AXIS_KEYS if key in data]
        offset = data.get("offset")
        return NativeGridConfig(
            tolerance=data.get("tolerance", DEFAULT_TOLERANCE),
            coordinates=coordinates,
            offset=list(offset) if offset is not None else None,
        )
