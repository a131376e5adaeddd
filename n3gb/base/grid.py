"""Base grid class for collections of grid cells."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np
from shapely.geometry import Polygon, box
from shapely.prepared import prep

from ..abstractions.types import Crs


class BaseGrid(ABC):
    """
    Immutable, ordered collection of cells at one zoom level.

    Handles:
    - Ordered access and iteration
    - Spatial filtering
    - Tabular export (records and numpy columns)
    - Summary statistics

    Cells must expose ``id``, ``zoom_level``, ``row``, ``col``, ``easting``,
    ``northing``, ``to_polygon()`` and ``to_dict()``.
    """

    crs = Crs.BNG.value

    def __init__(self, cells: Iterable[Any], zoom_level: int):
        """
        Initialize grid.

        Args:
            cells: Cells in grid order, already unique by id
            zoom_level: Zoom level shared by every cell
        """
        self._cells: Tuple[Any, ...] = tuple(cells)
        self._zoom_level = zoom_level

    @abstractmethod
    def get_cell_at(self, point) -> Optional[Any]:
        """
        Get the cell containing a point.

        Args:
            point: Coordinate in the grid CRS

        Returns:
            Cell or None
        """
        pass

    @abstractmethod
    def get_cell_by_id(self, cell_id: str) -> Optional[Any]:
        """
        Get cell by ID.

        Args:
            cell_id: Cell identifier

        Returns:
            Cell or None
        """
        pass

    @property
    def cells(self) -> Tuple[Any, ...]:
        return self._cells

    @property
    def zoom_level(self) -> int:
        return self._zoom_level

    @property
    def is_empty(self) -> bool:
        return not self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._cells)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(zoom_level={self._zoom_level}, cells={len(self._cells)})"

    def filter(self, predicate: Callable[[Any], bool]) -> List[Any]:
        """Cells matching ``predicate``, in grid order."""
        return [cell for cell in self._cells if predicate(cell)]

    def get_cells_in_bounds(self,
                            bounds: Tuple[float, float, float, float]) -> List[Any]:
        """Get cells whose hexagon intersects ``(minx, miny, maxx, maxy)``."""
        bbox = prep(box(*bounds))
        return [cell for cell in self._cells if bbox.intersects(cell.to_polygon())]

    def to_polygons(self) -> List[Polygon]:
        """Hexagon polygons in grid order."""
        return [cell.to_polygon() for cell in self._cells]

    def to_records(self) -> List[Dict[str, Any]]:
        """One export dict per cell, in grid order."""
        return [cell.to_dict() for cell in self._cells]

    def to_columns(self) -> Dict[str, Any]:
        """
        Column-oriented export.

        Returns:
            Dict of numpy arrays (``id``, ``zoom``, ``row``, ``col``,
            ``easting``, ``northing``) plus ``geometry`` as a list of polygons
        """
        cells = self._cells
        return {
            'id': np.array([cell.id for cell in cells], dtype=object),
            'zoom': np.array([cell.zoom_level for cell in cells], dtype=np.uint8),
            'row': np.array([cell.row for cell in cells], dtype=np.int64),
            'col': np.array([cell.col for cell in cells], dtype=np.int64),
            'easting': np.array([cell.easting for cell in cells], dtype=np.float64),
            'northing': np.array([cell.northing for cell in cells], dtype=np.float64),
            'geometry': self.to_polygons(),
        }

    def calculate_statistics(self) -> Dict[str, Any]:
        """Calculate grid statistics."""
        polygons = self.to_polygons()
        areas = np.array([polygon.area for polygon in polygons], dtype=np.float64)

        if polygons:
            extents = np.array([polygon.bounds for polygon in polygons])
            bounds = (
                float(extents[:, 0].min()),
                float(extents[:, 1].min()),
                float(extents[:, 2].max()),
                float(extents[:, 3].max()),
            )
        else:
            bounds = None

        return {
            'cell_count': len(polygons),
            'zoom_level': self._zoom_level,
            'total_area_km2': float(areas.sum()) / 1_000_000,
            'avg_cell_area_km2': float(areas.mean()) / 1_000_000 if polygons else 0,
            'min_cell_area_km2': float(areas.min()) / 1_000_000 if polygons else 0,
            'max_cell_area_km2': float(areas.max()) / 1_000_000 if polygons else 0,
            'bounds': bounds,
            'crs': self.crs
        }
