# n3gb/grid_systems/hexagonal_grid.py
"""Bulk generation of hexagonal cells over extents and polygons."""

from functools import partial
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from shapely.geometry import MultiPolygon, Polygon, box
from shapely.prepared import prep

from ..abstractions.types import Crs
from ..base import BaseGrid
from ..config import config
from ..exceptions import GeometryParseError, InvalidZoomLevel
from ..infrastructure.logging import get_logger, grid_operation
from ..projection import BngProjection
from .bounds_manager import BoundsDefinition, BoundsManager
from .constants import CELL_RADIUS, GRID_EXTENTS, is_valid_zoom
from .coordinate_index import cell_to_point, point_to_cell
from .geometry import build_hexagon
from .hex_cell import CoordinateLike, HexCell, as_coordinate
from .identifier import encode_identifier
from .parallel import ordered_map

logger = get_logger(__name__)

# (first_row, last_row, min_col, max_col, zoom)
RowBatch = Tuple[int, int, int, int, int]


def _corner_span(min_x: float, min_y: float, max_x: float, max_y: float,
                 zoom: int) -> Tuple[int, int, int, int]:
    """(min_row, max_row, min_col, max_col) over the four extent corners."""
    corners = [
        point_to_cell((min_x, min_y), zoom),
        point_to_cell((max_x, min_y), zoom),
        point_to_cell((max_x, max_y), zoom),
        point_to_cell((min_x, max_y), zoom),
    ]
    rows = [rc.row for rc in corners]
    cols = [rc.col for rc in corners]
    return min(rows), max(rows), min(cols), max(cols)


def _run(func: Callable, tasks: List, work_size: int, parallel: bool) -> List:
    if parallel:
        return ordered_map(func, tasks, work_size=work_size)
    return [func(task) for task in tasks]


def _enumerate_rows(batch: RowBatch) -> List[HexCell]:
    """Cells of a block of rows, skipping centres below the grid origin."""
    first_row, last_row, min_col, max_col, zoom = batch
    cells = []
    for row in range(first_row, last_row + 1):
        for col in range(min_col, max_col + 1):
            center = cell_to_point(row, col, zoom)
            if center.x < GRID_EXTENTS[0] or center.y < GRID_EXTENTS[1]:
                continue
            cells.append(HexCell(
                id=encode_identifier(center.x, center.y, zoom),
                center=center,
                zoom_level=zoom,
                row=row,
                col=col,
            ))
    return cells


def _intersecting(task: Tuple[Polygon, List[HexCell]]) -> List[HexCell]:
    """Candidates whose hexagon intersects the polygon (touching counts)."""
    polygon, candidates = task
    prepared = prep(polygon)
    return [
        cell for cell in candidates
        if prepared.intersects(build_hexagon(cell.center, CELL_RADIUS[cell.zoom_level]))
    ]


def _extent_cells(min_x: float, min_y: float, max_x: float, max_y: float,
                  zoom: int, parallel: bool = True) -> List[HexCell]:
    if not is_valid_zoom(zoom):
        return []

    min_row, max_row, min_col, max_col = _corner_span(min_x, min_y, max_x, max_y, zoom)
    batch_rows = max(1, int(config.get('grids.parallel.batch_rows', 64)))
    batches = [
        (first, min(first + batch_rows - 1, max_row), min_col, max_col, zoom)
        for first in range(min_row, max_row + 1, batch_rows)
    ]
    work_size = (max_row - min_row + 1) * (max_col - min_col + 1)

    results = _run(_enumerate_rows, batches, work_size, parallel)
    return [cell for batch in results for cell in batch]


def _polygon_cells(polygon: Polygon, zoom: int, parallel: bool = True) -> List[HexCell]:
    if not is_valid_zoom(zoom) or polygon.is_empty:
        return []

    candidates = _extent_cells(*polygon.bounds, zoom, parallel=parallel)
    batch_cells = max(1, int(config.get('grids.parallel.batch_cells', 20000)))
    tasks = [
        (polygon, candidates[start:start + batch_cells])
        for start in range(0, len(candidates), batch_cells)
    ]

    results = _run(_intersecting, tasks, len(candidates), parallel)
    return [cell for batch in results for cell in batch]


def _candidate_count(polygon: Polygon, zoom: int) -> int:
    if polygon.is_empty:
        return 0
    min_row, max_row, min_col, max_col = _corner_span(*polygon.bounds, zoom)
    return (max_row - min_row + 1) * (max_col - min_col + 1)


def _multipolygon_cells(parts: Sequence[Polygon], zoom: int) -> List[HexCell]:
    if not is_valid_zoom(zoom) or not parts:
        return []

    if len(parts) == 1:
        per_part = [_polygon_cells(parts[0], zoom)]
    else:
        # Parts fan out; each part runs inline inside its worker
        work_size = sum(_candidate_count(part, zoom) for part in parts)
        per_part = ordered_map(
            partial(_polygon_cells, zoom=zoom, parallel=False),
            parts,
            work_size=work_size,
        )

    seen = set()
    cells = []
    for part_cells in per_part:
        for cell in part_cells:
            if cell.id in seen:
                continue
            seen.add(cell.id)
            cells.append(cell)
    return cells


def _polygon_parts(geometry: Union[MultiPolygon, Iterable[Polygon]]) -> List[Polygon]:
    if isinstance(geometry, Polygon):
        return [geometry]
    if isinstance(geometry, MultiPolygon):
        return list(geometry.geoms)
    parts = list(geometry)
    for part in parts:
        if not isinstance(part, Polygon):
            raise GeometryParseError(f"Expected Polygon parts, got {type(part).__name__}")
    return parts


class HexagonalGrid(BaseGrid):
    """
    Ordered set of hexagonal cells at one zoom level.

    Grids are built by the ``from_*`` constructors (or ``GridFactory``). Cells
    are unique by id, share the grid zoom and keep generation order: row-major
    for extents, part order for multipolygons.

    Bulk constructors never raise for an invalid zoom; they return an empty
    grid.
    """

    def __init__(self, cells: Iterable[HexCell], zoom_level: int):
        super().__init__(cells, zoom_level)
        self._by_id: Dict[str, HexCell] = {}
        self._by_row_col: Dict[Tuple[int, int], HexCell] = {}
        for cell in self._cells:
            self._by_id.setdefault(cell.id, cell)
            self._by_row_col.setdefault((cell.row, cell.col), cell)

    @classmethod
    def from_extent(cls,
                    min_x: float,
                    min_y: float,
                    max_x: float,
                    max_y: float,
                    zoom_level: int) -> 'HexagonalGrid':
        """
        All cells whose index falls within the span of the extent corners.

        Args:
            min_x, min_y, max_x, max_y: Extent in BNG metres
            zoom_level: Zoom level 0-15

        Returns:
            Grid in row-major order; cells centred below the grid origin are
            dropped
        """
        with grid_operation('from_extent', zoom=zoom_level, source='extent') as metrics:
            cells = _extent_cells(min_x, min_y, max_x, max_y, zoom_level)
            metrics['cells_generated'] = len(cells)
            logger.debug(f"Generated {len(cells)} cells for extent "
                         f"({min_x}, {min_y}, {max_x}, {max_y})")
        return cls(cells, zoom_level)

    @classmethod
    def from_bounds(cls,
                    bounds: Union[str, BoundsDefinition, Tuple[float, float, float, float]],
                    zoom_level: int) -> 'HexagonalGrid':
        """
        Grid over a bounds definition, a named region or an extent tuple.

        Raises:
            ValueError: If a named region is unknown
        """
        if isinstance(bounds, str):
            bounds = BoundsManager().get_bounds(bounds)
        if isinstance(bounds, BoundsDefinition):
            if Crs(bounds.crs) is Crs.WGS84:
                return cls.from_wgs84_extent(*bounds.bounds, zoom_level)
            bounds = bounds.bounds
        return cls.from_extent(*bounds, zoom_level)

    @classmethod
    def from_polygon(cls, polygon: Polygon, zoom_level: int) -> 'HexagonalGrid':
        """
        Cells whose hexagon intersects the polygon.

        Candidates come from the polygon's bounding box; a hexagon that only
        touches the boundary is kept. An empty polygon gives an empty grid.

        Raises:
            GeometryParseError: If ``polygon`` is not a Polygon
        """
        if not isinstance(polygon, Polygon):
            raise GeometryParseError(f"Expected Polygon, got {getattr(polygon, 'geom_type', type(polygon).__name__)}")

        with grid_operation('from_polygon', zoom=zoom_level, source='polygon') as metrics:
            cells = _polygon_cells(polygon, zoom_level)
            metrics['cells_generated'] = len(cells)
            logger.debug(f"Kept {len(cells)} intersecting cells")
        return cls(cells, zoom_level)

    @classmethod
    def from_multipolygon(cls,
                          multipolygon: Union[MultiPolygon, Iterable[Polygon]],
                          zoom_level: int) -> 'HexagonalGrid':
        """
        Union of ``from_polygon`` over every part.

        Cells are concatenated in part order and deduplicated by id, keeping
        the first occurrence.
        """
        parts = _polygon_parts(multipolygon)
        with grid_operation('from_multipolygon', zoom=zoom_level, source='multipolygon') as metrics:
            cells = _multipolygon_cells(parts, zoom_level)
            metrics['cells_generated'] = len(cells)
            metrics['parts'] = len(parts)
            logger.debug(f"Kept {len(cells)} unique cells across {len(parts)} parts")
        return cls(cells, zoom_level)

    @classmethod
    def from_wgs84_extent(cls,
                          min_lon: float,
                          min_lat: float,
                          max_lon: float,
                          max_lat: float,
                          zoom_level: int,
                          projection: Optional[BngProjection] = None) -> 'HexagonalGrid':
        """Grid over the BNG envelope of a lon/lat box."""
        projection = projection or BngProjection()
        projected = projection.project_geometry(box(min_lon, min_lat, max_lon, max_lat))
        return cls.from_extent(*projected.bounds, zoom_level)

    @classmethod
    def from_wgs84_polygon(cls,
                           polygon: Polygon,
                           zoom_level: int,
                           projection: Optional[BngProjection] = None) -> 'HexagonalGrid':
        """``from_polygon`` for a lon/lat polygon."""
        if polygon.is_empty:
            return cls((), zoom_level)
        projection = projection or BngProjection()
        return cls.from_polygon(projection.project_geometry(polygon), zoom_level)

    @classmethod
    def from_wgs84_multipolygon(cls,
                                multipolygon: Union[MultiPolygon, Iterable[Polygon]],
                                zoom_level: int,
                                projection: Optional[BngProjection] = None) -> 'HexagonalGrid':
        """``from_multipolygon`` for lon/lat polygons."""
        projection = projection or BngProjection()
        parts = [
            part if part.is_empty else projection.project_geometry(part)
            for part in _polygon_parts(multipolygon)
        ]
        return cls.from_multipolygon(parts, zoom_level)

    def get_cell_at(self, point: CoordinateLike) -> Optional[HexCell]:
        """Cell of this grid containing a BNG point, or None."""
        try:
            row, col = point_to_cell(as_coordinate(point), self._zoom_level)
        except InvalidZoomLevel:
            return None
        return self._by_row_col.get((row, col))

    def get_cell_by_id(self, cell_id: str) -> Optional[HexCell]:
        return self._by_id.get(cell_id)
