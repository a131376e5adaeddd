# n3gb/grid_systems/hex_cell.py
"""Single hexagonal cell and the constructors that produce cells from geometry."""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from shapely.geometry import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from shapely.geometry.base import BaseGeometry

from ..abstractions.types import Coordinate, Crs
from ..exceptions import GeometryParseError
from ..infrastructure.logging import log_operation
from ..projection import BngProjection
from .constants import CELL_RADIUS
from .coordinate_index import validate_zoom, cell_to_point, point_to_cell
from .geometry import build_hexagon
from .identifier import decode_identifier, encode_identifier

CoordinateLike = Union[Coordinate, Tuple[float, float], Point]

# Sampling step along a line, as a fraction of the cell circumradius
LINE_STEP_FRACTION = 0.5


def as_coordinate(coord: CoordinateLike) -> Coordinate:
    if isinstance(coord, Point):
        return Coordinate.from_point(coord)
    x, y = coord
    return Coordinate(float(x), float(y))


def _projection_for(crs: Union[Crs, str], projection: Optional[BngProjection]) -> Optional[BngProjection]:
    """Provider needed for ``crs``; None for BNG input."""
    if Crs(crs) is Crs.BNG:
        return None
    return projection or BngProjection()


@dataclass(frozen=True)
class HexCell:
    """
    One hexagon of the grid at a zoom level.

    ``id`` encodes the snapped centre and zoom, so decoding it and re-indexing
    the centre reproduces ``(row, col)``.
    """
    id: str
    center: Coordinate
    zoom_level: int
    row: int
    col: int

    @classmethod
    def _from_row_col(cls, row: int, col: int, zoom: int) -> 'HexCell':
        center = cell_to_point(row, col, zoom)
        return cls(
            id=encode_identifier(center.x, center.y, zoom),
            center=center,
            zoom_level=zoom,
            row=row,
            col=col,
        )

    @classmethod
    def from_coordinate(cls,
                        coord: CoordinateLike,
                        zoom: int,
                        crs: Union[Crs, str] = Crs.BNG,
                        projection: Optional[BngProjection] = None) -> 'HexCell':
        """
        Cell containing a coordinate.

        Args:
            coord: (x, y) tuple, Coordinate or shapely Point
            zoom: Zoom level 0-15
            crs: CRS of ``coord``; WGS84 input is projected to BNG first
            projection: Projection provider to reuse for WGS84 input

        Raises:
            InvalidZoomLevel: If zoom is outside 0-15
            ProjectionError: If WGS84 input cannot be projected
            IdentifierRangeError: If the snapped centre is negative
        """
        coord = as_coordinate(coord)
        provider = _projection_for(crs, projection)
        if provider is not None:
            coord = Coordinate(*provider.to_projected(coord.x, coord.y))

        row, col = point_to_cell(coord, zoom)
        return cls._from_row_col(row, col, zoom)

    @classmethod
    def from_bng(cls, coord: CoordinateLike, zoom: int) -> 'HexCell':
        """Cell containing a BNG (easting, northing) coordinate."""
        return cls.from_coordinate(coord, zoom, Crs.BNG)

    @classmethod
    def from_wgs84(cls,
                   coord: CoordinateLike,
                   zoom: int,
                   projection: Optional[BngProjection] = None) -> 'HexCell':
        """Cell containing a WGS84 (lon, lat) coordinate."""
        return cls.from_coordinate(coord, zoom, Crs.WGS84, projection)

    @classmethod
    def from_identifier(cls, identifier: str) -> 'HexCell':
        """
        Rebuild a cell from its identifier.

        Raises:
            IdentifierError: If the identifier cannot be decoded
            InvalidZoomLevel: If the decoded zoom is outside 0-15
        """
        decoded = decode_identifier(identifier)
        center = Coordinate(decoded.easting, decoded.northing)
        row, col = point_to_cell(center, decoded.zoom)
        return cls(
            id=identifier,
            center=center,
            zoom_level=decoded.zoom,
            row=row,
            col=col,
        )

    @classmethod
    @log_operation('cells_from_line', source='line')
    def from_line_string(cls,
                         line: Union[LineString, List[CoordinateLike]],
                         zoom: int,
                         crs: Union[Crs, str] = Crs.BNG,
                         projection: Optional[BngProjection] = None) -> List['HexCell']:
        """
        Cells crossed by a line, sampled every half circumradius.

        Each segment is sampled at ``ceil(length / step) + 1`` evenly spaced
        points including both ends. The first sighting of a (row, col) produces
        the cell; results are unique and in traversal order. Sampling can miss a
        cell the line only clips at a corner.

        Args:
            line: shapely LineString or sequence of coordinates
            zoom: Zoom level 0-15
            crs: CRS of the line vertices
            projection: Projection provider to reuse for WGS84 input

        Returns:
            List of unique cells along the line
        """
        validate_zoom(zoom)

        if isinstance(line, LineString):
            vertices = [Coordinate(float(x), float(y)) for x, y, *_ in line.coords]
        else:
            vertices = [as_coordinate(c) for c in line]

        provider = _projection_for(crs, projection)
        if provider is not None:
            vertices = [Coordinate(*provider.to_projected(v.x, v.y)) for v in vertices]

        step = CELL_RADIUS[zoom] * LINE_STEP_FRACTION
        seen = set()
        cells: List[HexCell] = []

        for start, end in zip(vertices, vertices[1:]):
            dx = end.x - start.x
            dy = end.y - start.y
            steps = math.ceil(math.hypot(dx, dy) / step)

            for i in range(steps + 1):
                t = i / steps if steps else 0.0
                row_col = point_to_cell((start.x + t * dx, start.y + t * dy), zoom)
                if row_col in seen:
                    continue
                seen.add(row_col)
                cells.append(cls._from_row_col(row_col.row, row_col.col, zoom))

        return cells

    @classmethod
    @log_operation('cells_from_geometry', source='geometry')
    def from_geometry(cls,
                      geometry: BaseGeometry,
                      zoom: int,
                      crs: Union[Crs, str] = Crs.BNG,
                      projection: Optional[BngProjection] = None) -> List['HexCell']:
        """
        Cells for an arbitrary shapely geometry.

        Points give one cell each, lines are sampled, polygons give the cell of
        their centroid (empty polygons give none). Collections are flattened in
        order.

        Raises:
            GeometryParseError: For unsupported geometry types (e.g. LinearRing)
        """
        # One provider for the whole geometry
        projection = _projection_for(crs, projection)
        crs = Crs.WGS84 if projection is not None else Crs.BNG
        return cls._cells_for_geometry(geometry, zoom, crs, projection)

    @classmethod
    def _cells_for_geometry(cls, geometry, zoom, crs, projection) -> List['HexCell']:
        if isinstance(geometry, Point):
            if geometry.is_empty:
                return []
            return [cls.from_coordinate(geometry, zoom, crs, projection)]

        if isinstance(geometry, LineString) and geometry.geom_type == 'LineString':
            return cls.from_line_string(geometry, zoom, crs, projection)

        if isinstance(geometry, Polygon):
            if geometry.is_empty:
                return []
            return [cls.from_coordinate(geometry.centroid, zoom, crs, projection)]

        if isinstance(geometry, (MultiPoint, MultiLineString, MultiPolygon, GeometryCollection)):
            cells: List[HexCell] = []
            for part in geometry.geoms:
                cells.extend(cls._cells_for_geometry(part, zoom, crs, projection))
            return cells

        raise GeometryParseError(f"Unsupported geometry type: {getattr(geometry, 'geom_type', type(geometry).__name__)}")

    @property
    def easting(self) -> float:
        return self.center.x

    @property
    def northing(self) -> float:
        return self.center.y

    def to_polygon(self) -> Polygon:
        """Hexagon boundary in BNG metres."""
        return build_hexagon(self.center, CELL_RADIUS[self.zoom_level])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for export."""
        return {
            'id': self.id,
            'zoom': self.zoom_level,
            'row': self.row,
            'col': self.col,
            'easting': self.easting,
            'northing': self.northing,
            'geometry_wkt': self.to_polygon().wkt,
        }
