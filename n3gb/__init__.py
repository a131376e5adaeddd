"""
Hexagonal spatial index over the British National Grid (EPSG:27700).

Usage Example:
    from n3gb import HexCell, HexagonalGrid

    cell = HexCell.from_bng((383640.0, 398260.0), 12)
    same = HexCell.from_identifier(cell.id)

    grid = HexagonalGrid.from_extent(457000, 339500, 458000, 340500, 10)
    records = grid.to_records()
"""

from .abstractions.types import Coordinate, Crs, DecodedIdentifier, RowCol
from .exceptions import (
    N3gbError,
    InvalidZoomLevel,
    IdentifierError,
    InvalidIdentifierLength,
    InvalidChecksum,
    UnsupportedVersion,
    Base64DecodeError,
    IdentifierRangeError,
    InvalidDimension,
    ProjectionError,
    GeometryParseError,
    GridConfigurationError,
)
from .grid_systems import (
    CELL_RADIUS,
    CELL_WIDTHS,
    GRID_EXTENTS,
    IDENTIFIER_VERSION,
    SCALE_FACTOR,
    point_to_cell,
    cell_to_point,
    encode_identifier,
    decode_identifier,
    build_hexagon,
    HexagonDims,
    bounding_box,
    HexCell,
    HexagonalGrid,
    BoundsDefinition,
    BoundsManager,
    GridFactory,
    GridSpecification,
    ExtentSource,
    PolygonSource,
    MultiPolygonSource,
)
from .projection import BngProjection
from .utils import parse_geometry

__version__ = '0.1.0'

__all__ = [
    'Coordinate', 'Crs', 'DecodedIdentifier', 'RowCol',
    'N3gbError', 'InvalidZoomLevel', 'IdentifierError', 'InvalidIdentifierLength',
    'InvalidChecksum', 'UnsupportedVersion', 'Base64DecodeError', 'IdentifierRangeError',
    'InvalidDimension', 'ProjectionError', 'GeometryParseError', 'GridConfigurationError',
    'CELL_RADIUS', 'CELL_WIDTHS', 'GRID_EXTENTS', 'IDENTIFIER_VERSION', 'SCALE_FACTOR',
    'point_to_cell', 'cell_to_point', 'encode_identifier', 'decode_identifier',
    'build_hexagon', 'HexagonDims', 'bounding_box',
    'HexCell', 'HexagonalGrid', 'BoundsDefinition', 'BoundsManager',
    'GridFactory', 'GridSpecification', 'ExtentSource', 'PolygonSource', 'MultiPolygonSource',
    'BngProjection', 'parse_geometry',
]
