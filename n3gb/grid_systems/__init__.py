"""Hexagonal grid over the British National Grid."""

from .constants import (
    CELL_RADIUS, CELL_WIDTHS, GRID_EXTENTS, IDENTIFIER_VERSION, SCALE_FACTOR,
    MIN_ZOOM_LEVEL, MAX_ZOOM_LEVEL, is_valid_zoom,
)
from .coordinate_index import point_to_cell, cell_to_point
from .identifier import encode_identifier, decode_identifier
from .geometry import build_hexagon
from .dimensions import HexagonDims, bounding_box
from .hex_cell import HexCell
from .hexagonal_grid import HexagonalGrid
from .bounds_manager import BoundsDefinition, BoundsManager
from .grid_factory import (
    GridFactory, GridSpecification, ExtentSource, PolygonSource, MultiPolygonSource,
)

__all__ = [
    'CELL_RADIUS', 'CELL_WIDTHS', 'GRID_EXTENTS', 'IDENTIFIER_VERSION', 'SCALE_FACTOR',
    'MIN_ZOOM_LEVEL', 'MAX_ZOOM_LEVEL', 'is_valid_zoom',
    'point_to_cell', 'cell_to_point',
    'encode_identifier', 'decode_identifier',
    'build_hexagon',
    'HexagonDims', 'bounding_box',
    'HexCell',
    'HexagonalGrid',
    'BoundsDefinition', 'BoundsManager',
    'GridFactory', 'GridSpecification', 'ExtentSource', 'PolygonSource', 'MultiPolygonSource',
]
