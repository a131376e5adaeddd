# n3gb/grid_systems/coordinate_index.py
"""Point <-> (row, col) conversion for the offset hex layout."""

import math
from typing import Tuple

from ..abstractions.types import Coordinate, RowCol
from ..exceptions import InvalidZoomLevel
from .constants import CELL_WIDTHS, GRID_EXTENTS, is_valid_zoom, row_spacing


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +infinity.

    Odd-row cell centres sit exactly on a column tie (``col - 0.5``); rounding
    every tie the same direction keeps them in their own column on both sides
    of the x origin.
    """
    return int(math.floor(value + 0.5))


def row_parity(row: int) -> int:
    """1 for odd rows, 0 for even rows, negative rows included."""
    return row % 2


def validate_zoom(zoom) -> None:
    if not is_valid_zoom(zoom):
        raise InvalidZoomLevel(zoom)


def point_to_cell(coord: Tuple[float, float], zoom: int) -> RowCol:
    """
    Index a BNG coordinate to the (row, col) of the cell containing it.

    Coordinates outside the grid extent are not rejected; they produce
    deterministic, possibly negative, indices.

    Args:
        coord: (easting, northing) in metres
        zoom: Zoom level 0-15

    Returns:
        RowCol of the containing cell

    Raises:
        InvalidZoomLevel: If zoom is outside 0-15
    """
    validate_zoom(zoom)
    x, y = coord

    qx = (x - GRID_EXTENTS[0]) / CELL_WIDTHS[zoom]
    ry = (y - GRID_EXTENTS[1]) / row_spacing(zoom)

    row = round_half_up(ry)
    col = round_half_up(qx - row_parity(row))
    return RowCol(row, col)


def cell_to_point(row: int, col: int, zoom: int) -> Coordinate:
    """
    Centre of the cell at (row, col) in BNG metres.

    Raises:
        InvalidZoomLevel: If zoom is outside 0-15
    """
    validate_zoom(zoom)
    dx = CELL_WIDTHS[zoom]

    x = GRID_EXTENTS[0] + col * dx + row_parity(row) * (dx / 2.0)
    y = GRID_EXTENTS[1] + row * row_spacing(zoom)
    return Coordinate(x, y)
