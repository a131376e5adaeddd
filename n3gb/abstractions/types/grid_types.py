# n3gb/abstractions/types/grid_types.py
"""Grid system type definitions."""

from enum import Enum
from typing import NamedTuple


class Crs(str, Enum):
    """Coordinate reference system of caller-supplied geometry."""
    BNG = "EPSG:27700"
    WGS84 = "EPSG:4326"


class Coordinate(NamedTuple):
    """Canonical x/y coordinate (easting/northing or lon/lat)."""
    x: float
    y: float

    @classmethod
    def from_point(cls, point) -> 'Coordinate':
        """Build from any object exposing ``x``/``y`` (e.g. a shapely Point)."""
        return cls(float(point.x), float(point.y))


class RowCol(NamedTuple):
    """Discrete address of a cell at a zoom level."""
    row: int
    col: int


class DecodedIdentifier(NamedTuple):
    """Fields recovered from a cell identifier."""
    version: int
    easting: float
    northing: float
    zoom: int
