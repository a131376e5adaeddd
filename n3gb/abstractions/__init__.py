"""Type abstractions shared across the grid index."""

from .types import Coordinate, Crs, DecodedIdentifier, RowCol

__all__ = ['Coordinate', 'Crs', 'DecodedIdentifier', 'RowCol']
