"""Shared value types."""

from .grid_types import Coordinate, Crs, DecodedIdentifier, RowCol

__all__ = ['Coordinate', 'Crs', 'DecodedIdentifier', 'RowCol']
