"""Input helpers."""

from .geometry_parser import parse_geometry, parse_geojson, parse_wkt

__all__ = ['parse_geometry', 'parse_geojson', 'parse_wkt']
