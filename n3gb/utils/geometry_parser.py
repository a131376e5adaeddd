"""WKT / GeoJSON text to shapely geometry."""

import json

from shapely import wkt
from shapely.errors import GEOSException, ShapelyError
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from ..exceptions import GeometryParseError


def parse_geometry(text: str) -> BaseGeometry:
    """
    Parse a geometry string, auto-detecting the format.

    Text starting with ``{`` (after trimming) is read as GeoJSON, anything
    else as WKT.

    Raises:
        GeometryParseError: If the text cannot be parsed
    """
    trimmed = text.strip()
    if trimmed.startswith('{'):
        return parse_geojson(trimmed)
    return parse_wkt(trimmed)


def parse_geojson(text: str) -> BaseGeometry:
    """Parse a GeoJSON Geometry or Feature. FeatureCollections are rejected."""
    try:
        data = json.loads(text)
    except ValueError as e:
        raise GeometryParseError(f"Invalid GeoJSON: {e}", e)

    if not isinstance(data, dict):
        raise GeometryParseError("GeoJSON must be an object")

    kind = data.get('type')
    if kind == 'FeatureCollection':
        raise GeometryParseError("FeatureCollection not supported, use individual geometries")
    if kind == 'Feature':
        data = data.get('geometry')
        if not data:
            raise GeometryParseError("Feature has no geometry")

    try:
        return shape(data)
    except (ShapelyError, GEOSException, KeyError, TypeError, ValueError, AttributeError) as e:
        raise GeometryParseError(f"Invalid GeoJSON geometry: {e}", e)


def parse_wkt(text: str) -> BaseGeometry:
    """Parse a WKT string."""
    try:
        return wkt.loads(text)
    except (ShapelyError, GEOSException, ValueError) as e:
        raise GeometryParseError(f"Invalid WKT: {e}", e)
