# n3gb/grid_systems/geometry.py
"""Hexagon polygon construction."""

import math
from typing import List, Tuple

from shapely.geometry import Polygon


def hexagon_vertices(center: Tuple[float, float], radius: float) -> List[Tuple[float, float]]:
    """Closed ring of a pointy-top hexagon: vertex i at (30 + 60*i) degrees."""
    cx, cy = center
    coords = []
    for i in range(6):
        angle_rad = math.radians(30.0 + i * 60.0)
        coords.append((cx + radius * math.cos(angle_rad), cy + radius * math.sin(angle_rad)))
    coords.append(coords[0])
    return coords


def build_hexagon(center: Tuple[float, float], radius: float) -> Polygon:
    """
    Build the hexagon polygon around a cell centre.

    Args:
        center: (x, y) of the hexagon centre
        radius: Circumradius (centre to vertex)

    Returns:
        shapely Polygon whose exterior has 7 coordinates, first == last
    """
    return Polygon(hexagon_vertices(center, radius))
