# n3gb/grid_systems/dimensions.py
"""Regular hexagon measurements derived from any one size input."""

import math
from dataclasses import dataclass
from typing import Tuple

from ..exceptions import InvalidDimension

SQRT3 = math.sqrt(3.0)


def _require_positive(value: float, label: str) -> None:
    if not value > 0:
        raise InvalidDimension(f"{label} must be positive, got: {value}")


@dataclass(frozen=True)
class HexagonDims:
    """All measurements of a regular hexagon with side ``side``."""
    side: float
    r_circum: float
    r_apothem: float
    d_corners: float
    d_flats: float
    perimeter: float
    area: float

    @classmethod
    def from_side(cls, side: float) -> 'HexagonDims':
        """Derive every measurement from the side length."""
        _require_positive(side, "Side length")
        return cls(
            side=side,
            r_circum=side,
            r_apothem=(SQRT3 / 2.0) * side,
            d_corners=2.0 * side,
            d_flats=SQRT3 * side,
            perimeter=6.0 * side,
            area=(3.0 * SQRT3 / 2.0) * side * side,
        )

    @classmethod
    def from_circumradius(cls, radius: float) -> 'HexagonDims':
        _require_positive(radius, "Circumradius")
        return cls.from_side(radius)

    @classmethod
    def from_apothem(cls, apothem: float) -> 'HexagonDims':
        _require_positive(apothem, "Apothem")
        return cls.from_side(2.0 * apothem / SQRT3)

    @classmethod
    def from_across_flats(cls, across_flats: float) -> 'HexagonDims':
        _require_positive(across_flats, "Across-flats")
        return cls.from_side(across_flats / SQRT3)

    @classmethod
    def from_across_corners(cls, across_corners: float) -> 'HexagonDims':
        _require_positive(across_corners, "Across-corners")
        return cls.from_side(across_corners / 2.0)

    @classmethod
    def from_area(cls, area: float) -> 'HexagonDims':
        _require_positive(area, "Area")
        return cls.from_side(math.sqrt((2.0 * area) / (3.0 * SQRT3)))


def bounding_box(side: float, pointy_top: bool = True) -> Tuple[float, float]:
    """
    Width and height of the box enclosing a hexagon.

    Args:
        side: Side length
        pointy_top: Orientation; the grid uses pointy-top hexagons

    Returns:
        (width, height)
    """
    _require_positive(side, "Side length")
    across_corners = 2.0 * side
    across_flats = SQRT3 * side
    if pointy_top:
        return across_flats, across_corners
    return across_corners, across_flats
