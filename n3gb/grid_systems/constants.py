# n3gb/grid_systems/constants.py
"""Fixed geometry of the BNG hex grid.

Radius and width are tabulated independently; the widths are rounded pitches
rather than ``radius * sqrt(3)``. Identifiers depend on these exact values.
"""

import numbers

# Identifier layout
IDENTIFIER_VERSION = 1
SCALE_FACTOR = 1000

# Grid extents (min_x, min_y, max_x, max_y) in BNG metres
GRID_EXTENTS = (0.0, 0.0, 750000.0, 1350000.0)

MIN_ZOOM_LEVEL = 0
MAX_ZOOM_LEVEL = 15

# Hexagon circumradius per zoom level (metres)
CELL_RADIUS = (
    1281249.9438829257,
    483045.8762201923,
    182509.65769514776,
    68979.50076169973,
    26069.67405498836,
    9849.595592375015,
    3719.867784388759,
    1399.497052515653,
    529.4301968468868,
    199.76319313961054,
    75.05553499465135,
    28.290163190291665,
    10.392304845413264,
    4.041451884327381,
    1.7320508075688774,
    0.5773502691896258,
)

# Horizontal pitch per zoom level (metres)
CELL_WIDTHS = (
    2219190.0, 836660.0, 316116.0, 119476.0, 45154.0, 17060.0, 6443.0, 2424.0,
    917.0, 346.0, 130.0, 49.0, 18.0, 7.0, 3.0, 1.0,
)


def is_valid_zoom(zoom) -> bool:
    """True when ``zoom`` is an integer in 0-15."""
    return isinstance(zoom, numbers.Integral) and not isinstance(zoom, bool) and \
        MIN_ZOOM_LEVEL <= zoom <= MAX_ZOOM_LEVEL


def row_spacing(zoom: int) -> float:
    """Vertical distance between row centres at ``zoom``."""
    return 1.5 * CELL_RADIUS[zoom]
