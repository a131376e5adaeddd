# n3gb/projection/bng_projection.py
"""WGS84 <-> British National Grid transformations backed by pyproj."""

import math
from typing import Optional, Tuple

import pyproj
from pyproj.exceptions import CRSError, ProjError
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform

from ..config import config
from ..exceptions import ProjectionError


class BngProjection:
    """
    Owned, shareable projection provider.

    Builds both pyproj transformers once; pass the instance into conversion
    calls instead of relying on a hidden per-thread cache. Instances hold no
    mutable state after construction and are safe to share between threads.
    """

    def __init__(self,
                 geographic_crs: Optional[str] = None,
                 projected_crs: Optional[str] = None):
        """
        Initialize the projection provider.

        Args:
            geographic_crs: Source CRS of lon/lat input (defaults to config)
            projected_crs: Target grid CRS (defaults to config, EPSG:27700)
        """
        self.geographic_crs = geographic_crs or config.get('projection.geographic_crs', 'EPSG:4326')
        self.projected_crs = projected_crs or config.get('projection.projected_crs', 'EPSG:27700')
        self._setup_projections()

    def _setup_projections(self):
        """Setup coordinate transformers."""
        try:
            self.transformer_to_bng = pyproj.Transformer.from_crs(
                self.geographic_crs, self.projected_crs, always_xy=True
            )
            self.transformer_from_bng = pyproj.Transformer.from_crs(
                self.projected_crs, self.geographic_crs, always_xy=True
            )
        except (CRSError, ProjError) as e:
            raise ProjectionError(
                f"Cannot build transformer between {self.geographic_crs} and {self.projected_crs}", e
            )

    @staticmethod
    def _run(transformer: pyproj.Transformer, x: float, y: float) -> Tuple[float, float]:
        try:
            out_x, out_y = transformer.transform(x, y, errcheck=True)
        except ProjError as e:
            raise ProjectionError(f"Projection failed for ({x}, {y}): {e}", e)
        if not (math.isfinite(out_x) and math.isfinite(out_y)):
            raise ProjectionError(f"Projection produced non-finite result for ({x}, {y})")
        return out_x, out_y

    def to_projected(self, lon: float, lat: float) -> Tuple[float, float]:
        """Convert (lon, lat) to (easting, northing)."""
        return self._run(self.transformer_to_bng, lon, lat)

    def to_geographic(self, easting: float, northing: float) -> Tuple[float, float]:
        """Convert (easting, northing) to (lon, lat)."""
        return self._run(self.transformer_from_bng, easting, northing)

    def project_geometry(self, geometry: BaseGeometry) -> BaseGeometry:
        """Reproject a lon/lat shapely geometry to BNG."""
        return transform(self._vertex_transform(self.to_projected), geometry)

    def unproject_geometry(self, geometry: BaseGeometry) -> BaseGeometry:
        """Reproject a BNG shapely geometry to lon/lat."""
        return transform(self._vertex_transform(self.to_geographic), geometry)

    @staticmethod
    def _vertex_transform(convert):
        # shapely.ops.transform may hand over coordinate sequences as arrays
        def _apply(xs, ys, zs=None):
            if isinstance(xs, float) or not hasattr(xs, '__iter__'):
                return convert(xs, ys)
            pairs = [convert(float(x), float(y)) for x, y in zip(xs, ys)]
            return [p[0] for p in pairs], [p[1] for p in pairs]
        return _apply

    def __repr__(self) -> str:
        return f"BngProjection({self.geographic_crs!r} -> {self.projected_crs!r})"
