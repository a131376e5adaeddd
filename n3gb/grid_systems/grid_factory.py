# n3gb/grid_systems/grid_factory.py
"""Grid construction from declarative specifications."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union
import logging

from shapely.geometry import MultiPolygon, Polygon

from ..abstractions.types import Crs
from ..config import config
from ..exceptions import GridConfigurationError
from ..projection import BngProjection
from ..utils import parse_geometry
from .bounds_manager import BoundsDefinition, BoundsManager
from .hexagonal_grid import HexagonalGrid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtentSource:
    """Rectangular extent, ``(min_x, min_y, max_x, max_y)``."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float
    crs: Crs = Crs.BNG

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    @classmethod
    def from_bounds(cls, bounds: BoundsDefinition) -> 'ExtentSource':
        return cls(*bounds.bounds, crs=Crs(bounds.crs))


@dataclass(frozen=True)
class PolygonSource:
    """Single polygon area."""
    polygon: Polygon
    crs: Crs = Crs.BNG


@dataclass(frozen=True)
class MultiPolygonSource:
    """Multi-part area; parts are unioned with duplicate cells removed."""
    multipolygon: MultiPolygon
    crs: Crs = Crs.BNG


GeometrySource = Union[ExtentSource, PolygonSource, MultiPolygonSource]


@dataclass
class GridSpecification:
    """Specification for grid creation."""
    zoom_level: Optional[int] = None
    source: Optional[GeometrySource] = None
    name: Optional[str] = None
    description: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            'zoom_level': self.zoom_level,
            'source': type(self.source).__name__ if self.source is not None else None,
            'crs': self.source.crs.value if self.source is not None else None,
            'name': self.name,
            'description': self.description,
            'metadata': self.metadata
        }


class GridFactory:
    """
    Build grids from specifications.

    A specification names a zoom level and exactly one geometry source. Dict
    specifications are also accepted::

        {'zoom_level': 10, 'bounds': 'bng'}
        {'zoom_level': 10, 'extent': [457000, 339500, 458000, 340500]}
        {'zoom_level': 10, 'geometry': 'POLYGON ((...))', 'crs': 'EPSG:4326'}

    ``zoom_level`` falls back to ``grids.default_zoom`` for dict
    specifications only, and the fallback is logged.
    """

    def __init__(self, projection: Optional[BngProjection] = None):
        """
        Initialize grid factory.

        Args:
            projection: Projection provider reused for WGS84 sources
        """
        self.bounds_manager = BoundsManager()
        self.projection = projection

    def _get_projection(self) -> BngProjection:
        if self.projection is None:
            self.projection = BngProjection()
        return self.projection

    def create_grid(self, spec: Union[GridSpecification, Dict]) -> HexagonalGrid:
        """
        Create a grid from specification.

        Args:
            spec: Grid specification or equivalent dict

        Returns:
            Created grid

        Raises:
            GridConfigurationError: If the zoom level or geometry source is missing
        """
        if isinstance(spec, dict):
            spec = self.specification_from_dict(spec)

        if spec.zoom_level is None:
            raise GridConfigurationError("Grid specification has no zoom level")
        if spec.source is None:
            raise GridConfigurationError("Grid specification has no geometry source")

        source = spec.source
        zoom = spec.zoom_level
        wgs84 = Crs(source.crs) is Crs.WGS84
        logger.info(f"Creating hexagonal grid at zoom {zoom} from {type(source).__name__}"
                    f"{' (WGS84)' if wgs84 else ''}")

        if isinstance(source, ExtentSource):
            if wgs84:
                return HexagonalGrid.from_wgs84_extent(*source.bounds, zoom, self._get_projection())
            return HexagonalGrid.from_extent(*source.bounds, zoom)

        if isinstance(source, PolygonSource):
            if wgs84:
                return HexagonalGrid.from_wgs84_polygon(source.polygon, zoom, self._get_projection())
            return HexagonalGrid.from_polygon(source.polygon, zoom)

        if isinstance(source, MultiPolygonSource):
            if wgs84:
                return HexagonalGrid.from_wgs84_multipolygon(source.multipolygon, zoom, self._get_projection())
            return HexagonalGrid.from_multipolygon(source.multipolygon, zoom)

        raise GridConfigurationError(f"Unsupported geometry source: {type(source).__name__}")

    def specification_from_dict(self, data: Dict[str, Any]) -> GridSpecification:
        """
        Build a specification from a plain dict.

        Raises:
            GridConfigurationError: If no or more than one source is given, or
                the geometry is not polygonal
        """
        given = [key for key in ('source', 'bounds', 'extent', 'geometry') if data.get(key) is not None]
        if len(given) > 1:
            raise GridConfigurationError(f"Grid specification has more than one source: {given}")

        crs = Crs(data.get('crs', Crs.BNG))
        source = data.get('source')

        if 'bounds' in given:
            bounds = data['bounds']
            if isinstance(bounds, str):
                try:
                    bounds = self.bounds_manager.get_bounds(bounds)
                except ValueError as e:
                    raise GridConfigurationError(str(e), e)
            if isinstance(bounds, BoundsDefinition):
                source = ExtentSource.from_bounds(bounds)
            else:
                source = self._extent_source(bounds, crs)
        elif 'extent' in given:
            source = self._extent_source(data['extent'], crs)
        elif 'geometry' in given:
            source = self._geometry_source(data['geometry'], crs)

        if 'zoom_level' in data:
            zoom_level = data['zoom_level']
        else:
            zoom_level = config.get('grids.default_zoom')
            logger.info(f"No zoom_level in grid specification; using grids.default_zoom={zoom_level}")

        return GridSpecification(
            zoom_level=zoom_level,
            source=source,
            name=data.get('name'),
            description=data.get('description'),
            metadata=data.get('metadata') or {}
        )

    @staticmethod
    def _extent_source(values, crs: Crs) -> ExtentSource:
        try:
            min_x, min_y, max_x, max_y = (float(v) for v in values)
        except (TypeError, ValueError) as e:
            raise GridConfigurationError(f"Extent must be four numbers, got {values!r}", e)
        return ExtentSource(min_x, min_y, max_x, max_y, crs=crs)

    @staticmethod
    def _geometry_source(geometry, crs: Crs) -> GeometrySource:
        if isinstance(geometry, str):
            geometry = parse_geometry(geometry)

        if isinstance(geometry, Polygon):
            return PolygonSource(geometry, crs=crs)
        if isinstance(geometry, MultiPolygon):
            return MultiPolygonSource(geometry, crs=crs)

        raise GridConfigurationError(
            f"Grid geometry must be a Polygon or MultiPolygon, got {getattr(geometry, 'geom_type', type(geometry).__name__)}"
        )
