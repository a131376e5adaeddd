# n3gb/grid_systems/bounds_manager.py
"""Named and parsed BNG bounds for grid generation."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple
import logging

from shapely.geometry import Polygon, box

from ..abstractions.types import Crs
from ..config import config
from .constants import GRID_EXTENTS

logger = logging.getLogger(__name__)

Extent = Tuple[float, float, float, float]


def parse_extent(values) -> Optional[Extent]:
    """Four numbers from a sequence or a ``"minx,miny,maxx,maxy"`` string, else None."""
    if isinstance(values, str):
        values = values.split(',')
    try:
        numbers = tuple(float(v) for v in values)
    except (TypeError, ValueError):
        return None
    if len(numbers) != 4:
        return None
    return numbers  # type: ignore[return-value]


@dataclass(frozen=True)
class BoundsDefinition:
    """Named rectangle, BNG metres unless ``crs`` says otherwise."""
    name: str
    bounds: Extent  # minx, miny, maxx, maxy
    crs: str = Crs.BNG.value
    category: str = "custom"  # grid, custom or a caller-chosen label
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def polygon(self) -> Polygon:
        return box(*self.bounds)

    @property
    def area_km2(self) -> float:
        """Planar area; only meaningful for BNG bounds."""
        minx, miny, maxx, maxy = self.bounds
        return (maxx - minx) * (maxy - miny) / 1e6

    def contains(self, x: float, y: float) -> bool:
        """Point test, edges included."""
        minx, miny, maxx, maxy = self.bounds
        return minx <= x <= maxx and miny <= y <= maxy

    def intersection(self, other_bounds: Extent) -> Optional[Extent]:
        """Overlap with another extent, or None when they are disjoint."""
        minx = max(self.bounds[0], other_bounds[0])
        miny = max(self.bounds[1], other_bounds[1])
        maxx = min(self.bounds[2], other_bounds[2])
        maxy = min(self.bounds[3], other_bounds[3])
        if minx > maxx or miny > maxy:
            return None
        return (minx, miny, maxx, maxy)

    def intersects(self, other_bounds: Extent) -> bool:
        """True when the extents overlap or share an edge."""
        return self.intersection(other_bounds) is not None

    def buffer(self, distance_m: float) -> 'BoundsDefinition':
        """Copy grown by ``distance_m`` on every side."""
        minx, miny, maxx, maxy = self.bounds
        return replace(
            self,
            name=f"{self.name}_buffered",
            bounds=(minx - distance_m, miny - distance_m, maxx + distance_m, maxy + distance_m),
            metadata={**self.metadata, 'buffered_m': distance_m},
        )


class BoundsManager:
    """
    Lookup of bounds by name.

    Knows the full grid extent as ``bng``, the regions configured under
    ``processing_bounds.custom`` and literal ``"minx,miny,maxx,maxy"`` strings.
    Custom regions are either a four-number list (BNG) or a mapping with
    ``bounds`` and optional ``crs``, ``category`` and ``metadata``.
    """

    REGIONS = {
        'bng': BoundsDefinition('bng', GRID_EXTENTS, category='grid'),
    }

    def __init__(self):
        self.custom_regions: Dict[str, BoundsDefinition] = {}
        for name, entry in (config.get('processing_bounds.custom') or {}).items():
            region = self._region_from_config(name, entry)
            if region is None:
                logger.warning(f"Ignoring malformed custom bounds '{name}': {entry!r}")
            else:
                self.custom_regions[name] = region

    @staticmethod
    def _region_from_config(name: str, entry) -> Optional[BoundsDefinition]:
        if isinstance(entry, dict):
            extent = parse_extent(entry.get('bounds'))
            if extent is None:
                return None
            return BoundsDefinition(
                name=name,
                bounds=extent,
                crs=entry.get('crs', Crs.BNG.value),
                category=entry.get('category', 'custom'),
                metadata=dict(entry.get('metadata') or {}),
            )

        if isinstance(entry, (list, tuple)):
            extent = parse_extent(entry)
            return BoundsDefinition(name, extent) if extent is not None else None

        return None

    def get_bounds(self, name: str) -> BoundsDefinition:
        """
        Resolve a region name or an extent string.

        Raises:
            ValueError: If ``name`` is neither a known region nor four
                comma-separated numbers
        """
        region = self.REGIONS.get(name) or self.custom_regions.get(name)
        if region is not None:
            return region

        extent = parse_extent(name) if ',' in name else None
        if extent is None:
            raise ValueError(f"Unknown bounds: {name}. Available: {self.list_available()}")
        return BoundsDefinition('custom_bounds', extent)

    def list_available(self) -> Dict[str, List[str]]:
        """Region names grouped by category."""
        available: Dict[str, List[str]] = {}
        for region in list(self.REGIONS.values()) + list(self.custom_regions.values()):
            available.setdefault(region.category, []).append(region.name)
        return available
