"""Tests for bulk cell generation."""

import numpy as np
import pytest
from shapely.geometry import MultiPolygon, Point, Polygon, box

from n3gb import BoundsDefinition, HexCell, HexagonalGrid
from n3gb.exceptions import GeometryParseError
from n3gb.grid_systems.constants import CELL_RADIUS
from n3gb.grid_systems.coordinate_index import point_to_cell
from n3gb.grid_systems.dimensions import HexagonDims


def ids(grid):
    return [cell.id for cell in grid]


class TestFromExtent:
    """Test extent enumeration."""

    def test_cells_in_extent(self, sample_extent):
        grid = HexagonalGrid.from_extent(*sample_extent, 10)

        assert not grid.is_empty
        assert grid.zoom_level == 10
        assert all(cell.zoom_level == 10 for cell in grid)
        assert all(cell.easting >= 0 and cell.northing >= 0 for cell in grid)

    def test_cells_at_origin_reindex(self):
        """Cells in the first columns, odd rows included, index back to themselves."""
        grid = HexagonalGrid.from_extent(0, 0, 1000, 1000, 10)

        assert any(cell.row % 2 == 1 and cell.col == 0 for cell in grid)
        for cell in grid:
            restored = HexCell.from_identifier(cell.id)
            assert (restored.row, restored.col) == (cell.row, cell.col)
            assert grid.get_cell_at(cell.center) == cell

    def test_unique_ids(self, sample_extent):
        grid = HexagonalGrid.from_extent(*sample_extent, 10)
        assert len(set(ids(grid))) == len(grid)

    def test_row_major_order(self, sample_extent):
        grid = HexagonalGrid.from_extent(*sample_extent, 10)
        keys = [(cell.row, cell.col) for cell in grid]
        assert keys == sorted(keys)

    def test_covers_corner_span(self, sample_extent):
        grid = HexagonalGrid.from_extent(*sample_extent, 10)
        min_x, min_y, max_x, max_y = sample_extent
        corners = [point_to_cell(c, 10) for c in
                   ((min_x, min_y), (max_x, min_y), (max_x, max_y), (min_x, max_y))]
        rows = [rc.row for rc in corners]
        cols = [rc.col for rc in corners]

        expected = (max(rows) - min(rows) + 1) * (max(cols) - min(cols) + 1)
        assert len(grid) == expected

    def test_ids_reindex(self, sample_extent):
        for cell in HexagonalGrid.from_extent(*sample_extent, 10):
            restored = HexCell.from_identifier(cell.id)
            assert (restored.row, restored.col) == (cell.row, cell.col)

    def test_cells_match_point_constructor(self, sample_extent):
        grid = HexagonalGrid.from_extent(*sample_extent, 10)
        for cell in grid.cells[:20]:
            assert HexCell.from_bng(cell.center, 10) == cell

    def test_centres_below_origin_are_dropped(self):
        grid = HexagonalGrid.from_extent(-2000, -2000, 2000, 2000, 9)

        assert not grid.is_empty
        assert all(cell.easting >= 0 and cell.northing >= 0 for cell in grid)

    @pytest.mark.parametrize("zoom", [-1, 16, 99])
    def test_invalid_zoom_gives_empty_grid(self, sample_extent, zoom):
        grid = HexagonalGrid.from_extent(*sample_extent, zoom)

        assert grid.is_empty
        assert len(grid) == 0
        assert grid.zoom_level == zoom

    def test_from_bounds(self, sample_extent):
        expected = ids(HexagonalGrid.from_extent(*sample_extent, 10))

        assert ids(HexagonalGrid.from_bounds(sample_extent, 10)) == expected
        assert ids(HexagonalGrid.from_bounds(BoundsDefinition('test', sample_extent), 10)) == expected
        assert ids(HexagonalGrid.from_bounds('457000,339500,458000,340500', 10)) == expected

    def test_from_named_bounds(self):
        grid = HexagonalGrid.from_bounds('bng', 1)
        assert not grid.is_empty


class TestFromPolygon:
    """Test polygon filtering."""

    def test_fewer_cells_than_bounding_box(self, sample_triangle):
        polygon_grid = HexagonalGrid.from_polygon(sample_triangle, 10)
        extent_grid = HexagonalGrid.from_extent(*sample_triangle.bounds, 10)

        assert 0 < len(polygon_grid) < len(extent_grid)
        assert set(ids(polygon_grid)) <= set(ids(extent_grid))

    def test_every_cell_intersects(self, sample_triangle):
        for cell in HexagonalGrid.from_polygon(sample_triangle, 10):
            assert cell.to_polygon().intersects(sample_triangle)

    def test_keeps_extent_order(self, sample_triangle):
        polygon_ids = ids(HexagonalGrid.from_polygon(sample_triangle, 10))
        extent_ids = [i for i in ids(HexagonalGrid.from_extent(*sample_triangle.bounds, 10))
                      if i in set(polygon_ids)]
        assert polygon_ids == extent_ids

    def test_small_polygon_inside_one_cell(self):
        cell = HexCell.from_bng((457996.0, 339874.0), 10)
        tiny = Point(cell.center).buffer(1.0)
        grid = HexagonalGrid.from_polygon(tiny, 10)

        assert cell.id in ids(grid)

    def test_touching_counts(self):
        """A polygon sharing only a hexagon vertex still selects that cell."""
        cell = HexCell.from_bng((457996.0, 339874.0), 10)
        radius = CELL_RADIUS[10]
        vertex = cell.to_polygon().exterior.coords[0]
        far_x = cell.easting + 3 * 130
        outside = Polygon([
            vertex,
            (far_x, cell.northing + 0.6 * radius),
            (far_x, cell.northing - 0.3 * radius),
        ])

        assert cell.to_polygon().touches(outside)
        assert cell.id in ids(HexagonalGrid.from_polygon(outside, 10))

    def test_empty_polygon(self):
        assert HexagonalGrid.from_polygon(Polygon(), 10).is_empty

    def test_invalid_zoom(self, sample_triangle):
        assert HexagonalGrid.from_polygon(sample_triangle, 16).is_empty

    def test_rejects_non_polygon(self, sample_multipolygon):
        with pytest.raises(GeometryParseError):
            HexagonalGrid.from_polygon(sample_multipolygon, 10)


class TestFromMultiPolygon:
    """Test multi-part expansion and deduplication."""

    def test_identical_parts_deduplicate(self, sample_triangle):
        single = HexagonalGrid.from_polygon(sample_triangle, 10)
        double = HexagonalGrid.from_multipolygon(MultiPolygon([sample_triangle, sample_triangle]), 10)

        assert set(ids(double)) == set(ids(single))
        assert len(double) == len(single)

    def test_part_order(self, sample_multipolygon):
        first, second = sample_multipolygon.geoms
        grid = HexagonalGrid.from_multipolygon(sample_multipolygon, 10)

        expected = ids(HexagonalGrid.from_polygon(first, 10)) + ids(HexagonalGrid.from_polygon(second, 10))
        assert ids(grid) == expected

    def test_overlapping_parts_keep_first(self):
        left = box(457000, 339500, 457600, 340000)
        right = box(457400, 339500, 458000, 340000)
        grid = HexagonalGrid.from_multipolygon(MultiPolygon([left, right]), 10)
        left_ids = ids(HexagonalGrid.from_polygon(left, 10))

        assert ids(grid)[:len(left_ids)] == left_ids
        assert len(set(ids(grid))) == len(grid)

    def test_list_of_polygons(self, sample_multipolygon):
        assert ids(HexagonalGrid.from_multipolygon(list(sample_multipolygon.geoms), 10)) == \
            ids(HexagonalGrid.from_multipolygon(sample_multipolygon, 10))

    def test_empty_multipolygon(self):
        assert HexagonalGrid.from_multipolygon(MultiPolygon(), 10).is_empty

    def test_invalid_zoom(self, sample_multipolygon):
        assert HexagonalGrid.from_multipolygon(sample_multipolygon, -1).is_empty


class TestQueries:
    """Test grid accessors."""

    @pytest.fixture
    def grid(self, sample_extent):
        return HexagonalGrid.from_extent(*sample_extent, 10)

    def test_get_cell_at(self, grid):
        cell = grid.get_cell_at((457500.0, 340000.0))

        assert cell is not None
        assert cell == HexCell.from_bng((457500.0, 340000.0), 10)
        assert grid.get_cell_at(Point(457500.0, 340000.0)) == cell

    def test_get_cell_at_outside(self, grid):
        assert grid.get_cell_at((100000.0, 100000.0)) is None

    def test_get_cell_at_on_invalid_zoom_grid(self, sample_extent):
        grid = HexagonalGrid.from_extent(*sample_extent, 16)
        assert grid.get_cell_at((457500.0, 340000.0)) is None

    def test_get_cell_by_id(self, grid):
        cell = grid.cells[3]
        assert grid.get_cell_by_id(cell.id) is cell
        assert grid.get_cell_by_id('AQAA' + 'A' * 20 + 'AQ') is None

    def test_filter(self, grid):
        filtered = grid.filter(lambda cell: cell.easting > 457500.0)

        assert filtered
        assert all(cell.easting > 457500.0 for cell in filtered)
        assert filtered == [cell for cell in grid if cell.easting > 457500.0]

    def test_iteration_and_len(self, grid):
        assert list(grid) == list(grid.cells)
        assert len(grid) == len(grid.cells)
        assert isinstance(grid.cells, tuple)

    def test_to_polygons(self, grid):
        polygons = grid.to_polygons()

        assert len(polygons) == len(grid)
        for polygon in polygons:
            coords = list(polygon.exterior.coords)
            assert len(coords) == 7
            assert coords[0] == coords[-1]

    def test_get_cells_in_bounds(self, grid):
        cells = grid.get_cells_in_bounds((457400, 339900, 457600, 340100))

        assert cells
        assert len(cells) < len(grid)
        assert grid.get_cell_at((457500.0, 340000.0)) in cells

    def test_to_records(self, grid):
        records = grid.to_records()

        assert len(records) == len(grid)
        assert records[0] == grid.cells[0].to_dict()

    def test_to_columns(self, grid):
        columns = grid.to_columns()

        assert columns['id'].dtype == object
        assert columns['zoom'].dtype == np.uint8
        assert columns['row'].dtype == np.int64
        assert columns['col'].dtype == np.int64
        assert columns['easting'].dtype == np.float64
        assert columns['northing'].dtype == np.float64
        assert len(columns['geometry']) == len(grid)
        assert list(columns['id']) == ids(grid)
        assert (columns['zoom'] == 10).all()

    def test_calculate_statistics(self, grid):
        stats = grid.calculate_statistics()
        cell_area_km2 = HexagonDims.from_circumradius(CELL_RADIUS[10]).area / 1_000_000

        assert stats['cell_count'] == len(grid)
        assert stats['zoom_level'] == 10
        assert stats['avg_cell_area_km2'] == pytest.approx(cell_area_km2)
        assert stats['total_area_km2'] == pytest.approx(cell_area_km2 * len(grid))
        assert stats['crs'] == 'EPSG:27700'
        min_x, min_y, max_x, max_y = stats['bounds']
        assert min_x < 457000 and max_x > 458000

    def test_statistics_of_empty_grid(self):
        stats = HexagonalGrid((), 10).calculate_statistics()

        assert stats['cell_count'] == 0
        assert stats['total_area_km2'] == 0
        assert stats['bounds'] is None


class TestWgs84Constructors:
    """Test lon/lat grid constructors."""

    def test_wgs84_polygon(self, bng_projection):
        polygon = box(-1.16, 52.95, -1.15, 52.955)
        grid = HexagonalGrid.from_wgs84_polygon(polygon, 10, bng_projection)
        expected = HexagonalGrid.from_polygon(bng_projection.project_geometry(polygon), 10)

        assert not grid.is_empty
        assert ids(grid) == ids(expected)

    def test_wgs84_extent(self, bng_projection):
        grid = HexagonalGrid.from_wgs84_extent(-1.16, 52.95, -1.15, 52.955, 10, bng_projection)
        projected = bng_projection.project_geometry(box(-1.16, 52.95, -1.15, 52.955))

        assert ids(grid) == ids(HexagonalGrid.from_extent(*projected.bounds, 10))

    def test_wgs84_multipolygon(self, bng_projection):
        parts = MultiPolygon([box(-1.16, 52.95, -1.155, 52.953), box(-1.14, 52.95, -1.135, 52.953)])
        grid = HexagonalGrid.from_wgs84_multipolygon(parts, 10, bng_projection)
        expected = ids(HexagonalGrid.from_wgs84_polygon(parts.geoms[0], 10, bng_projection)) + \
            ids(HexagonalGrid.from_wgs84_polygon(parts.geoms[1], 10, bng_projection))

        assert ids(grid) == expected

    def test_wgs84_bounds_definition(self, bng_projection):
        bounds = BoundsDefinition('nottingham', (-1.16, 52.95, -1.15, 52.955), crs='EPSG:4326')
        grid = HexagonalGrid.from_bounds(bounds, 10)

        assert ids(grid) == ids(HexagonalGrid.from_wgs84_extent(-1.16, 52.95, -1.15, 52.955, 10))
