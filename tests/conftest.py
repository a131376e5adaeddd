"""Shared fixtures for n3gb tests."""

import pytest
import yaml
from shapely.geometry import MultiPolygon, Polygon

from n3gb.config import config
from n3gb.config.config import Config


@pytest.fixture
def test_config_file(tmp_path):
    """Write a YAML override file."""
    config_data = {
        'grids': {
            'default_zoom': 8,
            'parallel': {
                'executor': 'thread',
                'max_workers': 2,
            }
        },
        'processing_bounds': {
            'custom': {
                'manchester': [380000, 390000, 390000, 400000]
            }
        }
    }

    config_path = tmp_path / "n3gb.yml"
    with open(config_path, 'w') as f:
        yaml.dump(config_data, f)

    return config_path


@pytest.fixture
def test_config(test_config_file):
    """Create a real Config instance from the override file."""
    return Config(test_config_file)


@pytest.fixture
def thread_pool(monkeypatch):
    """Force every fan-out through a small thread pool."""
    parallel = config.settings['grids']['parallel']
    monkeypatch.setitem(parallel, 'executor', 'thread')
    monkeypatch.setitem(parallel, 'max_workers', 4)
    monkeypatch.setitem(parallel, 'parallel_threshold', 0)
    monkeypatch.setitem(parallel, 'batch_rows', 2)
    monkeypatch.setitem(parallel, 'batch_cells', 7)
    return parallel


@pytest.fixture
def sample_extent():
    """1 km square near Nottingham, BNG metres."""
    return (457000.0, 339500.0, 458000.0, 340500.0)


@pytest.fixture
def sample_triangle():
    """Right triangle covering half of the sample extent."""
    return Polygon([(457000, 339500), (458000, 339500), (457000, 340500)])


@pytest.fixture
def sample_multipolygon(sample_triangle):
    """Two disjoint parts: the triangle and a square 5 km east."""
    square = Polygon([(463000, 339500), (463500, 339500), (463500, 340000), (463000, 340000)])
    return MultiPolygon([sample_triangle, square])


@pytest.fixture(scope="session")
def bng_projection():
    """Shared WGS84 <-> BNG provider."""
    from n3gb.projection import BngProjection
    return BngProjection()
