# n3gb/config/defaults.py
"""Default configuration settings."""

from pathlib import Path

LOGS_DIR = Path('logs')

PATHS = {
    'logs_dir': LOGS_DIR,
}

GRIDS = {
    'default_zoom': 10,
    'parallel': {
        'executor': 'process',        # 'process' or 'thread'
        'max_workers': None,          # None = os.cpu_count()
        'batch_rows': 64,             # rows per enumeration task
        'batch_cells': 20000,         # candidates per intersection task
        'parallel_threshold': 200000  # candidates below this run inline
    }
}

PROJECTION = {
    'geographic_crs': 'EPSG:4326',
    'projected_crs': 'EPSG:27700',
}

# Named BNG regions, e.g. {'manchester': [380000, 390000, 390000, 400000]}
PROCESSING_BOUNDS = {
    'custom': {}
}

LOGGING = {
    'level': 'INFO',
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'file': LOGS_DIR / 'n3gb.log',
    'max_file_size': 10 * 1024 * 1024,
    'backup_count': 3,
}
