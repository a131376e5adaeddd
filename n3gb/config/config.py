import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from . import defaults

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'N3GB_CONFIG'

SECTIONS = {
    'grids': defaults.GRIDS,
    'projection': defaults.PROJECTION,
    'processing_bounds': defaults.PROCESSING_BOUNDS,
    'logging': defaults.LOGGING,
    'paths': defaults.PATHS,
}


def find_config_file() -> Optional[Path]:
    """``$N3GB_CONFIG`` if set, else the first of ``./n3gb.yml`` and ``~/.n3gb/config.yml`` that exists."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    for candidate in (Path.cwd() / 'n3gb.yml', Path.home() / '.n3gb' / 'config.yml'):
        if candidate.is_file():
            return candidate
    return None


def merge_settings(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge ``override`` into ``base``; non-dict values replace."""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merge_settings(current, value)
        else:
            base[key] = value


class Config:
    """Configuration manager: package defaults with an optional YAML override."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        self.settings = self.load_defaults()
        self.config_file: Optional[Path] = None

        path = Path(config_file) if config_file is not None else find_config_file()
        if path is None or not path.exists():
            return

        try:
            self._apply_yaml(path)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Config file loading failed: {e} - using defaults")
            self.settings = self.load_defaults()
            return

        self.config_file = path
        logger.debug(f"Loaded configuration from {path}")

    def load_defaults(self) -> Dict[str, Any]:
        """Fresh copy of the default settings."""
        return {name: copy.deepcopy(section) for name, section in SECTIONS.items()}

    def _apply_yaml(self, path: Path):
        with open(path, 'r') as file:
            overrides = yaml.safe_load(file)
        if overrides is None:
            return
        if not isinstance(overrides, dict):
            raise yaml.YAMLError(f"Top level of {path} must be a mapping")
        merge_settings(self.settings, overrides)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``grids.parallel.executor``."""
        node: Any = self.settings
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    @property
    def grids(self) -> Dict[str, Any]:
        return self.settings['grids']

    @property
    def projection(self) -> Dict[str, Any]:
        return self.settings['projection']

    @property
    def processing_bounds(self) -> Dict[str, Any]:
        return self.settings['processing_bounds']

    @property
    def logging(self) -> Dict[str, Any]:
        return self.settings['logging']

    @property
    def paths(self) -> Dict[str, Any]:
        return self.settings['paths']


# Global configuration instance
config = Config()
