"""Rotating JSON-lines log file."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from ..formatters import JsonFormatter

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 3


class FileHandler(RotatingFileHandler):
    """Size-rotated JSON log file; missing parent directories are created."""

    def __init__(self,
                 filename: Union[str, Path],
                 max_bytes: int = DEFAULT_MAX_BYTES,
                 backup_count: int = DEFAULT_BACKUP_COUNT,
                 encoding: str = 'utf-8'):
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(str(path), maxBytes=max_bytes, backupCount=backup_count, encoding=encoding)
        self.setFormatter(JsonFormatter())
        self.setLevel(logging.DEBUG)

    @classmethod
    def from_config(cls, config, filename: Optional[Union[str, Path]] = None) -> 'FileHandler':
        """
        Handler for ``filename``, falling back to ``logging.file`` and then to
        ``n3gb.log`` under ``paths.logs_dir``. Rotation follows
        ``logging.max_file_size`` and ``logging.backup_count``.
        """
        if filename is None:
            filename = config.get('logging.file') or \
                Path(config.get('paths.logs_dir', 'logs')) / 'n3gb.log'
        return cls(
            filename,
            max_bytes=config.get('logging.max_file_size', DEFAULT_MAX_BYTES),
            backup_count=config.get('logging.backup_count', DEFAULT_BACKUP_COUNT),
        )
