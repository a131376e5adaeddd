"""Root logger configuration for applications using n3gb."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .handlers import ConsoleHandler, FileHandler
from .structured_logger import get_logger


def _level(name) -> int:
    return getattr(logging, str(name).upper(), logging.INFO)


def _reset_root(level: int) -> logging.Logger:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(level)
    return root


def setup_logging(config,
                  log_file: Optional[Union[str, Path]] = None,
                  console: bool = True,
                  log_level: Optional[str] = None):
    """
    Route logs to the console (human format) and a rotating JSON file.

    Handlers already on the root logger are replaced.

    Args:
        config: Config instance (anything with a dot-notation ``get``)
        log_file: Log file path (defaults to ``logging.file``)
        console: Also log to stderr
        log_level: Root level (defaults to ``logging.level``)
    """
    level_name = str(log_level or config.get('logging.level', 'INFO')).upper()
    level = _level(level_name)
    root = _reset_root(level)

    if console:
        root.addHandler(ConsoleHandler(level=level))
    file_handler = FileHandler.from_config(config, log_file)
    root.addHandler(file_handler)

    get_logger(__name__).info(
        "Logging to %s", file_handler.baseFilename,
        extra={'context': {'log_level': level_name, 'console': console}}
    )


def setup_simple_logging(log_level: str = 'INFO'):
    """Console-only logging for scripts and debugging."""
    level = _level(log_level)
    _reset_root(level).addHandler(ConsoleHandler(level=level))


def get_log_stats() -> Dict[str, Any]:
    """Rotation settings of the root logger's log file, or {} without one."""
    for handler in logging.getLogger().handlers:
        if isinstance(handler, FileHandler):
            return {
                'file': {
                    'filename': handler.baseFilename,
                    'max_bytes': handler.maxBytes,
                    'backup_count': handler.backupCount,
                }
            }
    return {}
