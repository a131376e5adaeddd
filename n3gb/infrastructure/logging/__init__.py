"""Structured logging infrastructure for grid operations."""

from .structured_logger import (
    StructuredLogger, get_logger, current_grid_context,
    operation_context, zoom_context, source_context
)
from .context import grid_operation
from .decorators import log_operation
from .setup import setup_logging, setup_simple_logging, get_log_stats

__all__ = [
    'StructuredLogger',
    'get_logger',
    'current_grid_context',
    'operation_context',
    'zoom_context',
    'source_context',
    'grid_operation',
    'log_operation',
    'setup_logging',
    'setup_simple_logging',
    'get_log_stats'
]
