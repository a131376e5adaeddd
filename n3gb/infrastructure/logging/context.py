"""Scoping of log records to a single grid build."""

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from .structured_logger import (
    get_logger, operation_context, source_context, zoom_context
)

logger = get_logger(__name__)


@contextmanager
def grid_operation(operation: str,
                   zoom: Optional[int] = None,
                   source: Optional[str] = None,
                   level: int = logging.DEBUG) -> Iterator[Dict[str, Any]]:
    """
    Tag every record logged inside the block with operation, zoom and source.

    Yields a dict the block can fill with metrics (``cells_generated``,
    ``candidates``, ...). On normal exit one performance record with the
    elapsed time and those metrics is logged; exceptions propagate without one.

    Example:
        with grid_operation('from_polygon', zoom=10, source='polygon') as metrics:
            cells = ...
            metrics['cells_generated'] = len(cells)
    """
    tokens = [(operation_context, operation_context.set(operation))]
    if zoom is not None:
        tokens.append((zoom_context, zoom_context.set(zoom)))
    if source is not None:
        tokens.append((source_context, source_context.set(source)))

    metrics: Dict[str, Any] = {}
    started = time.perf_counter()
    try:
        yield metrics
        logger.log_performance(operation, time.perf_counter() - started, level=level, **metrics)
    finally:
        while tokens:
            var, token = tokens.pop()
            var.reset(token)
