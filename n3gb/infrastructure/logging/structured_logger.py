"""Structured logger carrying grid-operation context on every record."""

import logging
import sys
import time
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Set by grid_operation; read on every record
operation_context: ContextVar[Optional[str]] = ContextVar('operation', default=None)
zoom_context: ContextVar[Optional[int]] = ContextVar('zoom', default=None)
source_context: ContextVar[Optional[str]] = ContextVar('source', default=None)

_GRID_VARS = (
    ('operation', operation_context),
    ('zoom', zoom_context),
    ('source', source_context),
)


def current_grid_context() -> Dict[str, Any]:
    """Operation, zoom and source of the enclosing grid operation; unset keys are omitted."""
    values = ((name, var.get()) for name, var in _GRID_VARS)
    return {name: value for name, value in values if value is not None}


def _traceback_text(exc_info) -> Optional[str]:
    if isinstance(exc_info, BaseException):
        exc_info = (type(exc_info), exc_info, exc_info.__traceback__)
    elif not isinstance(exc_info, tuple):
        exc_info = sys.exc_info()
    if exc_info[0] is None:
        return None
    return ''.join(traceback.format_exception(*exc_info))


class StructuredLogger(logging.Logger):
    """
    Logger whose records carry ``context``, ``performance`` and ``traceback``
    attributes for the formatters.

    ``context`` merges the grid context vars, fields added with
    ``add_context`` and any ``extra={'context': {...}}`` passed by the caller,
    later sources winning.
    """

    def __init__(self, name: str):
        super().__init__(name)
        self._bound: Dict[str, Any] = {}
        self._timers: Dict[str, float] = {}

    def _log(self, level, msg, args, exc_info=None, extra=None, stack_info=False, **kwargs):
        fields = dict(extra) if isinstance(extra, dict) else {}

        context = current_grid_context()
        context['logger_name'] = self.name
        context['timestamp'] = datetime.now(timezone.utc).isoformat()
        context.update(self._bound)
        context.update(fields.pop('context', None) or {})

        tb = fields.pop('traceback', None)
        if tb is None and exc_info:
            tb = _traceback_text(exc_info)

        fields['context'] = context
        fields['performance'] = fields.pop('performance', None)
        fields['traceback'] = tb
        super()._log(level, msg, args, exc_info=False, extra=fields,
                     stack_info=stack_info, **kwargs)

    def add_context(self, **fields):
        """Attach fields to every later record from this logger."""
        self._bound.update(fields)

    def clear_context(self):
        self._bound = {}

    def start_operation(self, operation: str):
        self._timers[operation] = time.perf_counter()

    def end_operation(self, operation: str, **metrics):
        """Log the time since ``start_operation(operation)``."""
        started = self._timers.pop(operation, None)
        if started is None:
            self.warning("end_operation(%r) called without start_operation", operation)
            return
        self.log_performance(operation, time.perf_counter() - started, **metrics)

    def log_performance(self, operation: str, duration: float,
                        level: int = logging.DEBUG, **metrics):
        """
        Record how long an operation took.

        ``cells_generated`` in ``metrics`` also yields ``cells_per_second``.

        Example:
            logger.log_performance('from_extent', 0.42, cells_generated=1200)
        """
        performance = {'operation': operation, 'duration_seconds': round(duration, 3)}
        performance.update(metrics)

        cells = metrics.get('cells_generated')
        if cells is not None and duration > 0:
            performance['cells_per_second'] = round(cells / duration, 2)

        self.log(level, "%s finished in %.3fs", operation, duration,
                 extra={'performance': performance})


_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """
    Structured logger for ``name``, created once and cached.

    Example:
        from n3gb.infrastructure.logging import get_logger
        logger = get_logger(__name__)
    """
    logger = _loggers.get(name)
    if logger is not None:
        return logger

    existing = logging.Logger.manager.loggerDict.get(name)
    if isinstance(existing, logging.Logger) and not isinstance(existing, StructuredLogger):
        # Name already taken by a plain logger: hang a detached structured
        # logger below it so records still reach its handlers.
        logger = StructuredLogger(name)
        logger.parent = existing
    else:
        previous_class = logging.getLoggerClass()
        logging.setLoggerClass(StructuredLogger)
        try:
            logger = logging.getLogger(name)
        finally:
            logging.setLoggerClass(previous_class)

    _loggers[name] = logger
    return logger
